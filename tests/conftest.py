import pytest
import pytest_asyncio

from services.database_service.memory import InMemoryRecordStore
from services.store_service.client import EcommerceClient
from tests.factories import ProductFactory


@pytest.fixture
def store() -> InMemoryRecordStore:
    """A fresh in-process Record Store per test."""
    return InMemoryRecordStore()


@pytest.fixture
def shop(store) -> EcommerceClient:
    return EcommerceClient(store)


@pytest_asyncio.fixture
async def make_product(shop):
    """Create products through the catalog with sensible defaults."""

    async def _make(**overrides):
        return await shop.create_product(ProductFactory.create(**overrides))

    return _make
