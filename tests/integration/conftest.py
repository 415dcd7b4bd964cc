import pytest
from services.auth_service.client import AuthClient
from services.database_service.client import DatabaseClient
from services.payments_service.client import PaymentsClient
from tests.stubs import BASE_URL, RoutingTransport


@pytest.fixture
def platform() -> RoutingTransport:
    return RoutingTransport()


@pytest.fixture
def db_client(platform) -> DatabaseClient:
    return DatabaseClient(
        project_id="proj-1",
        database_token="db-token",
        base_url=BASE_URL,
        transport=platform.transport,
    )


@pytest.fixture
def auth_client(platform) -> AuthClient:
    return AuthClient(
        app_id="app-1",
        app_secret="secret-1",
        base_url=BASE_URL,
        transport=platform.transport,
    )


@pytest.fixture
def payments_client(platform) -> PaymentsClient:
    return PaymentsClient(
        app_id="app-1",
        app_secret="secret-1",
        base_url=BASE_URL,
        transport=platform.transport,
    )
