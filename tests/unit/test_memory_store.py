"""Unit tests for the in-process Record Store."""

import asyncio

import pytest
from libs.common.service_client import ApiError


@pytest.mark.asyncio
@pytest.mark.unit
async def test_insert_assigns_id_and_copies(store):
    record = {"name": "Cap", "tags": ["a"]}

    stored = await store.insert("products", record)
    record["tags"].append("mutated")

    assert stored["id"]
    fetched = await store.get("products", stored["id"])
    assert fetched["tags"] == ["a"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_insert_duplicate_id_conflicts(store):
    await store.insert("products", {"id": "p-1"})

    with pytest.raises(ApiError) as exc_info:
        await store.insert("products", {"id": "p-1"})

    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
@pytest.mark.unit
async def test_query_where_order_and_page(store):
    for i, category in enumerate(["a", "b", "a", "a"]):
        await store.insert("products", {"id": f"p-{i}", "category": category, "price": i})
    await store.insert("products", {"id": "p-x", "category": "a"})

    rows = await store.query(
        "products",
        where={"category": "a"},
        order_by="price",
        order_direction="desc",
        limit=2,
    )
    # Records without the sort field come last ascending, first descending
    assert [r["id"] for r in rows] == ["p-x", "p-3"]

    ascending = await store.query("products", where={"category": "a"}, order_by="price")
    assert [r["id"] for r in ascending] == ["p-0", "p-2", "p-3", "p-x"]

    page = await store.query(
        "products", where={"category": "a"}, order_by="price", offset=1, limit=2
    )
    assert [r["id"] for r in page] == ["p-2", "p-3"]
    assert await store.count("products", {"category": "a"}) == 4
    assert await store.count("products") == 5


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_merges_and_keeps_id(store):
    await store.insert("products", {"id": "p-1", "name": "Cap", "stock": 1})

    stored = await store.update("products", "p-1", {"stock": 2, "id": "other"})

    assert stored == {"id": "p-1", "name": "Cap", "stock": 2}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_missing_record(store):
    with pytest.raises(ApiError) as exc_info:
        await store.update("products", "missing", {"stock": 1})

    assert exc_info.value.is_not_found


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_if_compares_expected_fields(store):
    await store.insert("products", {"id": "p-1", "stock": 5})

    assert await store.update_if("products", "p-1", {"stock": 4}, {"stock": 3}) is None
    stored = await store.update_if("products", "p-1", {"stock": 5}, {"stock": 3})

    assert stored["stock"] == 3
    assert await store.update_if("products", "missing", {}, {"stock": 1}) is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_if_serialises_concurrent_writers(store):
    """Only one of several writers racing on the same value wins."""
    await store.insert("products", {"id": "p-1", "stock": 5})

    results = await asyncio.gather(
        *(
            store.update_if("products", "p-1", {"stock": 5}, {"stock": 4})
            for _ in range(5)
        )
    )

    assert sum(r is not None for r in results) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_and_kv(store):
    await store.insert("carts", {"id": "c-1"})
    assert await store.delete("carts", "c-1") is True
    assert await store.delete("carts", "c-1") is False

    await store.set_kv("flags", {"beta": True})
    assert await store.get_kv("flags") == {"beta": True}
    assert await store.delete_kv("flags") is True
    assert await store.get_kv("flags") is None
