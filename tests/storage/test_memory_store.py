from __future__ import annotations

import asyncio

import pytest

from src.workboard.workboard.core.enums import Collection
from src.workboard.workboard.core.exceptions import NotFoundError, StoreUnavailableError
from src.workboard.workboard.storage.maintenance import check_store, clear_all_data
from src.workboard.workboard.storage.memory_store import InMemoryRecordStore


def test_create_if_absent_only_creates_once():
    store = InMemoryRecordStore()

    async def scenario():
        first = await store.create_if_absent(Collection.WORKERS, "W1", {"name": "Alice"})
        second = await store.create_if_absent(Collection.WORKERS, "W1", {"name": "Mallory"})
        return first, second, await store.get(Collection.WORKERS, "W1")

    first, second, doc = asyncio.run(scenario())
    assert (first, second) == (True, False)
    assert doc == {"name": "Alice"}


def test_documents_are_copied_in_and_out():
    store = InMemoryRecordStore()
    original = {"name": "Alice", "tags": ["a"]}

    async def scenario():
        await store.put(Collection.WORKERS, "W1", original)
        original["tags"].append("b")
        fetched = await store.get(Collection.WORKERS, "W1")
        fetched["name"] = "changed"
        return await store.get(Collection.WORKERS, "W1")

    assert asyncio.run(scenario()) == {"name": "Alice", "tags": ["a"]}


def test_query_by_field_and_update_merge():
    store = InMemoryRecordStore()

    async def scenario():
        a = await store.add(Collection.WORKS, {"workerId": "W1", "workType": "x"})
        await store.add(Collection.WORKS, {"workerId": "W2", "workType": "y"})
        await store.update(Collection.WORKS, a, {"workType": "z"})
        return a, await store.query_by_field(Collection.WORKS, "workerId", "W1")

    a, rows = asyncio.run(scenario())
    assert rows == [(a, {"workerId": "W1", "workType": "z"})]


def test_update_of_missing_document_fails():
    store = InMemoryRecordStore()
    with pytest.raises(NotFoundError, match="No document to update: works/nope"):
        asyncio.run(store.update(Collection.WORKS, "nope", {"date": "2024-01-01"}))


def test_batch_is_all_or_nothing():
    store = InMemoryRecordStore({"works": {"r1": {"workerId": "W1"}}})

    async def scenario():
        batch = store.batch()
        batch.update(Collection.WORKS, "r1", {"workerId": "W2"})
        batch.update(Collection.WORKS, "missing", {"workerId": "W2"})
        with pytest.raises(NotFoundError):
            await batch.commit()
        with pytest.raises(RuntimeError):
            await batch.commit()
        return await store.get(Collection.WORKS, "r1")

    assert asyncio.run(scenario()) == {"workerId": "W1"}


def test_clear_all_data_keeps_admin_credentials():
    store = InMemoryRecordStore(
        {
            "workers": {"W1": {"name": "Alice"}},
            "works": {"r1": {"workerId": "W1"}, "r2": {"workerId": "W1"}},
            "payments": {"p1": {"workerId": "W1"}},
            "admin": {"credentials": {"username": "admin"}},
        }
    )

    async def scenario():
        removed = await clear_all_data(store)
        return (
            removed,
            await store.list_all(Collection.WORKS),
            await store.get(Collection.ADMIN, "credentials"),
            await check_store(store),
        )

    removed, works, admin, healthy = asyncio.run(scenario())
    assert removed == 4
    assert works == []
    assert admin == {"username": "admin"}
    assert healthy is True


def test_check_store_reports_unreachable_store():
    class DownStore(InMemoryRecordStore):
        async def ping(self):
            raise StoreUnavailableError("connection refused")

    assert asyncio.run(check_store(DownStore())) is False


def test_ids_are_case_sensitive():
    store = InMemoryRecordStore()

    async def scenario():
        upper = await store.create_if_absent(Collection.WORKERS, "W1", {"name": "Alice"})
        lower = await store.create_if_absent(Collection.WORKERS, "w1", {"name": "Bob"})
        await store.add(Collection.WORKS, {"workerId": "W1"})
        return (
            upper,
            lower,
            await store.get(Collection.WORKERS, "w1"),
            await store.query_by_field(Collection.WORKS, "workerId", "w1"),
        )

    upper, lower, doc, works = asyncio.run(scenario())
    assert (upper, lower) == (True, True)
    assert doc == {"name": "Bob"}
    assert works == []
