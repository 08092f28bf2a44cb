from __future__ import annotations

from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from ..core.constants import WORKER_ID_FIELD
from ..core.enums import Collection
from ..storage.store import RecordStore
from .model import PaymentRecord, WorkRecord

R = TypeVar("R", WorkRecord, PaymentRecord)


def newest_first(records: List[R]) -> List[R]:
    """Order by business date descending; creation time breaks ties."""

    return sorted(
        records,
        key=lambda r: (r.date, r.created_at.isoformat() if r.created_at else ""),
        reverse=True,
    )


class _RecordRepository(Generic[R]):
    collection: Collection
    factory: Callable[[str, Dict[str, Any]], R]

    def __init__(self, store: RecordStore):
        self._store = store

    def _build(self, doc_id: str, doc: Dict[str, Any]) -> R:
        return type(self).factory(doc_id, doc)

    async def get(self, record_id: str) -> Optional[R]:
        doc = await self._store.get(self.collection, record_id)
        return self._build(record_id, doc) if doc is not None else None

    async def list_by_worker(self, worker_id: str) -> List[R]:
        docs = await self._store.query_by_field(self.collection, WORKER_ID_FIELD, worker_id)
        return newest_first([self._build(doc_id, doc) for doc_id, doc in docs])

    async def list_all(self) -> List[R]:
        docs = await self._store.list_all(self.collection)
        return newest_first([self._build(doc_id, doc) for doc_id, doc in docs])

    async def add(self, record: R) -> str:
        return await self._store.add(self.collection, record.to_document())

    async def update_fields(self, record_id: str, fields: Dict[str, Any]) -> None:
        await self._store.update(self.collection, record_id, fields)

    async def delete(self, record_id: str) -> None:
        await self._store.delete(self.collection, record_id)


class WorkRecordRepository(_RecordRepository[WorkRecord]):
    collection = Collection.WORKS
    factory = WorkRecord.from_document


class PaymentRecordRepository(_RecordRepository[PaymentRecord]):
    collection = Collection.PAYMENTS
    factory = PaymentRecord.from_document

