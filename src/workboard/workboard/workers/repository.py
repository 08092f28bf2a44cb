from __future__ import annotations

from typing import List, Optional

from ..core.enums import Collection
from ..storage.store import RecordStore
from .model import Worker


class WorkerRepository:
    """Maps ``workers`` documents to Worker entities."""

    def __init__(self, store: RecordStore):
        self._store = store

    async def get(self, worker_id: str) -> Optional[Worker]:
        doc = await self._store.get(Collection.WORKERS, worker_id)
        return Worker.from_document(worker_id, doc) if doc is not None else None

    async def list_all(self) -> List[Worker]:
        docs = await self._store.list_all(Collection.WORKERS)
        return [Worker.from_document(doc_id, doc) for doc_id, doc in docs]

    async def create(self, worker: Worker) -> bool:
        """Create-if-absent; ``False`` when the id is already taken."""

        return await self._store.create_if_absent(Collection.WORKERS, worker.worker_id, worker.to_document())

    async def update_fields(self, worker_id: str, *, name: Optional[str] = None, job_role: Optional[str] = None) -> None:
        fields = {}
        if name is not None:
            fields["name"] = name
        if job_role is not None:
            fields["jobRole"] = job_role
        if fields:
            await self._store.update(Collection.WORKERS, worker_id, fields)

    async def delete(self, worker_id: str) -> None:
        await self._store.delete(Collection.WORKERS, worker_id)
