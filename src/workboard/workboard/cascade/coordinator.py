from __future__ import annotations

import logging
from dataclasses import replace
from typing import Awaitable, Callable, List, Sequence, Tuple

from ..core.constants import WORKER_ID_FIELD
from ..core.enums import Collection
from ..core.exceptions import DuplicateIdError, NotFoundError, PartialCascadeFailure
from ..storage.store import RecordStore
from ..workers.model import Worker
from ..workers.repository import WorkerRepository

logger = logging.getLogger(__name__)

Step = Tuple[str, Callable[[], Awaitable[None]]]

REFERENCING_COLLECTIONS = (Collection.WORKS, Collection.PAYMENTS)


class CascadeCoordinator:
    """Multi-collection mutations for a worker identity, run as ordered steps.

    Steps are separate store units (no cross-step transaction). They are
    ordered so a failure leaves a duplicate-but-reachable worker rather than
    records pointing at a deleted one:

    rename: create new id -> re-point works -> re-point payments -> delete old id
    delete: delete works -> delete payments -> delete worker

    A failure after at least one committed step raises PartialCascadeFailure.
    Re-running a failed rename resumes it: a worker at the new id that was
    created from the old one counts as step 1 already done.
    """

    def __init__(self, store: RecordStore, workers: WorkerRepository):
        self._store = store
        self._workers = workers

    async def rename(self, old_id: str, new_id: str) -> Worker:
        old = await self._workers.get(old_id)
        if not old:
            raise NotFoundError("Worker not found")

        renamed = replace(old, worker_id=new_id, renamed_from=old_id)
        existing = await self._workers.get(new_id)
        resuming = existing is not None and self._is_resume_of(existing, old)
        if existing is not None and not resuming:
            raise DuplicateIdError("Worker ID already exists")

        async def create_new_identity() -> None:
            if not await self._workers.create(renamed):
                raise DuplicateIdError("Worker ID already exists")

        steps: List[Step] = []
        if resuming:
            logger.info("Resuming rename %s -> %s: new worker already present", old_id, new_id)
        else:
            steps.append(("create worker " + new_id, create_new_identity))
        steps.extend(
            (f"re-point {c.value}", lambda c=c: self._repoint(c, old_id, new_id)) for c in REFERENCING_COLLECTIONS
        )
        steps.append(("delete worker " + old_id, lambda: self._workers.delete(old_id)))

        done = ["create worker " + new_id] if resuming else []
        await self._run("rename worker", steps, already_committed=done)
        return existing if resuming else renamed

    async def delete(self, worker_id: str) -> None:
        if not await self._workers.get(worker_id):
            raise NotFoundError("Worker not found")

        steps: List[Step] = [
            (f"delete {c.value}", lambda c=c: self._delete_referencing(c, worker_id)) for c in REFERENCING_COLLECTIONS
        ]
        steps.append(("delete worker " + worker_id, lambda: self._workers.delete(worker_id)))
        await self._run("delete worker", steps)

    @staticmethod
    def _is_resume_of(candidate: Worker, old: Worker) -> bool:
        return candidate.renamed_from == old.worker_id and candidate.created_at == old.created_at

    async def _repoint(self, collection: Collection, old_id: str, new_id: str) -> None:
        docs = await self._store.query_by_field(collection, WORKER_ID_FIELD, old_id)
        if not docs:
            return
        batch = self._store.batch()
        for doc_id, _ in docs:
            batch.update(collection, doc_id, {WORKER_ID_FIELD: new_id})
        await batch.commit()
        logger.info("Re-pointed %d %s from %s to %s", len(docs), collection.value, old_id, new_id)

    async def _delete_referencing(self, collection: Collection, worker_id: str) -> None:
        docs = await self._store.query_by_field(collection, WORKER_ID_FIELD, worker_id)
        if not docs:
            return
        batch = self._store.batch()
        for doc_id, _ in docs:
            batch.delete(collection, doc_id)
        await batch.commit()
        logger.info("Deleted %d %s of worker %s", len(docs), collection.value, worker_id)

    async def _run(self, cascade: str, steps: Sequence[Step], *, already_committed: Sequence[str] = ()) -> None:
        committed = list(already_committed)
        for label, step in steps:
            logger.info("%s: %s", cascade, label)
            try:
                await step()
            except Exception as e:
                logger.error("%s failed at '%s' after %s: %s", cascade, label, committed or "no steps", e)
                if not committed:
                    raise
                raise PartialCascadeFailure(cascade, label, committed, e) from e
            committed.append(label)
