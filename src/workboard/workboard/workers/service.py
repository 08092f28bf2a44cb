from __future__ import annotations

import logging
import unicodedata
from typing import List, Optional

from ..cascade.coordinator import CascadeCoordinator
from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from ..core.exceptions import DuplicateIdError, NotFoundError
from ..core.result import returns_result
from .model import Worker
from .repository import WorkerRepository

logger = logging.getLogger(__name__)


def name_sort_key(worker: Worker) -> tuple[str, str]:
    # Accent-insensitive, case-insensitive ordering; id keeps equal names stable.
    folded = unicodedata.normalize("NFKD", worker.name).casefold()
    base = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return base, worker.worker_id


class WorkerRegistry:
    """Use case: manage workers and their (mutable) identity."""

    def __init__(self, workers: WorkerRepository, cascades: CascadeCoordinator):
        self._workers = workers
        self._cascades = cascades

    @returns_result("Worker added successfully", "save worker")
    async def add_worker(self, worker_id: str, name: str, job_role: str) -> Worker:
        worker_id = require_non_empty(worker_id, "Worker ID")
        name = require_non_empty(name, "Name")
        job_role = require_non_empty(job_role, "Job role")

        if await self._workers.get(worker_id):
            raise DuplicateIdError("Worker ID already exists")

        worker = Worker(worker_id=worker_id, name=name, job_role=job_role, created_at=now_utc())
        # A concurrent add can pass the check above; the create itself is atomic.
        if not await self._workers.create(worker):
            raise DuplicateIdError("Worker ID already exists")

        logger.info("Added worker %s", worker_id)
        return worker

    async def get_worker(self, worker_id: str) -> Optional[Worker]:
        return await self._workers.get(worker_id)

    async def list_workers(self) -> List[Worker]:
        return sorted(await self._workers.list_all(), key=name_sort_key)

    @returns_result("Worker updated successfully", "update worker")
    async def update_worker(
        self,
        current_id: str,
        *,
        new_id: Optional[str] = None,
        name: Optional[str] = None,
        job_role: Optional[str] = None,
    ) -> Worker:
        if new_id is not None:
            new_id = require_non_empty(new_id, "Worker ID")
        if name is not None:
            name = require_non_empty(name, "Name")
        if job_role is not None:
            job_role = require_non_empty(job_role, "Job role")

        if not await self._workers.get(current_id):
            raise NotFoundError("Worker not found")

        target_id = current_id
        if new_id is not None and new_id != current_id:
            await self._cascades.rename(current_id, new_id)
            logger.info("Renamed worker %s -> %s", current_id, new_id)
            target_id = new_id

        try:
            await self._workers.update_fields(target_id, name=name, job_role=job_role)
        except NotFoundError:
            raise NotFoundError("Worker not found")
        return await self._workers.get(target_id)

    @returns_result("Worker and all related records deleted successfully", "delete worker")
    async def delete_worker(self, worker_id: str) -> None:
        await self._cascades.delete(worker_id)
        logger.info("Deleted worker %s with related records", worker_id)
