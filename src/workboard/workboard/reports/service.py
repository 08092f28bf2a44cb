from __future__ import annotations

import asyncio
from typing import Optional

from ..ledger.service import LedgerEngine
from ..workers.model import Worker
from ..workers.service import WorkerRegistry
from .model import AllWorkersReport, WorkerLedger


class ReportService:
    """Builds already-computed ledger data for the report exporter."""

    def __init__(self, registry: WorkerRegistry, ledger: LedgerEngine):
        self._registry = registry
        self._ledger = ledger

    async def _ledger_for(self, worker: Worker) -> WorkerLedger:
        works, payments = await asyncio.gather(
            self._ledger.get_work_records_by_worker(worker.worker_id),
            self._ledger.get_payments_by_worker(worker.worker_id),
        )
        totals = self._ledger.totals_for(works, payments)
        return WorkerLedger(
            worker=worker,
            work_records=works,
            payment_records=payments,
            total_earned=totals.total_earned,
            total_paid=totals.total_paid,
        )

    async def build_worker_report(self, worker_id: str) -> Optional[WorkerLedger]:
        worker = await self._registry.get_worker(worker_id)
        if not worker:
            return None
        return await self._ledger_for(worker)

    async def build_all_workers_report(self) -> AllWorkersReport:
        workers = await self._registry.list_workers()
        # Independent reads; gather keeps the name order of ``workers``.
        ledgers = await asyncio.gather(*(self._ledger_for(w) for w in workers))
        return AllWorkersReport(ledgers=list(ledgers))
