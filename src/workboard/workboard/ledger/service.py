from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..common.datetime_utils import normalize_date, now_utc
from ..common.validators import (
    optional_text,
    parse_amount,
    require_non_empty,
    require_non_negative,
    require_positive,
)
from ..core.exceptions import NotFoundError, ValidationError
from ..core.result import returns_result
from ..workers.repository import WorkerRepository
from .calculator import BalanceCalculator, StandardBalanceCalculator
from .model import LedgerTotals, PaymentRecord, WorkRecord
from .repository import PaymentRecordRepository, WorkRecordRepository

logger = logging.getLogger(__name__)

NEGATIVE_EARNED = "Earned amount cannot be negative"
NON_POSITIVE_PAYMENT = "Payment amount must be greater than 0"


class LedgerEngine:
    """Use case: record work and payments, derive per-worker balances.

    Nothing aggregated is stored; totals are recomputed from the records on
    every call.
    """

    def __init__(
        self,
        workers: WorkerRepository,
        works: WorkRecordRepository,
        payments: PaymentRecordRepository,
        *,
        calculator: Optional[BalanceCalculator] = None,
    ):
        self._workers = workers
        self._works = works
        self._payments = payments
        self._calculator = calculator or StandardBalanceCalculator()

    async def _require_worker(self, worker_id: str) -> None:
        if not await self._workers.get(worker_id):
            raise NotFoundError("Worker not found")

    # --- work records ---

    @returns_result("Work record added successfully", "save work record")
    async def add_work_record(self, worker_id: str, date: Any, work_type: str, earned_amount: Any) -> WorkRecord:
        worker_id = require_non_empty(worker_id, "Worker")
        iso_date = normalize_date(date)
        work_type = require_non_empty(work_type, "Work type")
        amount = require_non_negative(parse_amount(earned_amount, "Earned amount"), NEGATIVE_EARNED)

        await self._require_worker(worker_id)

        record = WorkRecord(
            record_id="",
            worker_id=worker_id,
            date=iso_date,
            work_type=work_type,
            earned_amount=amount,
            created_at=now_utc(),
        )
        record_id = await self._works.add(record)
        logger.info("Added work record %s for worker %s", record_id, worker_id)
        return replace(record, record_id=record_id)

    @returns_result("Work record updated successfully", "update work record")
    async def update_work_record(
        self,
        record_id: str,
        *,
        date: Any = None,
        work_type: Optional[str] = None,
        earned_amount: Any = None,
    ) -> WorkRecord:
        fields: Dict[str, Any] = {}
        if date is not None:
            fields["date"] = normalize_date(date)
        if work_type is not None:
            fields["workType"] = require_non_empty(work_type, "Work type")
        if earned_amount is not None:
            amount = require_non_negative(parse_amount(earned_amount, "Earned amount"), NEGATIVE_EARNED)
            fields["earnedAmount"] = str(amount)
        if not fields:
            raise ValidationError("No fields to update")

        if not await self._works.get(record_id):
            raise NotFoundError("Work record not found")

        try:
            await self._works.update_fields(record_id, fields)
        except NotFoundError:
            # deleted by another session after the lookup above
            raise NotFoundError("Work record not found")
        return await self._works.get(record_id)

    @returns_result("Work record deleted successfully", "delete work record")
    async def delete_work_record(self, record_id: str) -> None:
        if not await self._works.get(record_id):
            raise NotFoundError("Work record not found")
        await self._works.delete(record_id)

    async def get_work_record(self, record_id: str) -> Optional[WorkRecord]:
        return await self._works.get(record_id)

    async def get_work_records_by_worker(self, worker_id: str) -> List[WorkRecord]:
        return await self._works.list_by_worker(worker_id)

    async def get_all_work_records(self) -> List[WorkRecord]:
        return await self._works.list_all()

    # --- payment records ---

    @returns_result("Payment record added successfully", "save payment record")
    async def add_payment_record(
        self,
        worker_id: str,
        date: Any,
        amount: Any,
        payment_type: str,
        note: Optional[str] = None,
    ) -> PaymentRecord:
        worker_id = require_non_empty(worker_id, "Worker")
        iso_date = normalize_date(date)
        value = require_positive(parse_amount(amount, "Amount"), NON_POSITIVE_PAYMENT)
        payment_type = require_non_empty(payment_type, "Payment type")

        await self._require_worker(worker_id)

        record = PaymentRecord(
            record_id="",
            worker_id=worker_id,
            date=iso_date,
            amount=value,
            payment_type=payment_type,
            note=optional_text(note),
            created_at=now_utc(),
        )
        record_id = await self._payments.add(record)
        logger.info("Added payment record %s for worker %s", record_id, worker_id)
        return replace(record, record_id=record_id)

    @returns_result("Payment record updated successfully", "update payment record")
    async def update_payment_record(
        self,
        record_id: str,
        *,
        date: Any = None,
        amount: Any = None,
        payment_type: Optional[str] = None,
        note: Optional[str] = None,
    ) -> PaymentRecord:
        fields: Dict[str, Any] = {}
        if date is not None:
            fields["date"] = normalize_date(date)
        if amount is not None:
            fields["amount"] = str(require_positive(parse_amount(amount, "Amount"), NON_POSITIVE_PAYMENT))
        if payment_type is not None:
            fields["paymentType"] = require_non_empty(payment_type, "Payment type")
        if note is not None:
            fields["note"] = optional_text(note)
        if not fields:
            raise ValidationError("No fields to update")

        if not await self._payments.get(record_id):
            raise NotFoundError("Payment record not found")

        try:
            await self._payments.update_fields(record_id, fields)
        except NotFoundError:
            raise NotFoundError("Payment record not found")
        return await self._payments.get(record_id)

    @returns_result("Payment record deleted successfully", "delete payment record")
    async def delete_payment_record(self, record_id: str) -> None:
        if not await self._payments.get(record_id):
            raise NotFoundError("Payment record not found")
        await self._payments.delete(record_id)

    async def get_payment_record(self, record_id: str) -> Optional[PaymentRecord]:
        return await self._payments.get(record_id)

    async def get_payments_by_worker(self, worker_id: str) -> List[PaymentRecord]:
        return await self._payments.list_by_worker(worker_id)

    async def get_all_payments(self) -> List[PaymentRecord]:
        return await self._payments.list_all()

    # --- derived balances ---

    async def total_earned(self, worker_id: str) -> Decimal:
        return self._calculator.total_earned(await self._works.list_by_worker(worker_id))

    async def total_paid(self, worker_id: str) -> Decimal:
        return self._calculator.total_paid(await self._payments.list_by_worker(worker_id))

    async def balance(self, worker_id: str) -> Decimal:
        return (await self.worker_summary(worker_id)).balance

    async def worker_summary(self, worker_id: str) -> LedgerTotals:
        earned, paid = await asyncio.gather(self.total_earned(worker_id), self.total_paid(worker_id))
        return LedgerTotals(total_earned=earned, total_paid=paid)

    def totals_for(self, works: List[WorkRecord], payments: List[PaymentRecord]) -> LedgerTotals:
        """Totals for records already fetched (used by reports)."""

        return self._calculator.totals(works, payments)
