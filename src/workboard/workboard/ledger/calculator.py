from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable

from .model import LedgerTotals, PaymentRecord, WorkRecord


class BalanceCalculator(ABC):
    """Calculator interface (Strategy Pattern for ledger totals)."""

    @abstractmethod
    def total_earned(self, records: Iterable[WorkRecord]) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def total_paid(self, records: Iterable[PaymentRecord]) -> Decimal:
        raise NotImplementedError

    def totals(self, works: Iterable[WorkRecord], payments: Iterable[PaymentRecord]) -> LedgerTotals:
        return LedgerTotals(total_earned=self.total_earned(works), total_paid=self.total_paid(payments))


class StandardBalanceCalculator(BalanceCalculator):
    """Standard rule: plain sums; balance = earned - paid, negative allowed."""

    def total_earned(self, records: Iterable[WorkRecord]) -> Decimal:
        return sum((r.earned_amount for r in records), Decimal("0"))

    def total_paid(self, records: Iterable[PaymentRecord]) -> Decimal:
        return sum((r.amount for r in records), Decimal("0"))
