from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List

from ..ledger.model import PaymentRecord, WorkRecord
from ..workers.model import Worker


@dataclass(frozen=True)
class WorkerLedger:
    """Read-model handed to the exporter for one worker."""

    worker: Worker
    work_records: List[WorkRecord]
    payment_records: List[PaymentRecord]
    total_earned: Decimal
    total_paid: Decimal

    @property
    def balance(self) -> Decimal:
        return self.total_earned - self.total_paid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "worker": self.worker.to_dict(),
            "workRecords": [r.to_dict() for r in self.work_records],
            "paymentRecords": [r.to_dict() for r in self.payment_records],
            "totalEarned": str(self.total_earned),
            "totalPaid": str(self.total_paid),
            "balance": str(self.balance),
        }


@dataclass(frozen=True)
class AllWorkersReport:
    ledgers: List[WorkerLedger] = field(default_factory=list)

    @property
    def grand_total_earned(self) -> Decimal:
        return sum((l.total_earned for l in self.ledgers), Decimal("0"))

    @property
    def grand_total_paid(self) -> Decimal:
        return sum((l.total_paid for l in self.ledgers), Decimal("0"))

    @property
    def grand_balance(self) -> Decimal:
        return self.grand_total_earned - self.grand_total_paid
