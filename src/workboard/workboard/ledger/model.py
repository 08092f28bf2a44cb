from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from ..common.datetime_utils import convert_date_to_display
from ..workers.model import _parse_timestamp


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


@dataclass(frozen=True)
class WorkRecord:
    """Domain entity: one piece of work done by a worker."""

    record_id: str
    worker_id: str
    date: str  # YYYY-MM-DD
    work_type: str
    earned_amount: Decimal
    created_at: Optional[datetime] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "workerId": self.worker_id,
            "date": self.date,
            "workType": self.work_type,
            "earnedAmount": str(self.earned_amount),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_document(cls, record_id: str, doc: Dict[str, Any]) -> "WorkRecord":
        return cls(
            record_id=record_id,
            worker_id=str(doc.get("workerId", "")),
            date=str(doc.get("date", "")),
            work_type=str(doc.get("workType", "")),
            earned_amount=_decimal(doc.get("earnedAmount")),
            created_at=_parse_timestamp(doc.get("createdAt")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.record_id,
            "workerId": self.worker_id,
            "date": self.date,
            "displayDate": convert_date_to_display(self.date),
            "workType": self.work_type,
            "earnedAmount": str(self.earned_amount),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class PaymentRecord:
    """Domain entity: one payment made to a worker."""

    record_id: str
    worker_id: str
    date: str  # YYYY-MM-DD
    amount: Decimal
    payment_type: str
    note: str = ""
    created_at: Optional[datetime] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "workerId": self.worker_id,
            "date": self.date,
            "amount": str(self.amount),
            "paymentType": self.payment_type,
            "note": self.note,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_document(cls, record_id: str, doc: Dict[str, Any]) -> "PaymentRecord":
        return cls(
            record_id=record_id,
            worker_id=str(doc.get("workerId", "")),
            date=str(doc.get("date", "")),
            amount=_decimal(doc.get("amount")),
            payment_type=str(doc.get("paymentType", "")),
            note=str(doc.get("note") or ""),
            created_at=_parse_timestamp(doc.get("createdAt")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.record_id,
            "workerId": self.worker_id,
            "date": self.date,
            "displayDate": convert_date_to_display(self.date),
            "amount": str(self.amount),
            "paymentType": self.payment_type,
            "note": self.note,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class LedgerTotals:
    """Derived per-worker aggregates; never stored."""

    total_earned: Decimal
    total_paid: Decimal

    @property
    def balance(self) -> Decimal:
        return self.total_earned - self.total_paid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalEarned": str(self.total_earned),
            "totalPaid": str(self.total_paid),
            "balance": str(self.balance),
        }
