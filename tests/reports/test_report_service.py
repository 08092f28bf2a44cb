from __future__ import annotations

import asyncio
from decimal import Decimal

from src.workboard.workboard.container import build_container
from src.workboard.workboard.storage.memory_store import InMemoryRecordStore


def _seeded():
    c = build_container(store=InMemoryRecordStore())

    async def seed():
        await c.worker_registry.add_worker("W2", "Bimal", "Carpenter")
        await c.worker_registry.add_worker("W1", "Alice", "Mason")
        await c.ledger_engine.add_work_record("W1", "01/03/2024", "Plastering", "3000")
        await c.ledger_engine.add_work_record("W1", "02/03/2024", "Brick laying", "2000")
        await c.ledger_engine.add_payment_record("W1", "05/03/2024", "2000", "Cash")
        await c.ledger_engine.add_payment_record("W2", "05/03/2024", "500", "Advance")

    asyncio.run(seed())
    return c


def test_worker_report_carries_records_and_totals():
    c = _seeded()
    ledger = asyncio.run(c.report_service.build_worker_report("W1"))

    assert ledger.worker.name == "Alice"
    assert [r.date for r in ledger.work_records] == ["2024-03-02", "2024-03-01"]
    assert len(ledger.payment_records) == 1
    assert ledger.balance == Decimal("3000")
    assert ledger.to_dict()["totalEarned"] == "5000"


def test_worker_report_for_unknown_worker_is_none():
    c = _seeded()
    assert asyncio.run(c.report_service.build_worker_report("ghost")) is None


def test_all_workers_report_in_name_order_with_grand_totals():
    c = _seeded()
    report = asyncio.run(c.report_service.build_all_workers_report())

    assert [l.worker.worker_id for l in report.ledgers] == ["W1", "W2"]
    assert report.grand_total_earned == Decimal("5000")
    assert report.grand_total_paid == Decimal("2500")
    assert report.grand_balance == Decimal("2500")
    assert report.ledgers[1].balance == Decimal("-500")
