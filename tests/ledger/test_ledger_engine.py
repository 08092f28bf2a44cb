from __future__ import annotations

import asyncio
from decimal import Decimal

from src.workboard.workboard.container import build_container
from src.workboard.workboard.core.enums import ErrorKind
from src.workboard.workboard.storage.memory_store import InMemoryRecordStore


def _container():
    return build_container(store=InMemoryRecordStore())


def test_balance_is_earned_minus_paid():
    c = _container()
    ledger = c.ledger_engine

    async def scenario():
        await c.worker_registry.add_worker("W1", "Alice", "Mason")
        await ledger.add_work_record("W1", "01/03/2024", "Plastering", "3000")
        await ledger.add_work_record("W1", "02/03/2024", "Brick laying", 2000)
        await ledger.add_payment_record("W1", "05/03/2024", "2000", "Cash")
        return await ledger.worker_summary("W1"), await ledger.balance("W1")

    summary, balance = asyncio.run(scenario())
    assert summary.total_earned == Decimal("5000")
    assert summary.total_paid == Decimal("2000")
    assert summary.balance == balance == Decimal("3000")


def test_totals_do_not_depend_on_insertion_order():
    work = [("01/03/2024", "A", "10.10"), ("02/03/2024", "B", "20.20"), ("03/03/2024", "C", "0")]
    payments = [("04/03/2024", "5.05", "Cash"), ("05/03/2024", "7", "Bank Transfer")]

    async def totals(order):
        c = _container()
        await c.worker_registry.add_worker("W1", "Alice", "Mason")
        for d, t, a in order(work):
            await c.ledger_engine.add_work_record("W1", d, t, a)
        for d, a, t in order(payments):
            await c.ledger_engine.add_payment_record("W1", d, a, t)
        return await c.ledger_engine.worker_summary("W1")

    forward = asyncio.run(totals(list))
    backward = asyncio.run(totals(lambda xs: list(reversed(xs))))
    assert forward == backward
    assert forward.total_earned == Decimal("30.30")
    assert forward.balance == Decimal("18.25")


def test_worker_without_records_has_zero_totals():
    c = _container()

    async def scenario():
        await c.worker_registry.add_worker("W9", "Idle", "Helper")
        return await c.ledger_engine.worker_summary("W9")

    summary = asyncio.run(scenario())
    assert (summary.total_earned, summary.total_paid, summary.balance) == (0, 0, 0)


def test_overpayment_gives_negative_balance():
    c = _container()

    async def scenario():
        await c.worker_registry.add_worker("W1", "Alice", "Mason")
        await c.ledger_engine.add_work_record("W1", "01/03/2024", "Plastering", "100")
        await c.ledger_engine.add_payment_record("W1", "02/03/2024", "250", "Cash")
        return await c.ledger_engine.balance("W1")

    assert asyncio.run(scenario()) == Decimal("-150")


def test_amount_rules():
    c = _container()
    ledger = c.ledger_engine

    async def scenario():
        await c.worker_registry.add_worker("W1", "Alice", "Mason")
        return (
            await ledger.add_payment_record("W1", "01/03/2024", 0, "Cash"),
            await ledger.add_work_record("W1", "01/03/2024", "Plastering", "-1"),
            await ledger.add_work_record("W1", "01/03/2024", "Unpaid trial", "0"),
            await ledger.add_payment_record("W1", "01/03/2024", "abc", "Cash"),
            await ledger.get_payments_by_worker("W1"),
        )

    zero_pay, negative_work, zero_work, junk_pay, payments = asyncio.run(scenario())
    assert zero_pay.error == ErrorKind.VALIDATION
    assert zero_pay.message == "Payment amount must be greater than 0"
    assert negative_work.message == "Earned amount cannot be negative"
    assert zero_work.success
    assert junk_pay.message == "Amount must be a number"
    assert payments == []


def test_records_for_unknown_worker_are_rejected():
    c = _container()

    async def scenario():
        work = await c.ledger_engine.add_work_record("ghost", "01/03/2024", "Plastering", "100")
        return work, await c.ledger_engine.get_all_work_records()

    work, records = asyncio.run(scenario())
    assert work.error == ErrorKind.NOT_FOUND
    assert work.message == "Worker not found"
    assert records == []


def test_dates_are_stored_iso_and_listed_newest_first():
    c = _container()
    ledger = c.ledger_engine

    async def scenario():
        await c.worker_registry.add_worker("W1", "Alice", "Mason")
        await ledger.add_work_record("W1", "01/03/2024", "old", "1")
        await ledger.add_work_record("W1", "15/03/2024", "new", "1")
        bad = await ledger.add_work_record("W1", "31/02/2024", "never", "1")
        return bad, await ledger.get_work_records_by_worker("W1")

    bad, records = asyncio.run(scenario())
    assert bad.error == ErrorKind.VALIDATION
    assert [(r.date, r.work_type) for r in records] == [("2024-03-15", "new"), ("2024-03-01", "old")]
    assert records[0].to_dict()["displayDate"] == "15/03/2024"


def test_update_and_delete_records():
    c = _container()
    ledger = c.ledger_engine

    async def scenario():
        await c.worker_registry.add_worker("W1", "Alice", "Mason")
        added = await ledger.add_payment_record("W1", "01/03/2024", "100", "Cash", "  advance ")
        record_id = added.data.record_id
        empty = await ledger.update_payment_record(record_id)
        updated = await ledger.update_payment_record(record_id, amount="150", note="")
        deleted = await ledger.delete_payment_record(record_id)
        again = await ledger.delete_payment_record(record_id)
        return added, empty, updated, deleted, again, await ledger.total_paid("W1")

    added, empty, updated, deleted, again, paid = asyncio.run(scenario())
    assert added.data.note == "advance"
    assert empty.message == "No fields to update"
    assert updated.success and updated.data.amount == Decimal("150") and updated.data.note == ""
    assert deleted.message == "Payment record deleted successfully"
    assert again.error == ErrorKind.NOT_FOUND
    assert paid == 0


def test_update_work_record_revalidates_amount():
    c = _container()
    ledger = c.ledger_engine

    async def scenario():
        await c.worker_registry.add_worker("W1", "Alice", "Mason")
        added = await ledger.add_work_record("W1", "01/03/2024", "Plastering", "100")
        rejected = await ledger.update_work_record(added.data.record_id, earned_amount="-5")
        moved = await ledger.update_work_record(added.data.record_id, date="02/03/2024", work_type="Tiling")
        missing = await ledger.update_work_record("nope", work_type="x")
        return rejected, moved, missing

    rejected, moved, missing = asyncio.run(scenario())
    assert rejected.error == ErrorKind.VALIDATION
    assert (moved.data.date, moved.data.work_type, moved.data.earned_amount) == ("2024-03-02", "Tiling", Decimal("100"))
    assert missing.message == "Work record not found"


def test_amounts_must_use_plain_decimal_notation():
    c = _container()
    ledger = c.ledger_engine

    async def scenario():
        await c.worker_registry.add_worker("W1", "Alice", "Mason")
        return (
            await ledger.add_payment_record("W1", "01/03/2024", "1_000", "Cash"),
            await ledger.add_work_record("W1", "01/03/2024", "Plastering", "1e3"),
            await ledger.add_work_record("W1", "01/03/2024", "Plastering", " 1500.50 "),
        )

    underscored, exponent, plain = asyncio.run(scenario())
    assert underscored.error == ErrorKind.VALIDATION
    assert underscored.message == "Amount must be a number"
    assert exponent.message == "Earned amount must be a number"
    assert plain.success and plain.data.earned_amount == Decimal("1500.50")


class _VanishingStore(InMemoryRecordStore):
    """Another session deletes the document right before each update lands."""

    async def update(self, collection, doc_id, fields):
        await self.delete(collection, doc_id)
        await super().update(collection, doc_id, fields)


def test_updating_a_record_deleted_concurrently_reports_not_found():
    c = build_container(store=_VanishingStore())
    ledger = c.ledger_engine

    async def scenario():
        await c.worker_registry.add_worker("W1", "Alice", "Mason")
        work = await ledger.add_work_record("W1", "01/03/2024", "Plastering", "100")
        pay = await ledger.add_payment_record("W1", "01/03/2024", "50", "Cash")
        return (
            await ledger.update_work_record(work.data.record_id, work_type="Tiling"),
            await ledger.update_payment_record(pay.data.record_id, amount="60"),
        )

    work, pay = asyncio.run(scenario())
    assert (work.error, work.message) == (ErrorKind.NOT_FOUND, "Work record not found")
    assert (pay.error, pay.message) == (ErrorKind.NOT_FOUND, "Payment record not found")
