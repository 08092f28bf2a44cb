from __future__ import annotations

import asyncio
import re
from datetime import date

from src.workboard.workboard.container import build_container
from src.workboard.workboard.reports.model import AllWorkersReport
from src.workboard.workboard.reports.pdf_exporter import (
    PdfReportExporter,
    all_workers_report_filename,
    worker_report_filename,
)
from src.workboard.workboard.storage.memory_store import InMemoryRecordStore


def _page_count(content: bytes) -> int:
    return len(re.findall(rb"/Type /Page\b", content))


def _report_inputs():
    c = build_container(store=InMemoryRecordStore())

    async def build():
        await c.worker_registry.add_worker("W1", "Alice de Silva", "Mason")
        await c.worker_registry.add_worker("W2", "Bimal", "Carpenter")
        for day in range(1, 29):
            await c.ledger_engine.add_work_record("W1", f"{day:02d}/02/2024", "Plastering & <tiling>", "1250.75")
        await c.ledger_engine.add_payment_record("W1", "29/02/2024", "5000", "Cash", "Monthly")
        await c.ledger_engine.add_payment_record("W2", "29/02/2024", "100", "Cash")
        return (
            await c.report_service.build_worker_report("W1"),
            await c.report_service.build_all_workers_report(),
        )

    return asyncio.run(build())


def test_filenames():
    ledger, _ = _report_inputs()
    assert worker_report_filename(ledger) == "Worker_W1_Alice_de_Silva.pdf"
    assert all_workers_report_filename(date(2024, 3, 1)) == "All_Workers_Report_2024-03-01.pdf"


def test_render_worker_produces_pdf_bytes():
    ledger, _ = _report_inputs()
    content = PdfReportExporter().render_worker(ledger, today=date(2024, 3, 1))
    assert content.startswith(b"%PDF")
    # 28 work rows plus profile and summary do not fit on one A4 page
    assert _page_count(content) >= 2


def test_render_all_workers_and_save(tmp_path):
    _, report = _report_inputs()
    exporter = PdfReportExporter(currency_label="USD")
    content = exporter.render_all_workers(report, today=date(2024, 3, 1))
    path = exporter.save(content, tmp_path / "out", all_workers_report_filename(date(2024, 3, 1)))

    assert content.startswith(b"%PDF")
    assert path.read_bytes() == content
    # worker sections, then the overall summary on its own page
    assert _page_count(content) >= 2


def test_render_all_workers_with_no_workers():
    content = PdfReportExporter().render_all_workers(AllWorkersReport(), today=date(2024, 3, 1))
    assert content.startswith(b"%PDF")
