from __future__ import annotations

import io
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas as rl_canvas
from reportlab.platypus import KeepTogether, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..common.datetime_utils import convert_date_to_display, format_display_date
from ..common.formatting import format_currency, safe_filename_part
from ..core.constants import DEFAULT_CURRENCY_LABEL
from .model import AllWorkersReport, WorkerLedger

logger = logging.getLogger(__name__)

HEADER_COLOR = colors.HexColor("#2563eb")
BORDER_COLOR = colors.HexColor("#e5e7eb")
SUMMARY_FILL = colors.HexColor("#f5f7fa")
NEGATIVE_COLOR = colors.HexColor("#dc267f")
FOOTER_COLOR = colors.HexColor("#808080")

_MARGIN = 15 * mm


def worker_report_filename(ledger: WorkerLedger) -> str:
    return f"Worker_{ledger.worker.worker_id}_{safe_filename_part(ledger.worker.name)}.pdf"


def all_workers_report_filename(today: date) -> str:
    return f"All_Workers_Report_{today.isoformat()}.pdf"


def _footer_canvas(generated_on: str):
    """Canvas class stamping 'Page i of n' once the page count is known."""

    class FooterCanvas(rl_canvas.Canvas):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self._saved_pages: List[dict] = []

        def showPage(self):
            self._saved_pages.append(dict(self.__dict__))
            self._startPage()

        def save(self):
            total = len(self._saved_pages)
            for state in self._saved_pages:
                self.__dict__.update(state)
                self._draw_footer(total)
                super().showPage()
            super().save()

        def _draw_footer(self, total: int) -> None:
            width, _ = self._pagesize
            self.saveState()
            self.setFont("Helvetica", 8)
            self.setFillColor(FOOTER_COLOR)
            self.drawString(_MARGIN, 8 * mm, f"Generated on {generated_on}")
            self.drawRightString(width - _MARGIN, 8 * mm, f"Page {self._pageNumber} of {total}")
            self.restoreState()

    return FooterCanvas


class PdfReportExporter:
    """Renders computed ledgers into paginated A4 PDFs.

    Pure consumer: it only reads the ledger objects it is given.
    """

    def __init__(self, *, currency_label: str = DEFAULT_CURRENCY_LABEL):
        self._currency = currency_label
        styles = getSampleStyleSheet()
        self._title = ParagraphStyle(
            name="WbTitle", parent=styles["Title"], textColor=colors.white, backColor=HEADER_COLOR,
            alignment=0, fontSize=18, leading=24, borderPadding=(4, 6, 4, 6),
        )
        self._band = ParagraphStyle(
            name="WbBand", parent=self._title, fontSize=13, leading=18,
        )
        self._h2 = ParagraphStyle(name="WbH2", parent=styles["Heading2"], fontSize=12, spaceBefore=6)
        self._body = ParagraphStyle(name="WbBody", parent=styles["Normal"], fontSize=10, leading=13)
        self._cell = ParagraphStyle(name="WbCell", parent=styles["Normal"], fontSize=9, leading=11)

    def _money(self, amount) -> str:
        return format_currency(amount, self._currency)

    def _p(self, text: str, style: Optional[ParagraphStyle] = None) -> Paragraph:
        return Paragraph(escape(text), style or self._body)

    def _table(
        self, header: Sequence[str], rows: List[list], widths: Sequence[float], *, wrap: Sequence[int] = ()
    ) -> Table:
        # Only free-text columns become Paragraphs; plain cells keep TableStyle fonts and colors.
        data = [list(header)] + [[self._p(c, self._cell) if i in wrap else c for i, c in enumerate(r)] for r in rows]
        table = Table(data, colWidths=[w * mm for w in widths], repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("LINEBELOW", (0, 0), (-1, -1), 0.25, BORDER_COLOR),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        return table

    def _summary_box(self, lines: List[tuple[str, bool]]) -> Table:
        data = [[Paragraph(f"<b>{escape(t)}</b>" if bold else escape(t), self._body)] for t, bold in lines]
        box = Table(data, colWidths=[180 * mm])
        box.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), SUMMARY_FILL),
                    ("BOX", (0, 0), (-1, -1), 0.5, BORDER_COLOR),
                ]
            )
        )
        return box

    def _totals_lines(self, ledger: WorkerLedger) -> List[tuple[str, bool]]:
        return [
            (f"Total Earned: {self._money(ledger.total_earned)}", False),
            (f"Total Paid: {self._money(ledger.total_paid)}", False),
            (f"Balance: {self._money(ledger.balance)}", True),
        ]

    def _ledger_story(self, ledger: WorkerLedger) -> list:
        w = ledger.worker
        story: list = [
            self._p("Worker Report", self._title),
            Spacer(1, 6 * mm),
            self._p("Worker Profile", self._h2),
            self._p(f"Worker ID: {w.worker_id}"),
            self._p(f"Name: {w.name}"),
            self._p(f"Job Role: {w.job_role}"),
            Spacer(1, 4 * mm),
        ]

        if ledger.work_records:
            story.append(self._p("Work History", self._h2))
            rows = [
                [convert_date_to_display(r.date), r.work_type, self._money(r.earned_amount)]
                for r in ledger.work_records
            ]
            story.append(self._table(["Date", "Work Type", "Earned Amount"], rows, [35, 95, 50], wrap=(1,)))
            story.append(Spacer(1, 4 * mm))

        if ledger.payment_records:
            story.append(self._p("Payment History", self._h2))
            rows = [
                [convert_date_to_display(r.date), r.payment_type, self._money(r.amount), r.note or "-"]
                for r in ledger.payment_records
            ]
            story.append(self._table(["Date", "Type", "Amount", "Note"], rows, [30, 40, 45, 65], wrap=(1, 3)))
            story.append(Spacer(1, 4 * mm))

        story.append(
            KeepTogether(
                [
                    self._p("Summary", self._h2),
                    self._summary_box(self._totals_lines(ledger)),
                ]
            )
        )
        return story

    def _worker_section(self, ledger: WorkerLedger) -> list:
        w = ledger.worker
        counts = []
        if ledger.work_records:
            counts.append(self._p(f"Work Records: {len(ledger.work_records)}"))
        if ledger.payment_records:
            counts.append(self._p(f"Payment Records: {len(ledger.payment_records)}"))
        return [
            KeepTogether(
                [
                    self._p(f"{w.name} (ID: {w.worker_id})", self._band),
                    Spacer(1, 3 * mm),
                    self._p(f"Job Role: {w.job_role}"),
                    Spacer(1, 2 * mm),
                    self._summary_box(self._totals_lines(ledger)),
                    Spacer(1, 2 * mm),
                    *counts,
                    Spacer(1, 6 * mm),
                ]
            )
        ]

    def _overall_summary(self, report: AllWorkersReport) -> list:
        rows: List[list] = []
        for ledger in report.ledgers:
            rows.append(
                [
                    ledger.worker.worker_id,
                    ledger.worker.name,
                    self._money(ledger.total_earned),
                    self._money(ledger.total_paid),
                    self._money(ledger.balance),
                ]
            )
        rows.append(
            [
                "Grand Total",
                "",
                self._money(report.grand_total_earned),
                self._money(report.grand_total_paid),
                self._money(report.grand_balance),
            ]
        )
        table = self._table(["Worker ID", "Name", "Total Earned", "Total Paid", "Balance"], rows, [25, 45, 37, 37, 36], wrap=(1,))
        last = len(rows)
        extra = [
            ("BACKGROUND", (0, last), (-1, last), SUMMARY_FILL),
            ("FONTNAME", (0, last), (-1, last), "Helvetica-Bold"),
        ]
        for idx, ledger in enumerate(report.ledgers, start=1):
            if ledger.balance < 0:
                extra.append(("TEXTCOLOR", (4, idx), (4, idx), NEGATIVE_COLOR))
        table.setStyle(TableStyle(extra))
        return [
            self._p("Overall Summary", self._title),
            Spacer(1, 6 * mm),
            table,
            Spacer(1, 4 * mm),
            self._summary_box([(f"Grand Balance: {self._money(report.grand_balance)}", True)]),
        ]

    def _build(self, story: list, target, today: date) -> None:
        doc = SimpleDocTemplate(
            target,
            pagesize=A4,
            leftMargin=_MARGIN,
            rightMargin=_MARGIN,
            topMargin=_MARGIN,
            bottomMargin=20 * mm,
        )
        doc.build(story, canvasmaker=_footer_canvas(format_display_date(today)))

    def render_worker(self, ledger: WorkerLedger, *, today: Optional[date] = None) -> bytes:
        buf = io.BytesIO()
        self._build(self._ledger_story(ledger), buf, today or date.today())
        logger.info("Rendered worker report for %s", ledger.worker.worker_id)
        return buf.getvalue()

    def render_all_workers(self, report: AllWorkersReport, *, today: Optional[date] = None) -> bytes:
        story: list = []
        for ledger in report.ledgers:
            story.extend(self._worker_section(ledger))
        if story:
            story.append(PageBreak())
        story.extend(self._overall_summary(report))

        buf = io.BytesIO()
        self._build(story, buf, today or date.today())
        logger.info("Rendered all-workers report (%d workers)", len(report.ledgers))
        return buf.getvalue()

    def save(self, content: bytes, directory: str | Path, filename: str) -> Path:
        path = Path(directory) / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
