from __future__ import annotations

import io
from datetime import date

from flask import Flask, send_file

from ..common.web import login_required, not_found
from ..container import Container
from .pdf_exporter import all_workers_report_filename, worker_report_filename


def register(app: Flask, container: Container) -> None:
    reports = container.report_service
    exporter = container.pdf_exporter
    auth = login_required(container.auth_gate)

    @app.route("/api/reports/workers/<worker_id>.pdf", methods=["GET"], endpoint="export_worker_pdf")
    @auth
    async def export_worker_pdf(worker_id: str):
        ledger = await reports.build_worker_report(worker_id)
        if not ledger:
            return not_found("Worker not found")
        content = exporter.render_worker(ledger)
        return send_file(
            io.BytesIO(content),
            mimetype="application/pdf",
            as_attachment=True,
            download_name=worker_report_filename(ledger),
        )

    @app.route("/api/reports/workers.pdf", methods=["GET"], endpoint="export_all_workers_pdf")
    @auth
    async def export_all_workers_pdf():
        report = await reports.build_all_workers_report()
        if not report.ledgers:
            return not_found("No workers found")
        today = date.today()
        content = exporter.render_all_workers(report, today=today)
        return send_file(
            io.BytesIO(content),
            mimetype="application/pdf",
            as_attachment=True,
            download_name=all_workers_report_filename(today),
        )
