from __future__ import annotations

from dataclasses import dataclass

from .auth.service import AuthGate, AuthService
from .cascade.coordinator import CascadeCoordinator
from .core.constants import DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_USERNAME, DEFAULT_CURRENCY_LABEL
from .ledger.repository import PaymentRecordRepository, WorkRecordRepository
from .ledger.service import LedgerEngine
from .reports.pdf_exporter import PdfReportExporter
from .reports.service import ReportService
from .storage.memory_store import InMemoryRecordStore
from .storage.store import RecordStore
from .workers.repository import WorkerRepository
from .workers.service import WorkerRegistry


@dataclass(frozen=True)
class Container:
    store: RecordStore

    workers_repo: WorkerRepository
    works_repo: WorkRecordRepository
    payments_repo: PaymentRecordRepository

    cascades: CascadeCoordinator
    worker_registry: WorkerRegistry
    ledger_engine: LedgerEngine
    report_service: ReportService
    pdf_exporter: PdfReportExporter
    auth_service: AuthService
    auth_gate: AuthGate


def build_store(*, store_backend: str = "memory", db_config: dict | None = None) -> RecordStore:
    backend = (store_backend or "memory").lower()
    if backend == "memory":
        return InMemoryRecordStore()
    if backend == "mysql":
        # Imported lazily so the in-memory backend works without a MySQL driver configured.
        from .storage.connection import DBConfig, DatabaseConnection
        from .storage.mysql_store import MySQLRecordStore

        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
        return MySQLRecordStore(conn)
    raise ValueError(f"Unknown STORE_BACKEND: {store_backend!r}")


def build_container(
    *,
    store: RecordStore | None = None,
    store_backend: str = "memory",
    db_config: dict | None = None,
    currency_label: str = DEFAULT_CURRENCY_LABEL,
    admin_username: str = DEFAULT_ADMIN_USERNAME,
    admin_password: str = DEFAULT_ADMIN_PASSWORD,
) -> Container:
    store = store or build_store(store_backend=store_backend, db_config=db_config)

    workers_repo = WorkerRepository(store)
    works_repo = WorkRecordRepository(store)
    payments_repo = PaymentRecordRepository(store)

    cascades = CascadeCoordinator(store, workers_repo)
    worker_registry = WorkerRegistry(workers_repo, cascades)
    ledger_engine = LedgerEngine(workers_repo, works_repo, payments_repo)
    report_service = ReportService(worker_registry, ledger_engine)
    auth_service = AuthService(store, default_username=admin_username, default_password=admin_password)

    return Container(
        store=store,
        workers_repo=workers_repo,
        works_repo=works_repo,
        payments_repo=payments_repo,
        cascades=cascades,
        worker_registry=worker_registry,
        ledger_engine=ledger_engine,
        report_service=report_service,
        pdf_exporter=PdfReportExporter(currency_label=currency_label),
        auth_service=auth_service,
        auth_gate=AuthGate(),
    )
