from __future__ import annotations

import argparse
import asyncio
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.workboard.workboard.common.app_logging import configure_logging
from src.workboard.workboard.container import Container, build_container
from src.workboard.workboard.storage.maintenance import check_store, clear_all_data

DEMO_WORKERS = [
    ("W1", "Alice Perera", "Mason"),
    ("W2", "Bimal Silva", "Carpenter"),
    ("W3", "Chathuri Fernando", "Painter"),
]

DEMO_WORK = [
    ("W1", "01/03/2024", "Wall plastering", "3000"),
    ("W1", "02/03/2024", "Brick laying", "2000"),
    ("W2", "01/03/2024", "Door frames", "4500"),
    ("W3", "03/03/2024", "Exterior coat", "2750.50"),
]

DEMO_PAYMENTS = [
    ("W1", "05/03/2024", "2000", "Cash", "Weekly advance"),
    ("W2", "05/03/2024", "1500", "Bank Transfer", None),
]


async def seed(container: Container, *, reset: bool) -> None:
    if not await check_store(container.store):
        raise SystemExit("Store is not reachable; check DB_CONFIG / STORE_BACKEND")

    if reset:
        removed = await clear_all_data(container.store)
        print(f"Cleared {removed} documents")

    await container.auth_service.ensure_admin()

    for worker_id, name, role in DEMO_WORKERS:
        result = await container.worker_registry.add_worker(worker_id, name, role)
        print(f"worker {worker_id}: {result.message}")

    for worker_id, date, work_type, amount in DEMO_WORK:
        result = await container.ledger_engine.add_work_record(worker_id, date, work_type, amount)
        print(f"work {worker_id} {date}: {result.message}")

    for worker_id, date, amount, payment_type, note in DEMO_PAYMENTS:
        result = await container.ledger_engine.add_payment_record(worker_id, date, amount, payment_type, note)
        print(f"payment {worker_id} {date}: {result.message}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo workers, work and payment records.")
    parser.add_argument("--reset", action="store_true", help="delete all ledger data before seeding")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(
        store_backend=getattr(settings, "STORE_BACKEND", "memory"),
        db_config=dict(getattr(settings, "DB_CONFIG", {})),
        admin_username=getattr(settings, "ADMIN_USERNAME", "admin"),
        admin_password=getattr(settings, "ADMIN_DEFAULT_PASSWORD", "admin123"),
    )
    asyncio.run(seed(container, reset=args.reset))
    print("OK: Seeded demo data")


if __name__ == "__main__":
    main()
