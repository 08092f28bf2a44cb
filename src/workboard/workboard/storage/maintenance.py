from __future__ import annotations

import logging

from ..core.enums import LEDGER_COLLECTIONS
from ..core.exceptions import StoreUnavailableError
from .store import RecordStore, collection_name

logger = logging.getLogger(__name__)


async def check_store(store: RecordStore) -> bool:
    """True when the store answers a trivial read."""

    try:
        await store.ping()
    except StoreUnavailableError as e:
        logger.error("Storage initialization error: %s", e)
        return False
    return True


async def clear_all_data(store: RecordStore) -> int:
    """Delete every worker, work record and payment record.

    Each collection is cleared in its own batch. Returns the number of
    documents removed.
    """

    removed = 0
    for collection in LEDGER_COLLECTIONS:
        docs = await store.list_all(collection)
        if not docs:
            continue
        batch = store.batch()
        for doc_id, _ in docs:
            batch.delete(collection, doc_id)
        await batch.commit()
        removed += len(docs)
        logger.info("Cleared %d documents from %s", len(docs), collection_name(collection))
    return removed
