from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Protocol, Sequence, Union

Document = Dict[str, Any]


def collection_name(collection: Union[str, Enum]) -> str:
    return collection.value if isinstance(collection, Enum) else str(collection)


class WriteBatch(Protocol):
    """Accumulates update/delete operations committed as one atomic unit."""

    def update(self, collection: str, doc_id: str, fields: Document) -> "WriteBatch":
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> "WriteBatch":
        raise NotImplementedError

    def __len__(self) -> int:
        raise NotImplementedError

    async def commit(self) -> None:
        raise NotImplementedError


class RecordStore(Protocol):
    """Document store interface consumed by the ledger core.

    Services depend on this interface, not on a concrete backend.
    Documents are plain dicts; the document id is never part of the body.
    Every call may raise StoreUnavailableError; ``update`` (and a batch
    holding an update) raises NotFoundError when the target document is gone.
    """

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    async def query_by_field(self, collection: str, field: str, value: Any) -> Sequence[tuple[str, Document]]:
        """Unordered ``(doc_id, document)`` pairs whose ``field`` equals ``value``."""

        raise NotImplementedError

    async def list_all(self, collection: str) -> Sequence[tuple[str, Document]]:
        raise NotImplementedError

    async def put(self, collection: str, doc_id: str, document: Document) -> None:
        """Create or fully replace."""

        raise NotImplementedError

    async def create_if_absent(self, collection: str, doc_id: str, document: Document) -> bool:
        """Atomically create; ``False`` when ``doc_id`` already exists."""

        raise NotImplementedError

    async def add(self, collection: str, document: Document) -> str:
        """Create under a freshly generated id and return it."""

        raise NotImplementedError

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        """Merge ``fields`` into an existing document."""

        raise NotImplementedError

    async def delete(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError

    def batch(self) -> WriteBatch:
        raise NotImplementedError

    async def ping(self) -> None:
        raise NotImplementedError
