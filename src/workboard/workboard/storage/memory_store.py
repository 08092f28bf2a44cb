from __future__ import annotations

import asyncio
import copy
import threading
import uuid
from typing import Any, Dict, List, Optional, Sequence

from ..core.exceptions import NotFoundError
from .store import Document, RecordStore, WriteBatch, collection_name


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


class InMemoryWriteBatch(WriteBatch):
    def __init__(self, store: "InMemoryRecordStore"):
        self._store = store
        self._ops: List[tuple[str, str, str, Optional[Document]]] = []
        self._committed = False

    def update(self, collection: str, doc_id: str, fields: Document) -> "InMemoryWriteBatch":
        self._ops.append(("update", collection, doc_id, copy.deepcopy(fields)))
        return self

    def delete(self, collection: str, doc_id: str) -> "InMemoryWriteBatch":
        self._ops.append(("delete", collection, doc_id, None))
        return self

    def __len__(self) -> int:
        return len(self._ops)

    async def commit(self) -> None:
        if self._committed:
            raise RuntimeError("Batch already committed")
        self._committed = True
        await self._store._apply_batch(self._ops)


class InMemoryRecordStore(RecordStore):
    """Process-local store used for development and tests.

    Each call yields to the event loop once before touching data, so concurrent
    sessions interleave at call boundaries like they would against a network
    store. Individual calls (and batch commits) are atomic.
    """

    def __init__(self, data: Optional[Dict[str, Dict[str, Document]]] = None):
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, Document]] = copy.deepcopy(data) if data else {}

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._data.setdefault(collection_name(name), {})

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        await asyncio.sleep(0)
        with self._lock:
            doc = self._collection(collection).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    async def query_by_field(self, collection: str, field: str, value: Any) -> Sequence[tuple[str, Document]]:
        await asyncio.sleep(0)
        with self._lock:
            return [
                (doc_id, copy.deepcopy(doc))
                for doc_id, doc in self._collection(collection).items()
                if doc.get(field) == value
            ]

    async def list_all(self, collection: str) -> Sequence[tuple[str, Document]]:
        await asyncio.sleep(0)
        with self._lock:
            return [(doc_id, copy.deepcopy(doc)) for doc_id, doc in self._collection(collection).items()]

    async def put(self, collection: str, doc_id: str, document: Document) -> None:
        await asyncio.sleep(0)
        with self._lock:
            self._collection(collection)[doc_id] = copy.deepcopy(document)

    async def create_if_absent(self, collection: str, doc_id: str, document: Document) -> bool:
        await asyncio.sleep(0)
        with self._lock:
            docs = self._collection(collection)
            if doc_id in docs:
                return False
            docs[doc_id] = copy.deepcopy(document)
            return True

    async def add(self, collection: str, document: Document) -> str:
        await asyncio.sleep(0)
        with self._lock:
            docs = self._collection(collection)
            doc_id = new_document_id()
            while doc_id in docs:
                doc_id = new_document_id()
            docs[doc_id] = copy.deepcopy(document)
            return doc_id

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        await asyncio.sleep(0)
        with self._lock:
            docs = self._collection(collection)
            if doc_id not in docs:
                raise NotFoundError(f"No document to update: {collection_name(collection)}/{doc_id}")
            docs[doc_id].update(copy.deepcopy(fields))

    async def delete(self, collection: str, doc_id: str) -> None:
        await asyncio.sleep(0)
        with self._lock:
            self._collection(collection).pop(doc_id, None)

    def batch(self) -> InMemoryWriteBatch:
        return InMemoryWriteBatch(self)

    async def ping(self) -> None:
        await asyncio.sleep(0)

    async def _apply_batch(self, ops: Sequence[tuple[str, str, str, Optional[Document]]]) -> None:
        await asyncio.sleep(0)
        with self._lock:
            # Validate everything first so a bad op leaves the store untouched.
            for kind, collection, doc_id, _ in ops:
                if kind == "update" and doc_id not in self._collection(collection):
                    raise NotFoundError(f"No document to update: {collection_name(collection)}/{doc_id}")
            for kind, collection, doc_id, fields in ops:
                docs = self._collection(collection)
                if kind == "update":
                    docs[doc_id].update(fields or {})
                else:
                    docs.pop(doc_id, None)
