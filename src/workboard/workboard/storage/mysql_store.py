from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, List, Optional, Sequence, TypeVar

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import WORKER_ID_FIELD
from ..core.exceptions import NotFoundError, StoreUnavailableError
from .connection import DatabaseConnection
from .memory_store import new_document_id
from .mysql_base import db_cursor, fetchall, fetchone
from .store import Document, RecordStore, WriteBatch, collection_name

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TABLE = "documents"


def _dumps(document: Document) -> str:
    return json.dumps(document, ensure_ascii=False, separators=(",", ":"))


def _loads(body: Any) -> Document:
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    return json.loads(body) if body else {}


def _json_path(field: str) -> str:
    if not field.replace("_", "").isalnum():
        raise ValueError(f"Unsupported field name: {field!r}")
    return f'$."{field}"'


class MySQLWriteBatch(WriteBatch):
    def __init__(self, store: "MySQLRecordStore"):
        self._store = store
        self._ops: List[tuple[str, str, str, Optional[Document]]] = []

    def update(self, collection: str, doc_id: str, fields: Document) -> "MySQLWriteBatch":
        self._ops.append(("update", collection_name(collection), doc_id, dict(fields)))
        return self

    def delete(self, collection: str, doc_id: str) -> "MySQLWriteBatch":
        self._ops.append(("delete", collection_name(collection), doc_id, None))
        return self

    def __len__(self) -> int:
        return len(self._ops)

    async def commit(self) -> None:
        await self._store._run(self._store._commit_ops, list(self._ops))


class MySQLRecordStore(RecordStore):
    """Documents kept as JSON rows in one ``documents`` table.

    mysql-connector is blocking, so every call runs in a worker thread via
    ``asyncio.to_thread``. A batch is a single SQL transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def _run(self, fn: Callable[..., T], *args) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except mysql.connector.Error as e:
            logger.exception("MySQL store call %s failed", getattr(fn, "__name__", fn))
            raise StoreUnavailableError(str(e)) from e

    # --- blocking helpers (run inside worker threads) ---

    def _get(self, collection: str, doc_id: str) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT body FROM {_TABLE} WHERE collection=%s AND doc_id=%s",
                (collection, doc_id),
            )
            row = fetchone(cur)
            return _loads(row["body"]) if row else None

    def _query(self, collection: str, field: str, value: Any) -> List[tuple[str, Document]]:
        with db_cursor(self._conn_factory) as (_, cur):
            if field == WORKER_ID_FIELD and isinstance(value, str):
                # Indexed generated column, see database/schema.sql.
                cur.execute(
                    f"SELECT doc_id, body FROM {_TABLE} WHERE collection=%s AND worker_ref=%s",
                    (collection, value),
                )
                return [(r["doc_id"], _loads(r["body"])) for r in fetchall(cur)]
            cur.execute(
                f"""
                SELECT doc_id, body FROM {_TABLE}
                WHERE collection=%s AND JSON_EXTRACT(body, %s) = CAST(%s AS JSON)
                """,
                (collection, _json_path(field), json.dumps(value)),
            )
            return [(r["doc_id"], _loads(r["body"])) for r in fetchall(cur)]

    def _list(self, collection: str) -> List[tuple[str, Document]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT doc_id, body FROM {_TABLE} WHERE collection=%s", (collection,))
            return [(r["doc_id"], _loads(r["body"])) for r in fetchall(cur)]

    def _put(self, collection: str, doc_id: str, document: Document) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO {_TABLE}(collection, doc_id, body) VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE body=VALUES(body)
                """,
                (collection, doc_id, _dumps(document)),
            )

    def _insert(self, collection: str, doc_id: str, document: Document) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO {_TABLE}(collection, doc_id, body) VALUES(%s,%s,%s)",
                    (collection, doc_id, _dumps(document)),
                )
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                return False
            raise
        return True

    def _add(self, collection: str, document: Document) -> str:
        while True:
            doc_id = new_document_id()
            if self._insert(collection, doc_id, document):
                return doc_id

    @staticmethod
    def _merge(cur, collection: str, doc_id: str, fields: Document) -> None:
        cur.execute(
            f"UPDATE {_TABLE} SET body=JSON_MERGE_PATCH(body, CAST(%s AS JSON)) WHERE collection=%s AND doc_id=%s",
            (_dumps(fields), collection, doc_id),
        )
        if cur.rowcount == 0:
            # rowcount is 0 both for "missing" and "unchanged"; tell them apart.
            cur.execute(f"SELECT 1 AS found FROM {_TABLE} WHERE collection=%s AND doc_id=%s", (collection, doc_id))
            if not fetchone(cur):
                raise NotFoundError(f"No document to update: {collection}/{doc_id}")

    def _update(self, collection: str, doc_id: str, fields: Document) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._merge(cur, collection, doc_id, fields)

    def _delete(self, collection: str, doc_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {_TABLE} WHERE collection=%s AND doc_id=%s", (collection, doc_id))

    def _commit_ops(self, ops: Sequence[tuple[str, str, str, Optional[Document]]]) -> None:
        if not ops:
            return
        # autocommit is off: db_cursor commits once at the end or rolls back.
        with db_cursor(self._conn_factory) as (_, cur):
            for kind, collection, doc_id, fields in ops:
                if kind == "update":
                    self._merge(cur, collection, doc_id, fields or {})
                else:
                    cur.execute(f"DELETE FROM {_TABLE} WHERE collection=%s AND doc_id=%s", (collection, doc_id))

    def _ping(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT 1 AS ok FROM {_TABLE} LIMIT 1")
            fetchall(cur)

    # --- RecordStore ---

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        return await self._run(self._get, collection_name(collection), doc_id)

    async def query_by_field(self, collection: str, field: str, value: Any) -> Sequence[tuple[str, Document]]:
        return await self._run(self._query, collection_name(collection), field, value)

    async def list_all(self, collection: str) -> Sequence[tuple[str, Document]]:
        return await self._run(self._list, collection_name(collection))

    async def put(self, collection: str, doc_id: str, document: Document) -> None:
        await self._run(self._put, collection_name(collection), doc_id, dict(document))

    async def create_if_absent(self, collection: str, doc_id: str, document: Document) -> bool:
        return await self._run(self._insert, collection_name(collection), doc_id, dict(document))

    async def add(self, collection: str, document: Document) -> str:
        return await self._run(self._add, collection_name(collection), dict(document))

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        await self._run(self._update, collection_name(collection), doc_id, dict(fields))

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._run(self._delete, collection_name(collection), doc_id)

    def batch(self) -> MySQLWriteBatch:
        return MySQLWriteBatch(self)

    async def ping(self) -> None:
        await self._run(self._ping)
