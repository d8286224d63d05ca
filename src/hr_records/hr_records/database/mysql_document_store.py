from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Set, Tuple

from ..core.exceptions import NotFoundError
from .connection import DatabaseConnection
from .document_store import (
    Document,
    DocumentStore,
    check_field_name,
    decode_body,
    encode_body,
    new_document_id,
)
from .mysql_base import db_cursor, fetchall, fetchone


class _MySQLTransaction:
    """Rows read here are locked (SELECT ... FOR UPDATE) until the surrounding commit."""

    def __init__(self, cur):
        self._cur = cur
        self._absent: Set[Tuple[str, str]] = set()

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        self._cur.execute(
            "SELECT body FROM documents WHERE collection=%s AND doc_id=%s FOR UPDATE",
            (collection, doc_id),
        )
        row = fetchone(self._cur)
        if not row:
            self._absent.add((collection, doc_id))
            return None
        return decode_body(doc_id, row["body"])

    def set(self, collection: str, doc_id: str, data: Document) -> None:
        if (collection, doc_id) in self._absent:
            # Plain INSERT: a concurrent creator of the same key fails with a duplicate
            # key error instead of silently overwriting.
            self._cur.execute(
                "INSERT INTO documents(collection, doc_id, body) VALUES(%s,%s,%s)",
                (collection, doc_id, encode_body(data)),
            )
            self._absent.discard((collection, doc_id))
            return
        self._cur.execute(
            """
            INSERT INTO documents(collection, doc_id, body) VALUES(%s,%s,%s)
            ON DUPLICATE KEY UPDATE body=VALUES(body)
            """,
            (collection, doc_id, encode_body(data)),
        )


class MySQLDocumentStore(DocumentStore):
    """Flat document store: one `documents` table keyed by (collection, doc_id), JSON body."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT body FROM documents WHERE collection=%s AND doc_id=%s",
                (collection, doc_id),
            )
            row = fetchone(cur)
            if not row:
                return None
            return decode_body(doc_id, row["body"])

    def add(self, collection: str, data: Document) -> str:
        doc_id = new_document_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO documents(collection, doc_id, body) VALUES(%s,%s,%s)",
                (collection, doc_id, encode_body(data)),
            )
        return doc_id

    def set(self, collection: str, doc_id: str, data: Document) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO documents(collection, doc_id, body) VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE body=VALUES(body)
                """,
                (collection, doc_id, encode_body(data)),
            )

    def update(self, collection: str, doc_id: str, data: Document) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT body FROM documents WHERE collection=%s AND doc_id=%s FOR UPDATE",
                (collection, doc_id),
            )
            row = fetchone(cur)
            if not row:
                raise NotFoundError(f"{collection}/{doc_id} not found")
            merged = decode_body(doc_id, row["body"])
            merged.update(data)
            cur.execute(
                "UPDATE documents SET body=%s WHERE collection=%s AND doc_id=%s",
                (encode_body(merged), collection, doc_id),
            )

    def delete(self, collection: str, doc_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM documents WHERE collection=%s AND doc_id=%s", (collection, doc_id))
            return cur.rowcount > 0

    def find(self, collection: str, field: str, value: Any) -> List[Document]:
        path = f"$.{check_field_name(field)}"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT doc_id, body FROM documents
                WHERE collection=%s AND JSON_EXTRACT(body, %s) = CAST(%s AS JSON)
                ORDER BY doc_id
                """,
                (collection, path, json.dumps(value)),
            )
            return [decode_body(r["doc_id"], r["body"]) for r in fetchall(cur)]

    def list_all(self, collection: str) -> List[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT doc_id, body FROM documents WHERE collection=%s ORDER BY doc_id", (collection,))
            return [decode_body(r["doc_id"], r["body"]) for r in fetchall(cur)]

    @contextmanager
    def transaction(self) -> Iterator[_MySQLTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield _MySQLTransaction(cur)
