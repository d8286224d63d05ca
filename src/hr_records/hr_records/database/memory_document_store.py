from __future__ import annotations

import json
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..core.exceptions import NotFoundError
from .document_store import Document, DocumentStore, decode_body, encode_body, new_document_id


class _MemoryTransaction:
    def __init__(self, store: "InMemoryDocumentStore"):
        self._store = store
        self._writes: Dict[Tuple[str, str], str] = {}

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raw = self._writes.get((collection, doc_id))
        if raw is None:
            raw = self._store._rows.get((collection, doc_id))
        return decode_body(doc_id, raw) if raw is not None else None

    def set(self, collection: str, doc_id: str, data: Document) -> None:
        self._writes[(collection, doc_id)] = encode_body(data)

    def _commit(self) -> None:
        self._store._rows.update(self._writes)


class InMemoryDocumentStore(DocumentStore):
    """Process-local store used by tests and STORE_BACKEND=memory.

    Bodies are kept JSON-encoded so callers never share mutable state with the store,
    the same as with a remote store. Transactions hold one process-wide lock.
    """

    def __init__(self):
        self._rows: Dict[Tuple[str, str], str] = {}
        self._lock = threading.RLock()

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            raw = self._rows.get((collection, doc_id))
        return decode_body(doc_id, raw) if raw is not None else None

    def add(self, collection: str, data: Document) -> str:
        doc_id = new_document_id()
        self.set(collection, doc_id, data)
        return doc_id

    def set(self, collection: str, doc_id: str, data: Document) -> None:
        body = encode_body(data)
        with self._lock:
            self._rows[(collection, doc_id)] = body

    def update(self, collection: str, doc_id: str, data: Document) -> None:
        with self._lock:
            raw = self._rows.get((collection, doc_id))
            if raw is None:
                raise NotFoundError(f"{collection}/{doc_id} not found")
            merged = json.loads(raw)
            merged.update({k: v for k, v in data.items() if k != "id"})
            self._rows[(collection, doc_id)] = encode_body(merged)

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            return self._rows.pop((collection, doc_id), None) is not None

    def find(self, collection: str, field: str, value: Any) -> List[Document]:
        return [d for d in self.list_all(collection) if field in d and d[field] == value]

    def list_all(self, collection: str) -> List[Document]:
        with self._lock:
            items = sorted((k[1], raw) for k, raw in self._rows.items() if k[0] == collection)
        return [decode_body(doc_id, raw) for doc_id, raw in items]

    @contextmanager
    def transaction(self) -> Iterator[_MemoryTransaction]:
        with self._lock:
            tx = _MemoryTransaction(self)
            yield tx
            tx._commit()
