from __future__ import annotations

import json
import re
import uuid
from contextlib import AbstractContextManager
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Protocol

Document = Dict[str, Any]

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class StoreTransaction(Protocol):
    """Reads and writes that commit together, or not at all."""

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    def set(self, collection: str, doc_id: str, data: Document) -> None:
        raise NotImplementedError


class DocumentStore(Protocol):
    """Giao diện kho tài liệu (document store).

    Atomicity is only guaranteed per document, or inside ``transaction()``.
    Documents are returned as plain dicts with their key under ``"id"``.
    """

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    def add(self, collection: str, data: Document) -> str:
        raise NotImplementedError

    def set(self, collection: str, doc_id: str, data: Document) -> None:
        raise NotImplementedError

    def update(self, collection: str, doc_id: str, data: Document) -> None:
        """Shallow-merge ``data`` into an existing document (NotFoundError if missing)."""

        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> bool:
        raise NotImplementedError

    def find(self, collection: str, field: str, value: Any) -> List[Document]:
        raise NotImplementedError

    def list_all(self, collection: str) -> List[Document]:
        raise NotImplementedError

    def transaction(self) -> AbstractContextManager[StoreTransaction]:
        raise NotImplementedError


def new_document_id() -> str:
    return uuid.uuid4().hex


def check_field_name(field: str) -> str:
    if not _FIELD_RE.match(field):
        raise ValueError(f"Unsupported field name: {field!r}")
    return field


def _json_default(value: Any):
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    raise TypeError(f"Value of type {type(value).__name__} cannot be stored")


def encode_body(data: Document) -> str:
    """Serialize a document body; the key never lives inside the body."""
    body = {k: v for k, v in data.items() if k != "id"}
    return json.dumps(body, default=_json_default, ensure_ascii=False)


def decode_body(doc_id: str, raw: Any) -> Document:
    body = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else dict(raw)
    body["id"] = doc_id
    return body
