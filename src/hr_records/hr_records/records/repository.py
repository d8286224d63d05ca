from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from ..auth.model import AuthContext
from ..common.datetime_utils import iso, now_local
from ..core.exceptions import NotFoundError
from ..database.document_store import DocumentStore
from .model import Record, strip_absent

logger = logging.getLogger(__name__)

PayloadValidator = Callable[[Record], None]


class RecordRepository:
    """Generic CRUD over one top-level collection.

    Every write strips absent values, runs the configured payload validators and
    stamps the audit quad (createdAt/createdBy on create only).
    Authorization is the caller's job; this class trusts the context it is given.
    """

    def __init__(
        self,
        store: DocumentStore,
        collection: str,
        *,
        label: str,
        validators: Iterable[PayloadValidator] = (),
        clock: Callable[[], datetime] = now_local,
    ):
        self._store = store
        self._collection = collection
        self._label = label
        self._validators = tuple(validators)
        self._clock = clock

    @property
    def collection(self) -> str:
        return self._collection

    def _prepare(self, data: Record) -> Record:
        payload = strip_absent({k: v for k, v in data.items() if k != "id"})
        for validate in self._validators:
            validate(payload)
        return payload

    def create(self, ctx: AuthContext, data: Record) -> Record:
        payload = self._prepare(data)
        stamp = iso(self._clock())
        payload.update(
            createdAt=stamp,
            createdBy=ctx.principal_id,
            updatedAt=stamp,
            updatedBy=ctx.principal_id,
        )
        doc_id = self._store.add(self._collection, payload)
        logger.info("%s %s created by %s", self._label, doc_id, ctx.principal_id)
        return {"id": doc_id, **payload}

    def get(self, doc_id: str) -> Optional[Record]:
        if not doc_id:
            return None
        return self._store.get(self._collection, doc_id)

    def require(self, doc_id: str) -> Record:
        doc = self.get(doc_id)
        if not doc:
            raise NotFoundError(f"{self._label} not found")
        return doc

    def update(self, ctx: AuthContext, doc_id: str, partial: Record) -> Record:
        """Merge ``partial`` into the stored record; creation stamps are preserved."""
        payload = self._prepare(partial)
        for key in ("createdAt", "createdBy"):
            payload.pop(key, None)
        payload.update(updatedAt=iso(self._clock()), updatedBy=ctx.principal_id)
        self._store.update(self._collection, doc_id, payload)
        logger.info("%s %s updated by %s", self._label, doc_id, ctx.principal_id)
        return self.require(doc_id)

    def replace(self, ctx: AuthContext, doc_id: str, data: Record) -> Record:
        """Write the whole record (used when keys must disappear, e.g. legacy fields)."""
        existing = self.require(doc_id)
        payload = self._prepare(data)
        payload.update(
            createdAt=existing.get("createdAt"),
            createdBy=existing.get("createdBy"),
            updatedAt=iso(self._clock()),
            updatedBy=ctx.principal_id,
        )
        payload = strip_absent(payload)
        self._store.set(self._collection, doc_id, payload)
        logger.info("%s %s rewritten by %s", self._label, doc_id, ctx.principal_id)
        return {"id": doc_id, **payload}

    def delete(self, doc_id: str) -> bool:
        deleted = self._store.delete(self._collection, doc_id)
        if deleted:
            logger.info("%s %s deleted", self._label, doc_id)
        return deleted

    def list(self) -> List[Record]:
        return self._store.list_all(self._collection)

    def find_by(self, field: str, value) -> List[Record]:
        return self._store.find(self._collection, field, value)
