from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence

from ..auth.model import Principal
from ..common.validators import normalize_phone, normalize_tax_id
from ..core.constants import EMPLOYEES, ENQUIRIES
from ..core.enums import PrincipalKind
from ..core.exceptions import ConflictError
from ..database.document_store import DocumentStore

logger = logging.getLogger(__name__)

TAX_ID_FIELD = "panCard"
TAX_ID_COLLECTIONS = (EMPLOYEES, ENQUIRIES)


class PrincipalResolver(Protocol):
    def resolve_principal_by_phone(self, phone: str) -> Optional[Principal]:
        raise NotImplementedError


class UniquenessValidator:
    """Read-then-decide uniqueness across collections.

    This is not a store-level constraint: a concurrent writer can slip in between
    the check and the caller's write.
    """

    def __init__(self, store: DocumentStore, principals: PrincipalResolver):
        self._store = store
        self._principals = principals

    def is_value_used(
        self,
        field: str,
        value: Any,
        collections: Sequence[str],
        *,
        exclude_id: Optional[str] = None,
    ) -> bool:
        for collection in collections:
            for doc in self._store.find(collection, field, value):
                if exclude_id and doc.get("id") == exclude_id:
                    continue
                return True
        return False

    def find_owner(self, phone: str) -> Optional[Principal]:
        return self._principals.resolve_principal_by_phone(phone)

    def ensure_phone_available(self, phone: str, *, exclude_id: Optional[str] = None) -> str:
        """Return the normalized phone, or raise ConflictError naming who already owns it."""
        normalized = normalize_phone(phone)
        owner = self.find_owner(normalized)
        if owner and owner.principal_id != exclude_id:
            who = "admin" if owner.kind == PrincipalKind.ADMIN else "employee"
            logger.info("Phone number rejected: already registered with an %s", who)
            raise ConflictError(f"Phone number is already registered with an {who}")
        return normalized

    def ensure_tax_id_available(self, tax_id: str, *, exclude_employee_id: Optional[str] = None) -> str:
        """Upper-case, validate and check a PAN against employees and enquiries."""
        pan = normalize_tax_id(tax_id)
        if self.is_value_used(TAX_ID_FIELD, pan, TAX_ID_COLLECTIONS, exclude_id=exclude_employee_id):
            raise ConflictError(
                "This PAN number is already registered. Please use a different PAN or contact support."
            )
        return pan
