from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import EMPLOYMENTS
from ..database.document_store import DocumentStore
from ..records.model import Record
from ..records.repository import RecordRepository

# Managed only through EmbeddedCollectionMutator.
EMBEDDED_FIELDS = ("attendance", "leaves")


class EmploymentRepository(RecordRepository):
    def __init__(self, store: DocumentStore, *, clock: Callable[[], datetime] = now_local):
        super().__init__(store, EMPLOYMENTS, label="Employment", clock=clock)

    def get_for_employee(self, employee_id: str) -> Optional[Record]:
        """One employment per employee is assumed; the first match wins."""
        docs = self.find_by("employeeId", employee_id)
        return docs[0] if docs else None
