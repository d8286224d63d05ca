from __future__ import annotations

from datetime import datetime
from typing import Callable, List

from ..common.datetime_utils import now_local
from ..core.constants import SALARIES
from ..database.document_store import DocumentStore
from ..records.model import Record
from ..records.repository import RecordRepository


class SalaryRepository(RecordRepository):
    def __init__(self, store: DocumentStore, *, clock: Callable[[], datetime] = now_local):
        super().__init__(store, SALARIES, label="Salary", clock=clock)

    def list_for_employee(self, employee_id: str) -> List[Record]:
        return self.find_by("employeeId", employee_id)
