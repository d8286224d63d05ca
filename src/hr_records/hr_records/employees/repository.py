from __future__ import annotations

from datetime import datetime
from typing import Callable

from ..common.datetime_utils import now_local
from ..core.constants import EMPLOYEES
from ..database.document_store import DocumentStore
from ..records.repository import RecordRepository
from .education import validate_secondary_education


class EmployeeRepository(RecordRepository):
    def __init__(self, store: DocumentStore, *, clock: Callable[[], datetime] = now_local):
        super().__init__(
            store,
            EMPLOYEES,
            label="Employee",
            validators=(validate_secondary_education,),
            clock=clock,
        )
