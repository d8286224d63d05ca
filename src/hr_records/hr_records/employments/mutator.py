from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from ..common.datetime_utils import iso, now_local
from ..core.constants import EMPLOYMENTS
from ..core.exceptions import ConcurrencyError, NotFoundError
from ..database.document_store import DocumentStore
from .repository import EMBEDDED_FIELDS

logger = logging.getLogger(__name__)

T = TypeVar("T")
Items = List[Dict[str, Any]]
Mutation = Callable[[Items], Tuple[Items, T]]


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    employment_id: str
    version: int
    value: T


class EmbeddedCollectionMutator:
    """Read-modify-write of one embedded array inside one Employment document.

    The read, the caller's mutation and the whole-array write run in a single store
    transaction, and every write bumps ``version``. A caller that read the document
    earlier passes ``expected_version``; if someone else wrote in between the
    mutation is refused with ConcurrencyError instead of clobbering their change.
    Rule checks inside ``mutation`` run against the locked, current array.
    """

    def __init__(self, store: DocumentStore, *, clock: Callable[[], datetime] = now_local):
        self._store = store
        self._clock = clock

    def mutate(
        self,
        employment_id: str,
        field: str,
        mutation: Mutation[T],
        *,
        actor_id: str,
        expected_version: Optional[int] = None,
    ) -> MutationResult[T]:
        if field not in EMBEDDED_FIELDS:
            raise ValueError(f"{field!r} is not an embedded collection")

        with self._store.transaction() as tx:
            doc = tx.get(EMPLOYMENTS, employment_id)
            if not doc:
                raise NotFoundError("Employment not found")

            version = int(doc.get("version", 0))
            if expected_version is not None and int(expected_version) != version:
                logger.info(
                    "Stale write on employments/%s.%s (expected v%s, found v%s)",
                    employment_id,
                    field,
                    expected_version,
                    version,
                )
                raise ConcurrencyError("The employment record was changed by someone else, reload and retry")

            items = copy.deepcopy(list(doc.get(field) or []))
            new_items, value = mutation(items)

            doc[field] = new_items
            doc["version"] = version + 1
            doc["updatedAt"] = iso(self._clock())
            doc["updatedBy"] = actor_id
            tx.set(EMPLOYMENTS, employment_id, doc)

        return MutationResult(employment_id=employment_id, version=version + 1, value=value)
