from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, Optional, Tuple

from ..common.datetime_utils import iso, now_local
from ..core.constants import COUNTERS, DEFAULT_ID_FORMATS
from ..core.exceptions import ConfigurationError, ConflictError
from ..database.document_store import DocumentStore
from .model import Counter, IdFormat

logger = logging.getLogger(__name__)


class SequentialIdGenerator:
    """Hands out human-readable, strictly increasing ids (EMP001, EMP002, ...).

    Each reservation is a single read-increment-write transaction on
    ``counters/<entity_type>``. There is no retry here: if the store cannot commit,
    ConcurrencyError propagates and the caller retries the whole operation.
    """

    def __init__(self, store: DocumentStore, formats: Optional[Mapping[str, Tuple[str, int]]] = None):
        self._store = store
        self._formats: Dict[str, IdFormat] = {
            entity: IdFormat(prefix=prefix, width=int(width))
            for entity, (prefix, width) in (formats or DEFAULT_ID_FORMATS).items()
        }

    def _format_for(self, entity_type: str) -> IdFormat:
        fmt = self._formats.get(entity_type)
        if fmt is None:
            raise ConfigurationError(f"No sequential id format configured for {entity_type!r}")
        return fmt

    def reserve_next_id(self, entity_type: str) -> str:
        fmt = self._format_for(entity_type)

        with self._store.transaction() as tx:
            current = tx.get(COUNTERS, entity_type)
            last = int(current.get("lastNumber", 0)) if current else 0
            number = last + 1
            formatted = fmt.render(number)
            tx.set(
                COUNTERS,
                entity_type,
                {"lastNumber": number, "lastId": formatted, "updatedAt": iso(now_local())},
            )

        logger.info("Reserved %s for %s", formatted, entity_type)
        return formatted

    def reserve_unused_id(self, entity_type: str, is_taken: Callable[[str], bool], *, max_attempts: int = 100) -> str:
        """Reserve ids until one is not already held by a hand-entered record.

        Skipped numbers stay consumed; the counter only moves forward.
        """
        for _ in range(max_attempts):
            candidate = self.reserve_next_id(entity_type)
            if not is_taken(candidate):
                return candidate
            logger.info("Skipping %s for %s: already in use", candidate, entity_type)
        raise ConflictError(f"Could not find a free {entity_type} id after {max_attempts} attempts")

    def preview_next_id(self, entity_type: str) -> str:
        """The id the next reservation would get; nothing is reserved."""
        fmt = self._format_for(entity_type)
        counter = self.get_counter(entity_type)
        return fmt.render(counter.last_number + 1)

    def get_counter(self, entity_type: str) -> Counter:
        self._format_for(entity_type)
        doc = self._store.get(COUNTERS, entity_type)
        if not doc:
            return Counter(entity_type=entity_type, last_number=0, last_id=None, updated_at=None)
        return Counter(
            entity_type=entity_type,
            last_number=int(doc.get("lastNumber", 0)),
            last_id=doc.get("lastId"),
            updated_at=doc.get("updatedAt"),
        )
