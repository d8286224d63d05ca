from __future__ import annotations

from typing import Any, Dict, List

from ..core.constants import MAX_SECONDARY_EDUCATION
from ..core.enums import EducationType
from ..core.exceptions import ValidationError
from ..database.document_store import new_document_id

_VALID_TYPES = {t.value for t in EducationType}


def validate_secondary_education(payload: Dict[str, Any]) -> None:
    """At most one 12th and one diploma entry."""
    if "secondaryEducation" not in payload:
        return

    entries = payload["secondaryEducation"]
    if not isinstance(entries, list):
        raise ValidationError("secondaryEducation must be a list")
    if len(entries) > MAX_SECONDARY_EDUCATION:
        raise ValidationError("Maximum 2 entries allowed (one 12th and one Diploma)")

    seen = set()
    for entry in entries:
        kind = entry.get("type") if isinstance(entry, dict) else None
        if kind not in _VALID_TYPES:
            raise ValidationError("Education entry type must be '12th' or 'diploma'")
        if kind in seen:
            label = "12th Standard" if kind == EducationType.TWELFTH.value else "Diploma"
            raise ValidationError(f"You already have a {label} entry")
        seen.add(kind)


def with_entry_ids(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [{**e, "id": e.get("id") or new_document_id()} if isinstance(e, dict) else e for e in entries]
