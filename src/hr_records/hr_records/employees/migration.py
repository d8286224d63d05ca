"""Legacy education shape -> ``secondaryEducation`` array.

Before the restructure, employees carried a ``twelthStandard`` (sometimes ``12th``)
sub-object and a ``diploma`` (sometimes ``otherEducation``) sub-object. The current
shape is a list of at most two tagged entries.

``migrate`` is the read-time view: it adds the array and leaves everything else
alone. ``migrate_for_storage`` is what write paths persist: legacy keys dropped and
``schemaVersion`` bumped. Both are idempotent.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from ..core.constants import CURRENT_EMPLOYEE_SCHEMA_VERSION
from ..core.enums import EducationType
from ..database.document_store import new_document_id

LEGACY_TWELFTH_KEYS = ("twelthStandard", "12th")
LEGACY_DIPLOMA_KEYS = ("diploma", "otherEducation")


def _first_present(doc: Dict[str, Any], keys) -> Optional[Dict[str, Any]]:
    for key in keys:
        value = doc.get(key)
        if isinstance(value, dict) and value:
            return value
    return None


def needs_migration(doc: Dict[str, Any]) -> bool:
    if doc.get("secondaryEducation") is not None:
        return False
    return bool(_first_present(doc, LEGACY_TWELFTH_KEYS) or _first_present(doc, LEGACY_DIPLOMA_KEYS))


def synthesize_entries(doc: Dict[str, Any]) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = []
    twelfth = _first_present(doc, LEGACY_TWELFTH_KEYS)
    if twelfth:
        entries.append(
            {"id": new_document_id(), "type": EducationType.TWELFTH.value, "twelthData": copy.deepcopy(twelfth)}
        )
    diploma = _first_present(doc, LEGACY_DIPLOMA_KEYS)
    if diploma:
        entries.append(
            {"id": new_document_id(), "type": EducationType.DIPLOMA.value, "diplomaData": copy.deepcopy(diploma)}
        )
    return entries


def migrate(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(doc)
    if needs_migration(doc):
        out["secondaryEducation"] = synthesize_entries(doc)
    return out


def migrate_for_storage(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = migrate(doc)
    for key in LEGACY_TWELFTH_KEYS + LEGACY_DIPLOMA_KEYS:
        out.pop(key, None)
    out["schemaVersion"] = CURRENT_EMPLOYEE_SCHEMA_VERSION
    return out


def is_current(doc: Dict[str, Any]) -> bool:
    return doc.get("schemaVersion") == CURRENT_EMPLOYEE_SCHEMA_VERSION and not any(
        key in doc for key in LEGACY_TWELFTH_KEYS + LEGACY_DIPLOMA_KEYS
    )
