from __future__ import annotations

from typing import Any, Dict, Mapping

Record = Dict[str, Any]

AUDIT_FIELDS = ("createdAt", "createdBy", "updatedAt", "updatedBy")


def strip_absent(value: Any) -> Any:
    """Drop keys whose value is None, recursively.

    Partial updates merge key by key, so an explicit "no value" would overwrite
    whatever is stored; absent keys leave the stored value alone.
    """
    if isinstance(value, Mapping):
        return {k: strip_absent(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [strip_absent(v) for v in value if v is not None]
    return value
