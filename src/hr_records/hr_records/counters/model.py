from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IdFormat:
    prefix: str
    width: int

    def render(self, number: int) -> str:
        return f"{self.prefix}{number:0{self.width}d}"


@dataclass(frozen=True)
class Counter:
    """Bộ đếm theo loại thực thể: số đã cấp gần nhất."""

    entity_type: str
    last_number: int
    last_id: Optional[str]
    updated_at: Optional[str]
