from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


def _as_utc(ts: datetime) -> datetime:
    # SQLite hands DateTime(timezone=True) back naive; values are written as UTC.
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: Optional[str]
    is_completed: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, r: Mapping[str, Any]) -> "Task":
        return cls(
            id=int(r["id"]),
            title=r["title"],
            description=r["description"],
            is_completed=bool(r["is_completed"]),
            sort_order=int(r["sort_order"]),
            created_at=_as_utc(r["created_at"]),
            updated_at=_as_utc(r["updated_at"]),
        )
