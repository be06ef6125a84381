from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

from .errors import ValidationError

TITLE_MAX = 100
DESCRIPTION_MAX = 500
# Largest id the integer primary key column can hold.
TASK_ID_MAX = 2**63 - 1


def normalize_description(description: Optional[str]) -> Optional[str]:
    """Empty and missing descriptions collapse to None."""
    if description is None:
        return None
    d = description.strip()
    return d or None


def validate_task_input(title: Any, description: Any = None) -> Tuple[str, Optional[str]]:
    """Return cleaned (title, description) or raise on the first failing rule."""
    if title is None:
        raise ValidationError("title", "Title is required")
    if not isinstance(title, str):
        raise ValidationError("title", "Title must be a string")
    t = title.strip()
    if not t:
        raise ValidationError("title", "Title is required")
    if len(t) > TITLE_MAX:
        raise ValidationError("title", f"Title must be at most {TITLE_MAX} characters")

    if description is not None and not isinstance(description, str):
        raise ValidationError("description", "Description must be a string")
    d = normalize_description(description)
    if d is not None and len(d) > DESCRIPTION_MAX:
        raise ValidationError("description", f"Description must be at most {DESCRIPTION_MAX} characters")
    return t, d


def validate_task_id(value: Any, field: str = "id") -> int:
    if isinstance(value, bool):
        raise ValidationError(field, "Invalid task id")
    if isinstance(value, str):
        v = value.strip()
        # str.isdigit() also accepts superscripts and other non-ASCII digits.
        if not (v.isascii() and v.isdigit()):
            raise ValidationError(field, "Invalid task id")
        value = int(v)
    if not isinstance(value, int):
        raise ValidationError(field, "Invalid task id")
    if value <= 0:
        raise ValidationError(field, "Task id must be a positive integer")
    if value > TASK_ID_MAX:
        raise ValidationError(field, "Task id out of range")
    return value


def validate_reorder_entries(entries: Iterable[Any]) -> List[Tuple[int, int]]:
    """Check (id, sort_order) pairs; nothing is written until all pass."""
    out: List[Tuple[int, int]] = []
    seen = set()
    for entry in entries:
        if not isinstance(entry, (tuple, list)) or len(entry) != 2:
            raise ValidationError("taskIds", "Each reorder entry must be an (id, sortOrder) pair")
        tid = validate_task_id(entry[0], field="taskIds")
        order = entry[1]
        if isinstance(order, bool) or not isinstance(order, int) or order < 0:
            raise ValidationError("sortOrder", "sortOrder must be a non-negative integer")
        if tid in seen:
            raise ValidationError("taskIds", f"Duplicate task id {tid}")
        seen.add(tid)
        out.append((tid, order))
    return out
