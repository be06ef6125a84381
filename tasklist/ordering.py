"""
Sort-order policy.

Display order is `sort_order` ascending. Inserts never create a duplicate
key: prepend shifts every row down by one, append takes max + 1, and a fixed
position takes the key of the row currently there and shifts that row and
everything after it, or renumbers the whole view when keys tie at that
index. A full reorder re-normalizes keys to 0..N-1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence, Tuple, Union

PREPEND = "top"
APPEND = "bottom"

InsertIntent = Union[Literal["top", "bottom"], int]


@dataclass(frozen=True)
class InsertPlan:
    sort_order: int
    # Rows with sort_order >= shift_from are incremented in the insert's transaction.
    shift_from: Optional[int] = None
    # Keys tie across the insertion point: rewrite the view as 0..N with a
    # hole at sort_order, see renumber_around().
    renumber: bool = False


def compute_insert_order(intent: InsertIntent, current_orders: Sequence[int]) -> InsertPlan:
    """
    Plan the key for a new task.

    `current_orders` are the existing keys in display order. An integer intent
    is a 0-based display index; past the end it behaves like append.
    """
    if intent == PREPEND:
        return InsertPlan(0, shift_from=0 if current_orders else None)

    if intent == APPEND:
        current_max = max(current_orders) if current_orders else None
        return InsertPlan(0 if current_max is None else current_max + 1)

    if isinstance(intent, bool) or not isinstance(intent, int) or intent < 0:
        raise ValueError(f"Unsupported insert position: {intent!r}")

    if intent >= len(current_orders):
        return compute_insert_order(APPEND, current_orders)
    key = current_orders[intent]
    if intent > 0 and current_orders[intent - 1] == key:
        # Shifting by key would also move rows shown before the index.
        return InsertPlan(intent, renumber=True)
    return InsertPlan(key, shift_from=key)


def renumber_around(ids: Sequence[int], index: int) -> List[Tuple[int, int]]:
    """Keys 0..N for `ids` in display order, skipping `index` for the new row."""
    return [(tid, i if i < index else i + 1) for i, tid in enumerate(ids)]


def plan_reorder(ids: Sequence[int]) -> List[Tuple[int, int]]:
    """Each id gets its position in the sequence as its new key."""
    return [(tid, index) for index, tid in enumerate(ids)]
