"""
Drag-and-drop gesture resolution for a vertical task list.

The pointer's vertical position inside the hovered card picks an insertion
slot: the top 45% means "above", the bottom 45% means "below", and the middle
band keeps whatever slot was chosen last so the marker does not flicker while
the pointer sits near a card's center.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

ABOVE_ZONE = 0.45
BELOW_ZONE = 0.55


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


def move_item(items: Sequence[T], dragged_index: int, target_index: int) -> List[T]:
    """
    Move `items[dragged_index]` to insertion slot `target_index`.

    Slots are counted in the original list (0 = before the first item,
    len(items) = after the last). Removing the item first shifts later slots
    up by one, hence the adjustment.
    """
    out = list(items)
    item = out.pop(dragged_index)
    if target_index > dragged_index:
        target_index -= 1
    out.insert(target_index, item)
    return out


class DragGestureResolver(Generic[T]):
    def __init__(self, items: Sequence[T]) -> None:
        self.items: List[T] = list(items)
        self.phase = DragPhase.IDLE
        self.dragged_index: Optional[int] = None
        self.target: Optional[int] = None

    @property
    def dragging(self) -> bool:
        return self.phase is DragPhase.DRAGGING

    def _reset(self) -> None:
        self.phase = DragPhase.IDLE
        self.dragged_index = None
        self.target = None

    def _propose(self, candidate: int) -> None:
        assert self.dragged_index is not None
        if candidate in (self.dragged_index, self.dragged_index + 1):
            # Dropping into its own slot changes nothing; hide the marker.
            self.target = None
        else:
            self.target = candidate

    def grab(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            raise IndexError(f"drag index {index} out of range")
        self.phase = DragPhase.DRAGGING
        self.dragged_index = index
        self.target = None

    def hover(self, index: int, ratio: float) -> Optional[int]:
        """Pointer is over card `index` at `ratio` (0 = top edge, 1 = bottom edge)."""
        if not self.dragging:
            return None
        if not 0 <= index < len(self.items):
            raise IndexError(f"hover index {index} out of range")
        ratio = min(max(ratio, 0.0), 1.0)
        if ratio < ABOVE_ZONE:
            self._propose(index)
        elif ratio > BELOW_ZONE:
            self._propose(index + 1)
        return self.target

    def hover_at(self, index: int, offset_y: float, height: float) -> Optional[int]:
        ratio = offset_y / height if height > 0 else 0.5
        return self.hover(index, ratio)

    def hover_tail(self) -> Optional[int]:
        """Pointer is over the drop area below the last card."""
        if self.dragging:
            self._propose(len(self.items))
        return self.target

    def cancel(self) -> None:
        """Pointer left the list: abandon the gesture."""
        self._reset()

    def release(self) -> Optional[List[T]]:
        """End the gesture; returns the reordered items, or None when nothing moves."""
        result = None
        if self.dragging and self.target is not None and self.dragged_index is not None:
            result = move_item(self.items, self.dragged_index, self.target)
        self._reset()
        return result
