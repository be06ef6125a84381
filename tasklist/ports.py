"""
Storage port used by the service layer.

TaskStore (SQLAlchemy) implements it in production; tests plug in an
in-memory double with the same all-or-nothing semantics.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Protocol, Tuple

from .models import Task


class TaskRepo(Protocol):
    def list_all(self) -> List[Task]: ...

    def get_by_id(self, task_id: int) -> Optional[Task]: ...

    def insert(
            self,
            title: str,
            description: Optional[str],
            sort_order: int,
            *,
            shift_from: Optional[int] = None,
            reassign: Optional[Iterable[Tuple[int, int]]] = None,
    ) -> Task: ...

    def update_fields(self, task_id: int, fields: Mapping[str, Any]) -> Task: ...

    def delete(self, task_id: int) -> None: ...

    def bulk_set_sort_order(self, updates: Iterable[Tuple[int, int]]) -> None: ...

    def increment_all_sort_order(self) -> None: ...

    def toggle_completed(self, task_id: int) -> Task: ...

    def max_sort_order(self) -> Optional[int]: ...

    def count(self) -> int: ...
