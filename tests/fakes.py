from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from tasklist.errors import NotFoundError, StorageError
from tasklist.models import Task


class MemoryTaskStore:
    """
    In-memory TaskRepo.

    Writes go to a copy of the rows which replaces the live dict only when the
    whole operation succeeded, mirroring a database transaction.
    Set `fail_writes = True` to make every write raise StorageError.
    """

    def __init__(self) -> None:
        self.rows: Dict[int, Task] = {}
        self._next_id = 1
        self.fail_writes = False

    def _now(self) -> datetime:
        return datetime.now(tz=timezone.utc)

    def _staged(self) -> Dict[int, Task]:
        if self.fail_writes:
            raise StorageError("write failed")
        return dict(self.rows)

    def list_all(self) -> List[Task]:
        return sorted(self.rows.values(), key=lambda t: (t.sort_order, -t.id))

    def get_by_id(self, task_id: int) -> Optional[Task]:
        return self.rows.get(task_id)

    def max_sort_order(self) -> Optional[int]:
        return max((t.sort_order for t in self.rows.values()), default=None)

    def count(self) -> int:
        return len(self.rows)

    def insert(
        self,
        title: str,
        description: Optional[str],
        sort_order: int,
        *,
        shift_from: Optional[int] = None,
        reassign: Optional[Iterable[Tuple[int, int]]] = None,
    ) -> Task:
        rows = self._staged()
        ts = self._now()
        for tid, order in reassign or ():
            if tid not in rows:
                raise NotFoundError(tid)
            rows[tid] = replace(rows[tid], sort_order=order, updated_at=ts)
        if shift_from is not None:
            for tid, t in rows.items():
                if t.sort_order >= shift_from:
                    rows[tid] = replace(t, sort_order=t.sort_order + 1, updated_at=ts)
        task = Task(
            id=self._next_id, title=title, description=description, is_completed=False,
            sort_order=sort_order, created_at=ts, updated_at=ts,
        )
        rows[task.id] = task
        self._next_id += 1
        self.rows = rows
        return task

    def update_fields(self, task_id: int, fields: Mapping[str, Any]) -> Task:
        rows = self._staged()
        if task_id not in rows:
            raise NotFoundError(task_id)
        rows[task_id] = replace(rows[task_id], updated_at=self._now(), **dict(fields))
        self.rows = rows
        return rows[task_id]

    def delete(self, task_id: int) -> None:
        rows = self._staged()
        if rows.pop(task_id, None) is None:
            raise NotFoundError(task_id)
        self.rows = rows

    def toggle_completed(self, task_id: int) -> Task:
        rows = self._staged()
        if task_id not in rows:
            raise NotFoundError(task_id)
        t = rows[task_id]
        rows[task_id] = replace(t, is_completed=not t.is_completed, updated_at=self._now())
        self.rows = rows
        return rows[task_id]

    def increment_all_sort_order(self) -> None:
        rows = self._staged()
        ts = self._now()
        for tid, t in rows.items():
            rows[tid] = replace(t, sort_order=t.sort_order + 1, updated_at=ts)
        self.rows = rows

    def bulk_set_sort_order(self, updates: Iterable[Tuple[int, int]]) -> None:
        rows = self._staged()
        ts = self._now()
        for tid, order in updates:
            if tid not in rows:
                raise NotFoundError(tid)
            rows[tid] = replace(rows[tid], sort_order=order, updated_at=ts)
        self.rows = rows


def seed(svc, *titles: str) -> List[Task]:
    """Create tasks so they end up displayed in the given order."""
    out = [svc.create_task(title) for title in reversed(titles)]
    return list(reversed(out))
