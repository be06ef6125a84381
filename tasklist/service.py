from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, List

from .errors import NotFoundError, ValidationError
from .models import Task
from .ordering import PREPEND, InsertIntent, compute_insert_order, plan_reorder, renumber_around
from .ports import TaskRepo
from .validation import validate_reorder_entries, validate_task_id, validate_task_input

logger = logging.getLogger(__name__)


class TaskService:
    """
    Request-level operations over one TaskRepo.

    Built once at startup and handed to the routes; validation always runs
    before the first write.
    """

    def __init__(self, store: TaskRepo) -> None:
        self.store = store

    def list_tasks(self) -> List[Task]:
        return self.store.list_all()

    def get_task(self, task_id: Any) -> Task:
        tid = validate_task_id(task_id)
        task = self.store.get_by_id(tid)
        if task is None:
            raise NotFoundError(tid)
        return task

    def create_task(self, title: Any, description: Any = None, position: InsertIntent = PREPEND) -> Task:
        t, d = validate_task_input(title, description)
        current = self.store.list_all()
        try:
            plan = compute_insert_order(position, [x.sort_order for x in current])
        except ValueError as e:
            raise ValidationError("position", str(e)) from e
        reassign = renumber_around([x.id for x in current], plan.sort_order) if plan.renumber else None
        task = self.store.insert(t, d, plan.sort_order, shift_from=plan.shift_from, reassign=reassign)
        logger.info("Task created id=%s sort_order=%s position=%s", task.id, task.sort_order, position)
        return task

    def update_task(self, task_id: Any, title: Any, description: Any = None) -> Task:
        tid = validate_task_id(task_id)
        t, d = validate_task_input(title, description)
        task = self.store.update_fields(tid, {"title": t, "description": d})
        logger.info("Task updated id=%s", tid)
        return task

    def delete_task(self, task_id: Any) -> None:
        tid = validate_task_id(task_id)
        self.store.delete(tid)
        logger.info("Task deleted id=%s", tid)

    def toggle_task(self, task_id: Any) -> Task:
        tid = validate_task_id(task_id)
        task = self.store.toggle_completed(tid)
        logger.info("Task toggled id=%s completed=%s", tid, task.is_completed)
        return task

    def reorder(self, ids: Sequence[Any]) -> None:
        """
        Give every listed task its index as sort_order, atomically.

        Callers pass the full current view; tasks left out keep their old keys.
        """
        if isinstance(ids, (str, bytes)) or not isinstance(ids, Sequence):
            raise ValidationError("taskIds", "taskIds must be an array")
        entries = validate_reorder_entries(plan_reorder(list(ids)))
        self.store.bulk_set_sort_order(entries)
        logger.info("Tasks reordered count=%s", len(entries))
