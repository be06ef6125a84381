from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

import httpx

from .app import Position, TaskOut
from .drag import DragGestureResolver
from .errors import NotFoundError, StorageError, TaskListError, ValidationError

logger = logging.getLogger(__name__)


class TaskListClient:
    """HTTP client for the task list API; error responses come back as TaskListError."""

    def __init__(self, http: httpx.Client) -> None:
        self.http = http

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            resp = self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise StorageError(f"{method} {url} failed: {e}") from e
        if resp.is_success:
            return resp.json()

        try:
            body = resp.json()
        except ValueError:
            body = {}
        detail = body.get("detail") if isinstance(body, dict) else None
        if not isinstance(detail, str):
            detail = resp.reason_phrase or "Request failed"
        if resp.status_code == 404:
            raise NotFoundError(message=detail)
        if resp.status_code in (400, 422):
            field = body.get("field") if isinstance(body, dict) else None
            raise ValidationError(field or "", detail)
        raise StorageError(detail)

    def list_tasks(self) -> List[TaskOut]:
        return [TaskOut.model_validate(x) for x in self._request("GET", "/api/tasks")]

    def get_task(self, task_id: int) -> TaskOut:
        return TaskOut.model_validate(self._request("GET", f"/api/tasks/{task_id}"))

    def create_task(self, title: str, description: Optional[str] = None, position: Position = "top") -> TaskOut:
        payload = {"title": title, "description": description, "position": position}
        return TaskOut.model_validate(self._request("POST", "/api/tasks", json=payload))

    def update_task(self, task_id: int, title: str, description: Optional[str] = None) -> TaskOut:
        payload = {"title": title, "description": description}
        return TaskOut.model_validate(self._request("PUT", f"/api/tasks/{task_id}", json=payload))

    def delete_task(self, task_id: int) -> None:
        self._request("DELETE", f"/api/tasks/{task_id}")

    def toggle_task(self, task_id: int) -> TaskOut:
        return TaskOut.model_validate(self._request("PATCH", f"/api/tasks/{task_id}/toggle"))

    def reorder(self, task_ids: Sequence[int]) -> None:
        self._request("PUT", "/api/tasks/reorder", json={"taskIds": list(task_ids)})


class BoardSession:
    """
    Client-side view of the list.

    Drops are applied locally first; if the server rejects the reorder the
    local list is thrown away and re-fetched.
    """

    def __init__(self, client: TaskListClient) -> None:
        self.client = client
        self.tasks: List[TaskOut] = []
        self.drag: DragGestureResolver[TaskOut] = DragGestureResolver([])

    @property
    def ids(self) -> List[int]:
        return [t.id for t in self.tasks]

    def refresh(self) -> List[TaskOut]:
        self.tasks = self.client.list_tasks()
        return self.tasks

    def add(self, title: str, description: Optional[str] = None) -> TaskOut:
        task = self.client.create_task(title, description)
        self.tasks = [task] + self.tasks
        return task

    def start_drag(self, index: int) -> None:
        self.drag = DragGestureResolver(self.tasks)
        self.drag.grab(index)

    def hover(self, index: int, ratio: float) -> Optional[int]:
        return self.drag.hover(index, ratio)

    def hover_tail(self) -> Optional[int]:
        return self.drag.hover_tail()

    def cancel_drag(self) -> None:
        self.drag.cancel()

    def end_drag(self) -> bool:
        """Finish the gesture; True when a reorder was sent and accepted."""
        reordered = self.drag.release()
        if reordered is None:
            return False
        self.tasks = reordered
        try:
            self.client.reorder(self.ids)
        except TaskListError:
            logger.warning("Reorder rejected; reloading list from server")
            self.refresh()
            raise
        return True
