from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Literal, Optional, Union

from fastapi import FastAPI, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from .config import Settings, load_settings
from .errors import TaskListError, ValidationError
from .models import Task
from .ports import TaskRepo
from .service import TaskService
from .store import TaskStore

logger = logging.getLogger(__name__)

Position = Union[Literal["top", "bottom"], int]


class TaskIn(BaseModel):
    # Length rules live in validation.py so errors name the field and rule.
    title: Any = None
    description: Any = None


class TaskCreate(TaskIn):
    # "top", "bottom" or a 0-based index; checked by the insertion policy.
    position: Any = Field(default="top")


class ReorderPayload(BaseModel):
    taskIds: Any = None


class TaskOut(BaseModel):
    id: int; title: str; description: Optional[str] = None
    isCompleted: bool; sortOrder: int
    createdAt: datetime; updatedAt: datetime


def to_task_out(t: Task) -> TaskOut:
    return TaskOut(
        id=t.id, title=t.title, description=t.description,
        isCompleted=t.is_completed, sortOrder=t.sort_order,
        createdAt=t.created_at, updatedAt=t.updated_at,
    )


def get_service(request: Request) -> TaskService:
    return request.app.state.service


def create_app(settings: Optional[Settings] = None, store: Optional[TaskRepo] = None) -> FastAPI:
    """Build the app around one explicitly constructed store/service pair."""
    settings = settings or load_settings()
    if store is None:
        store = TaskStore(settings.database_url)

    app = FastAPI(title="Task list")
    app.state.settings = settings
    app.state.service = TaskService(store)
    app.add_middleware(
        CORSMiddleware, allow_origins=settings.cors_origins, allow_credentials=False,
        allow_methods=["*"], allow_headers=["*"],
    )

    @app.exception_handler(TaskListError)
    async def task_list_error(request: Request, exc: TaskListError):
        body = {"detail": exc.message}
        if isinstance(exc, ValidationError):
            body["field"] = exc.field
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.get("/api/health")
    def health(): return {"ok": True}

    @app.get("/api/tasks", response_model=List[TaskOut])
    def list_tasks(svc: TaskService = Depends(get_service)):
        return [to_task_out(t) for t in svc.list_tasks()]

    @app.post("/api/tasks", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
    def create_task(payload: TaskCreate, svc: TaskService = Depends(get_service)):
        return to_task_out(svc.create_task(payload.title, payload.description, payload.position))

    # Registered before /api/tasks/{task_id} so "reorder" is not taken as an id.
    @app.put("/api/tasks/reorder")
    def reorder_tasks(payload: ReorderPayload, svc: TaskService = Depends(get_service)):
        svc.reorder(payload.taskIds)
        return {"success": True}

    @app.get("/api/tasks/{task_id}", response_model=TaskOut)
    def get_task(task_id: str, svc: TaskService = Depends(get_service)):
        return to_task_out(svc.get_task(task_id))

    @app.put("/api/tasks/{task_id}", response_model=TaskOut)
    def update_task(task_id: str, payload: TaskIn, svc: TaskService = Depends(get_service)):
        return to_task_out(svc.update_task(task_id, payload.title, payload.description))

    @app.delete("/api/tasks/{task_id}")
    def delete_task(task_id: str, svc: TaskService = Depends(get_service)):
        svc.delete_task(task_id)
        return {"deleted": True}

    @app.patch("/api/tasks/{task_id}/toggle", response_model=TaskOut)
    def toggle_task(task_id: str, svc: TaskService = Depends(get_service)):
        return to_task_out(svc.toggle_task(task_id))

    if settings.front_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.front_dir), html=True), name="frontend")

    return app
