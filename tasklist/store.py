from __future__ import annotations

import contextlib
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

from sqlalchemy import (
    create_engine, MetaData, Table, Column, Index,
    Integer, String, Boolean, DateTime, Text,
    select, insert, update, delete, func, not_, text, inspect,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from .errors import NotFoundError, StorageError, TaskListError
from .models import Task

logger = logging.getLogger(__name__)

metadata = MetaData()

tasks = Table(
    "tasks", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(100), nullable=False),
    Column("description", Text, nullable=True),
    Column("is_completed", Boolean, nullable=False, server_default="0"),
    Column("sort_order", Integer, nullable=False, server_default="0"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("ix_tasks_sort_order", "sort_order"),
    # Ids are never reused after delete.
    sqlite_autoincrement=True,
)

UPDATABLE_FIELDS = {"title", "description", "is_completed", "sort_order"}


def now_utc() -> datetime:
    return datetime.now(tz=timezone.utc)


def make_engine(db_url: str) -> Engine:
    kwargs: dict[str, Any] = {"future": True, "pool_pre_ping": True}
    if db_url.startswith("sqlite"):
        # FastAPI runs sync routes in a threadpool.
        kwargs["connect_args"] = {"check_same_thread": False}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(db_url, **kwargs)


class TaskStore:
    """
    SQLAlchemy-backed task table.

    Every multi-row mutation (prepend shift + insert, bulk reorder) runs in a
    single `engine.begin()` block: either all rows change or none do.
    """

    def __init__(self, db_url: str = "sqlite:///./tasks.db", engine: Optional[Engine] = None) -> None:
        self.engine = engine if engine is not None else make_engine(db_url)
        self.init_db()
        logger.info("TaskStore ready url=%s total=%s", self.engine.url.render_as_string(hide_password=True), self.count())

    def close(self) -> None:
        self.engine.dispose()

    # ---- schema ----

    def ensure_columns(self, table_name: str, required: dict[str, str]) -> None:
        insp = inspect(self.engine)
        cols = {c["name"] for c in insp.get_columns(table_name)} if insp.has_table(table_name) else set()
        with self.engine.begin() as conn:
            for col, ddl in required.items():
                if col not in cols:
                    conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {ddl}"))
                    logger.info("TaskStore migration: added column %s.%s", table_name, col)

    def init_db(self) -> None:
        """
        Create the table if missing and upgrade older schemas in place.

        `create_all()` does not add columns to an existing table, so a `tasks`
        table from before manual ordering gets `sort_order` added here.
        """
        metadata.create_all(self.engine)
        self.ensure_columns("tasks", {
            "sort_order": "sort_order INTEGER NOT NULL DEFAULT 0",
        })

    # ---- helpers ----

    @contextlib.contextmanager
    def _begin(self, op: str) -> Iterator[Connection]:
        try:
            with self.engine.begin() as conn:
                yield conn
        except TaskListError:
            raise
        except SQLAlchemyError as e:
            logger.exception("TaskStore %s failed; rolled back", op)
            raise StorageError(f"{op} failed") from e

    @staticmethod
    def _shift(conn: Connection, shift_from: Optional[int], ts: datetime) -> None:
        stmt = update(tasks).values(sort_order=tasks.c.sort_order + 1, updated_at=ts)
        if shift_from is not None:
            stmt = stmt.where(tasks.c.sort_order >= shift_from)
        conn.execute(stmt)

    @staticmethod
    def _set_orders(conn: Connection, updates: Iterable[Tuple[int, int]], ts: datetime) -> None:
        for tid, order in updates:
            res = conn.execute(
                update(tasks).where(tasks.c.id == tid).values(sort_order=order, updated_at=ts)
            )
            if res.rowcount == 0:
                raise NotFoundError(tid)

    # ---- reads ----

    def list_all(self) -> List[Task]:
        # Equal keys can only exist after a partial reorder; newest wins.
        stmt = select(tasks).order_by(tasks.c.sort_order.asc(), tasks.c.id.desc())
        with self._begin("list") as conn:
            rows = conn.execute(stmt).mappings().all()
        return [Task.from_row(r) for r in rows]

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with self._begin("get") as conn:
            row = conn.execute(select(tasks).where(tasks.c.id == task_id)).mappings().first()
        return Task.from_row(row) if row else None

    def max_sort_order(self) -> Optional[int]:
        with self._begin("max_sort_order") as conn:
            v = conn.execute(select(func.max(tasks.c.sort_order))).scalar()
        return int(v) if v is not None else None

    def count(self) -> int:
        with self._begin("count") as conn:
            return int(conn.execute(select(func.count()).select_from(tasks)).scalar_one())

    # ---- writes ----

    def insert(
        self,
        title: str,
        description: Optional[str],
        sort_order: int,
        *,
        shift_from: Optional[int] = None,
        reassign: Optional[Iterable[Tuple[int, int]]] = None,
    ) -> Task:
        """
        Insert a task in one transaction with the key moves it needs.

        `shift_from`: rows at or after that key move down by one first.
        `reassign`: explicit (id, sort_order) pairs applied first, as in
        bulk_set_sort_order().
        """
        ts = now_utc()
        with self._begin("insert") as conn:
            if reassign is not None:
                self._set_orders(conn, reassign, ts)
            if shift_from is not None:
                self._shift(conn, shift_from, ts)
            row = conn.execute(
                insert(tasks).values(
                    title=title, description=description, is_completed=False,
                    sort_order=sort_order, created_at=ts, updated_at=ts,
                ).returning(tasks)
            ).mappings().first()
        return Task.from_row(row)

    def update_fields(self, task_id: int, fields: Mapping[str, Any]) -> Task:
        values = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if not values:
            raise ValueError("Nothing to update")
        values["updated_at"] = now_utc()
        stmt = update(tasks).where(tasks.c.id == task_id).values(**values).returning(tasks)
        with self._begin("update") as conn:
            row = conn.execute(stmt).mappings().first()
            if not row:
                raise NotFoundError(task_id)
        return Task.from_row(row)

    def delete(self, task_id: int) -> None:
        with self._begin("delete") as conn:
            res = conn.execute(delete(tasks).where(tasks.c.id == task_id))
            if res.rowcount == 0:
                raise NotFoundError(task_id)

    def toggle_completed(self, task_id: int) -> Task:
        stmt = (
            update(tasks)
            .where(tasks.c.id == task_id)
            .values(is_completed=not_(tasks.c.is_completed), updated_at=now_utc())
            .returning(tasks)
        )
        with self._begin("toggle") as conn:
            row = conn.execute(stmt).mappings().first()
            if not row:
                raise NotFoundError(task_id)
        return Task.from_row(row)

    def increment_all_sort_order(self) -> None:
        with self._begin("increment_all_sort_order") as conn:
            self._shift(conn, None, now_utc())

    def bulk_set_sort_order(self, updates: Iterable[Tuple[int, int]]) -> None:
        """Apply every (id, sort_order) pair or none; a missing id rolls the batch back."""
        with self._begin("bulk_set_sort_order") as conn:
            self._set_orders(conn, updates, now_utc())
