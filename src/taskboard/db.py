from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generator, List, Mapping, Optional

from .errors import ConflictError, StoreError
from .models import CategoryEntity, TaskEntity
from .repositories import MUTABLE_TASK_FIELDS, CategoryRepository, TaskRepository, new_task_id
from .schemas import TaskCreate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _TaskCols:
    table: str = "tasks"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    completed: str = "completed"
    priority: str = "priority"
    due_date: str = "due_date"
    category: str = "category"
    created_at: str = "created_at"


@dataclass(frozen=True)
class _CategoryCols:
    table: str = "categories"
    name: str = "name"
    created_at: str = "created_at"


_T = _TaskCols()
_C = _CategoryCols()


def _parse_dt(s: Optional[str]) -> Optional[datetime]:
    if s is None:
        return None
    return datetime.fromisoformat(s)


def _fmt_dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class _SQLiteCollection:
    """
    Shared connection handling for SQLite-backed collections.

    A connection is opened per operation and committed on success. Driver
    errors are logged and re-raised as StoreError.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            logger.exception("Could not open database at %s", self._db_path)
            raise StoreError("Could not connect to the database") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            logger.exception("Database operation failed")
            raise StoreError("Database operation failed") from e
        finally:
            conn.close()

    def _init_db(self) -> None:
        raise NotImplementedError


class SQLiteTaskRepository(_SQLiteCollection, TaskRepository):
    """
    SQLite tasks collection implementing the TaskRepository interface.
    """

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_T.table} (
                    {_T.id} TEXT PRIMARY KEY,
                    {_T.title} TEXT NOT NULL,
                    {_T.description} TEXT NOT NULL DEFAULT '',
                    {_T.completed} INTEGER NOT NULL DEFAULT 0,
                    {_T.priority} TEXT NOT NULL DEFAULT 'medium'
                        CHECK ({_T.priority} IN ('low', 'medium', 'high')),
                    {_T.due_date} TEXT NULL,
                    {_T.category} TEXT NOT NULL DEFAULT 'personal',
                    {_T.created_at} TEXT NOT NULL
                )
                """
            )

    def _row_to_entity(self, row: sqlite3.Row) -> TaskEntity:
        return {
            "id": str(row[_T.id]),
            "title": str(row[_T.title]),
            "description": str(row[_T.description]),
            "completed": bool(row[_T.completed]),
            "priority": row[_T.priority],
            "due_date": _parse_dt(row[_T.due_date]),
            "category": str(row[_T.category]),
            "created_at": _parse_dt(row[_T.created_at]),  # type: ignore
        }

    def _select(self, conn: sqlite3.Connection, task_id: str) -> Optional[sqlite3.Row]:
        return conn.execute(f"SELECT * FROM {_T.table} WHERE {_T.id} = ?", (task_id,)).fetchone()

    def create(self, data: TaskCreate) -> TaskEntity:
        task_id = new_task_id()
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_T.table} ({_T.id}, {_T.title}, {_T.description}, {_T.completed},
                    {_T.priority}, {_T.due_date}, {_T.category}, {_T.created_at})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task_id,
                    data.title,
                    data.description,
                    1 if data.completed else 0,
                    data.priority,
                    _fmt_dt(data.due_date),
                    data.category,
                    datetime.now().isoformat(),
                ),
            )
            row = self._select(conn, task_id)
            assert row is not None
            return self._row_to_entity(row)

    def get(self, task_id: str) -> Optional[TaskEntity]:
        with self._conn() as conn:
            row = self._select(conn, task_id)
            return self._row_to_entity(row) if row else None

    def update(self, task_id: str, changes: Mapping[str, Any]) -> Optional[TaskEntity]:
        with self._conn() as conn:
            if self._select(conn, task_id) is None:
                return None

            assignments = []
            params: list = []
            for field, value in changes.items():
                if field not in MUTABLE_TASK_FIELDS:
                    continue
                if field == "completed":
                    value = 1 if value else 0
                elif field == "due_date":
                    value = _fmt_dt(value)
                assignments.append(f"{getattr(_T, field)} = ?")
                params.append(value)

            if assignments:
                conn.execute(
                    f"UPDATE {_T.table} SET {', '.join(assignments)} WHERE {_T.id} = ?",
                    [*params, task_id],
                )
            row = self._select(conn, task_id)
            assert row is not None
            return self._row_to_entity(row)

    def delete(self, task_id: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_T.table} WHERE {_T.id} = ?", (task_id,))
            return cur.rowcount > 0

    def list(self) -> List[TaskEntity]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_T.table} ORDER BY rowid").fetchall()
            return [self._row_to_entity(r) for r in rows]


class SQLiteCategoryRepository(_SQLiteCollection, CategoryRepository):
    """
    SQLite categories collection. A UNIQUE constraint on the name column backs
    the uniqueness invariant.
    """

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_C.table} (
                    {_C.name} TEXT NOT NULL UNIQUE,
                    {_C.created_at} TEXT NOT NULL
                )
                """
            )

    def _row_to_entity(self, row: sqlite3.Row) -> CategoryEntity:
        return {
            "name": str(row[_C.name]),
            "created_at": _parse_dt(row[_C.created_at]),  # type: ignore
        }

    def create(self, name: str) -> CategoryEntity:
        now = datetime.now().isoformat()
        with self._conn() as conn:
            try:
                conn.execute(
                    f"INSERT INTO {_C.table} ({_C.name}, {_C.created_at}) VALUES (?, ?)",
                    (name, now),
                )
            except sqlite3.IntegrityError as e:
                raise ConflictError("Category already exists") from e
            return {"name": name, "created_at": datetime.fromisoformat(now)}

    def get(self, name: str) -> Optional[CategoryEntity]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_C.table} WHERE {_C.name} = ?", (name,)).fetchone()
            return self._row_to_entity(row) if row else None

    def delete(self, name: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_C.table} WHERE {_C.name} = ?", (name,))
            return cur.rowcount > 0

    def list(self) -> List[CategoryEntity]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_C.table} ORDER BY {_C.name}").fetchall()
            return [self._row_to_entity(r) for r in rows]
