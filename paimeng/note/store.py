"""Persistent storage of reminder tasks."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime

from paimeng.message import parse_message
from paimeng.note.parse import RemindTask
from paimeng.note.schedule import gen_schedule
from paimeng.push import Target

log = logging.getLogger(__name__)

_COLUMNS = ("id", "user_id", "group_id", "content", "is_once", "spec", "run_at", "cron_id", "created_at")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS remind_tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL DEFAULT 0,
    group_id INTEGER NOT NULL DEFAULT 0,
    content TEXT NOT NULL DEFAULT '',
    is_once INTEGER NOT NULL DEFAULT 0,
    spec TEXT NOT NULL DEFAULT '',
    run_at TEXT,
    cron_id INTEGER NOT NULL DEFAULT 0,
    created_at TEXT
)
"""


def _time_out(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _time_in(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _row_to_task(row: sqlite3.Row) -> RemindTask:
    return RemindTask(
        id=row["id"],
        user_id=row["user_id"],
        group_id=row["group_id"],
        content=row["content"],
        is_once=bool(row["is_once"]),
        spec=row["spec"],
        run_at=_time_in(row["run_at"]),
        cron_id=row["cron_id"],
        created_at=_time_in(row["created_at"]),
    )


class NoteStore:
    """Reminder tasks kept in an SQLite database."""

    def __init__(self, path: str = ":memory:") -> None:
        self._db = sqlite3.connect(path)
        self._db.row_factory = sqlite3.Row
        with self._db:
            self._db.execute(_SCHEMA)

    def close(self) -> None:
        self._db.close()

    def __enter__(self) -> NoteStore:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def add(self, task: RemindTask) -> int:
        """Insert a task, or update only its cron id if its id already exists."""
        if task.created_at is None:
            task.created_at = datetime.now()
        values = (
            task.user_id,
            task.group_id,
            task.content,
            int(task.is_once),
            task.spec,
            _time_out(task.run_at),
            task.cron_id,
            _time_out(task.created_at),
        )
        with self._db:
            if task.id:
                self._db.execute(
                    f"INSERT INTO remind_tasks ({', '.join(_COLUMNS)}) VALUES (?,?,?,?,?,?,?,?,?) "
                    "ON CONFLICT(id) DO UPDATE SET cron_id = excluded.cron_id",
                    (task.id, *values),
                )
            else:
                cursor = self._db.execute(
                    f"INSERT INTO remind_tasks ({', '.join(_COLUMNS[1:])}) VALUES (?,?,?,?,?,?,?,?)",
                    values,
                )
                task.id = cursor.lastrowid
        return task.id

    def get(self, task_id: int) -> RemindTask | None:
        row = self._db.execute("SELECT * FROM remind_tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(row) if row else None

    def remove(self, task_id: int) -> bool:
        """Delete a task; whether it existed."""
        with self._db:
            cursor = self._db.execute("DELETE FROM remind_tasks WHERE id = ?", (task_id,))
        return cursor.rowcount > 0

    def _select(self, **conditions: int) -> list[RemindTask]:
        # Zero-valued conditions are not filters, as with struct queries.
        active = {key: value for key, value in conditions.items() if value}
        where = " AND ".join(f"{key} = ?" for key in active) or "1"
        rows = self._db.execute(
            f"SELECT * FROM remind_tasks WHERE {where} ORDER BY id", tuple(active.values())
        )
        return [_row_to_task(row) for row in rows]

    def all(self) -> list[RemindTask]:
        return self._select()

    def for_user(self, user_id: int, group_id: int = 0) -> list[RemindTask]:
        """Tasks a user set, within a group when ``group_id`` is not 0."""
        return self._select(user_id=user_id, group_id=group_id)

    def for_group(self, group_id: int) -> list[RemindTask]:
        """Every task aimed at a group."""
        return self._select(group_id=group_id)

    def count_for_user(self, user_id: int) -> int:
        return len(self._select(user_id=user_id))

    def clean_illegal(self, now: datetime | None = None) -> list[int]:
        """Delete every task that can no longer be scheduled; return their ids."""
        removed = []
        for task in self.all():
            try:
                gen_schedule(task, now)
            except ValueError as exc:
                log.info("删除无效的提醒任务，ID=%s, 原因=%s", task.id, exc)
                if self.remove(task.id):
                    removed.append(task.id)
        return removed


def job_target(task: RemindTask) -> Target:
    """The push that delivers a task's reminder when it fires."""
    target = Target(message=parse_message(task.content))
    if task.group_id:
        target.groups.append(task.group_id)
    else:
        target.friends.append(task.user_id)
    return target