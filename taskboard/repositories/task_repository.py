"""SQL access for the ``tasks`` table.

This is the only place that issues statements against ``tasks``. Inputs are
expected to have passed :mod:`taskboard.validators.task_validator` already;
the repository still guards the duration invariant before writing.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from taskboard.errors import InvalidStateError, NotFoundError, StorageError, ValidationError
from taskboard.models.task_model import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    UPDATABLE_FIELDS,
    Task,
    compute_duration,
)
from taskboard.utils.db import Database

logger = logging.getLogger(__name__)

TASK_COLUMNS = "id, title, date, startTime, endTime, location, category, isStaticSchedule, status, priority, duration"


def _checked_duration(start_time: str, end_time: str) -> int:
    duration = compute_duration(start_time, end_time)
    if duration <= 0:
        raise InvalidStateError("End time must be after start time")
    return duration


class TaskRepository:
    def __init__(self, db: Database):
        self.db = db

    def _storage_error(self, action: str, exc: SQLAlchemyError) -> StorageError:
        logger.exception("Error %s task: %s", action, exc)
        return StorageError(f"Error {action} task", detail=str(exc))

    def list(self, filters: Optional[Mapping[str, Any]] = None) -> List[Task]:
        filters = filters or {}
        clauses: List[str] = []
        params: Dict[str, Any] = {}

        status = filters.get("status")
        if status and status != "all":
            clauses.append("status = :status")
            params["status"] = status
        if filters.get("startDate"):
            clauses.append("date >= :start_date")
            params["start_date"] = filters["startDate"]
        if filters.get("endDate"):
            clauses.append("date <= :end_date")
            params["end_date"] = filters["endDate"]
        if filters.get("category"):
            clauses.append("category = :category")
            params["category"] = filters["category"]
        if filters.get("isStaticSchedule") is not None:
            clauses.append("isStaticSchedule = :is_static")
            params["is_static"] = bool(filters["isStaticSchedule"])

        query = f"SELECT {TASK_COLUMNS} FROM tasks"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY date ASC, startTime ASC, id ASC"

        try:
            result = self.db.execute(query, params)
        except SQLAlchemyError as exc:
            raise self._storage_error("retrieving", exc) from exc
        return [Task.from_row(row) for row in result.rows]

    def get(self, task_id: str) -> Optional[Task]:
        try:
            row = self.db.execute(f"SELECT {TASK_COLUMNS} FROM tasks WHERE id = :id", {"id": task_id}).first()
        except SQLAlchemyError as exc:
            raise self._storage_error("retrieving", exc) from exc
        return Task.from_row(row) if row else None

    def create(self, fields: Mapping[str, Any]) -> Task:
        task = Task(
            id=str(uuid.uuid4()),
            title=fields["title"],
            date=fields["date"],
            startTime=fields["startTime"],
            endTime=fields["endTime"],
            category=fields["category"],
            isStaticSchedule=bool(fields["isStaticSchedule"]),
            location=fields.get("location"),
            status=DEFAULT_STATUS,
            priority=DEFAULT_PRIORITY,
            duration=_checked_duration(fields["startTime"], fields["endTime"]),
        )
        query = (
            "INSERT INTO tasks (id, title, date, startTime, endTime, location, category, "
            "isStaticSchedule, status, priority, duration) "
            "VALUES (:id, :title, :date, :startTime, :endTime, :location, :category, "
            ":isStaticSchedule, :status, :priority, :duration)"
        )
        try:
            self.db.execute(query, task.to_dict())
        except SQLAlchemyError as exc:
            raise self._storage_error("creating", exc) from exc
        logger.info("Created task %s", task.id)
        return task

    def update(self, task_id: str, updates: Mapping[str, Any]) -> Task:
        """Apply whitelisted fields and return the task as stored afterwards.

        Keys outside ``UPDATABLE_FIELDS`` are dropped silently. When a time
        changes, duration is recomputed from the merged start and end times.
        """
        changes = {key: updates[key] for key in UPDATABLE_FIELDS if key in updates}
        if not changes:
            raise ValidationError("No valid fields to update")
        if "isStaticSchedule" in changes:
            changes["isStaticSchedule"] = bool(changes["isStaticSchedule"])

        try:
            with self.db.transaction() as tx:
                row = tx.execute(f"SELECT {TASK_COLUMNS} FROM tasks WHERE id = :id", {"id": task_id}).first()
                if row is None:
                    raise NotFoundError("Task not found")

                task = Task.from_row(row)
                for key, value in changes.items():
                    setattr(task, key, value)
                if "startTime" in changes or "endTime" in changes:
                    # Write the whole time window so the row never mixes two writers' times
                    task.duration = _checked_duration(task.startTime, task.endTime)
                    changes.update(startTime=task.startTime, endTime=task.endTime, duration=task.duration)

                assignments = ", ".join(f"{key} = :{key}" for key in changes)
                result = tx.execute(f"UPDATE tasks SET {assignments} WHERE id = :task_id", {**changes, "task_id": task_id})
                if result.rowcount == 0:
                    raise NotFoundError("Task not found")
        except SQLAlchemyError as exc:
            raise self._storage_error("updating", exc) from exc
        logger.info("Updated task %s (%s)", task_id, ", ".join(changes))
        return task

    def delete(self, task_id: str) -> bool:
        try:
            result = self.db.execute("DELETE FROM tasks WHERE id = :id", {"id": task_id})
        except SQLAlchemyError as exc:
            raise self._storage_error("deleting", exc) from exc
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted task %s", task_id)
        return deleted
