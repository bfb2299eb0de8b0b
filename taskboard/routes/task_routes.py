from flask import Blueprint, jsonify, request

from taskboard.errors import NotFoundError
from taskboard.repositories.task_repository import TaskRepository
from taskboard.utils.db import get_db
from taskboard.validators.task_validator import (
    validate_create,
    validate_delete,
    validate_list_query,
    validate_update,
)


tasks_bp = Blueprint("tasks", __name__)


def _repository() -> TaskRepository:
    return TaskRepository(get_db())


@tasks_bp.get("")
def list_tasks():
    filters = validate_list_query(request.args)
    tasks = _repository().list(filters)
    return jsonify(success=True, data=[t.to_dict() for t in tasks], message="Tasks retrieved successfully"), 200


@tasks_bp.post("")
def create_task():
    payload = validate_create(request.get_json(silent=True))
    task = _repository().create(payload)
    return jsonify(success=True, data=task.to_dict(), message="Task created successfully"), 201


@tasks_bp.put("/<task_id>")
def update_task(task_id):
    payload = validate_update(task_id, request.get_json(silent=True))
    task = _repository().update(task_id, payload)
    return jsonify(success=True, data=task.to_dict(), message="Task updated successfully"), 200


@tasks_bp.delete("/<task_id>")
def delete_task(task_id):
    validate_delete(task_id)
    if not _repository().delete(task_id):
        raise NotFoundError("Task not found")
    return jsonify(success=True, message="Task deleted successfully"), 200
