"""Request checks for the task endpoints.

Each ``validate_*`` function is pure: it collects every violation, raises
:class:`~taskboard.errors.ValidationError` if there are any, and otherwise
returns a normalized copy of the input (strings trimmed, booleans parsed).
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from taskboard.errors import ValidationError
from taskboard.models.task_model import PRIORITIES, STATUSES
from taskboard.utils.validation import (
    Violation,
    field,
    is_boolean,
    is_date,
    is_missing,
    is_time,
    is_uuid,
    length,
    max_length,
    not_before,
    one_of,
    parse_bool,
    parse_date,
    raise_for,
    run_rules,
    strip_strings,
)

LIST_STATUSES = STATUSES + ("all",)

TASK_ID_RULE = field("taskId", is_uuid, required=True, location="params", label="Task ID")


def _end_date_not_before_start(data: Mapping[str, Any]) -> List[Violation]:
    start, end = parse_date(data.get("startDate")), parse_date(data.get("endDate"))
    if start and end and end < start:
        return [Violation("endDate", "endDate must not be before startDate", "query")]
    return []


def _end_time_after_start(data: Mapping[str, Any]) -> List[Violation]:
    start, end = data.get("startTime"), data.get("endTime")
    if is_time(start) or is_time(end):
        return []
    # Zero-padded HH:MM compares correctly as text
    if end <= start:
        return [Violation("endTime", "End time must be after start time")]
    return []


NON_NULLABLE_FIELDS = ("title", "date", "startTime", "endTime", "category", "isStaticSchedule", "status", "priority")


def _no_blank_values(data: Mapping[str, Any]) -> List[Violation]:
    return [Violation(name, f"{name} cannot be empty") for name in NON_NULLABLE_FIELDS if name in data and is_missing(data[name])]


def _task_field_rules(today: date, required: bool):
    return [
        field("title", length(1, 100), required=required, label="Title"),
        field("date", is_date, not_before(today), required=required, label="Date"),
        field("startTime", is_time, required=required, label="Start time"),
        field("endTime", is_time, required=required, label="End time"),
        field("category", length(1, 50), required=required, label="Category"),
        field("isStaticSchedule", is_boolean, required=required, label="isStaticSchedule"),
        field("location", max_length(100), label="Location"),
        _end_time_after_start,
    ]


def _normalize(data: Mapping[str, Any]) -> Dict[str, Any]:
    cleaned = strip_strings(data)
    if "isStaticSchedule" in cleaned and cleaned["isStaticSchedule"] is not None:
        cleaned["isStaticSchedule"] = parse_bool(cleaned["isStaticSchedule"])
    if cleaned.get("location") == "":
        cleaned["location"] = None
    return cleaned


def _require_object(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return payload


LIST_QUERY_RULES = [
    field("status", one_of(*LIST_STATUSES), location="query"),
    field("startDate", is_date, location="query"),
    field("endDate", is_date, location="query"),
    field("category", length(1, 50), location="query"),
    field("isStaticSchedule", is_boolean, location="query"),
    _end_date_not_before_start,
]


def validate_list_query(params: Mapping[str, Any]) -> Dict[str, Any]:
    params = dict(params)
    raise_for(run_rules(params, LIST_QUERY_RULES), "Invalid query parameters")
    filters = {key: value for key, value in _normalize(params).items() if value not in (None, "")}
    return {key: filters[key] for key in ("status", "startDate", "endDate", "category", "isStaticSchedule") if key in filters}


def validate_create(payload: Any, today: Optional[date] = None) -> Dict[str, Any]:
    payload = _require_object(payload)
    rules = _task_field_rules(today or date.today(), required=True)
    raise_for(run_rules(payload, rules))
    return _normalize(payload)


def validate_update(task_id: Any, payload: Any, today: Optional[date] = None) -> Dict[str, Any]:
    violations = run_rules({"taskId": task_id}, [TASK_ID_RULE])
    if not isinstance(payload, Mapping) or not payload:
        violations.append(Violation("body", "Request body must be a non-empty JSON object"))
        raise_for(violations)

    rules = _task_field_rules(today or date.today(), required=False) + [
        field("status", one_of(*STATUSES), label="Status"),
        field("priority", one_of(*PRIORITIES), label="Priority"),
        _no_blank_values,
    ]
    violations.extend(run_rules(payload, rules))
    raise_for(violations)
    return _normalize(payload)


def validate_delete(task_id: Any) -> str:
    raise_for(
        run_rules({"taskId": task_id}, [TASK_ID_RULE]),
        "Invalid task ID",
    )
    return task_id
