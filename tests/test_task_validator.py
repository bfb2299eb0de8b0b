"""Tests for the task request validators."""

import uuid

import pytest

from taskboard.errors import ValidationError
from taskboard.validators.task_validator import (
    validate_create,
    validate_delete,
    validate_list_query,
    validate_update,
)

from .conftest import TODAY

VALID = {
    "title": "  Team Meeting  ",
    "date": "2023-05-15",
    "startTime": "09:00",
    "endTime": "10:00",
    "category": "Meeting",
    "isStaticSchedule": False,
}


def _params(exc_info):
    return [d["param"] for d in exc_info.value.details]


class TestListQuery:
    def test_empty_query_is_valid(self):
        assert validate_list_query({}) == {}

    def test_normalizes_values(self):
        filters = validate_list_query(
            {"status": "completed", "category": " Meeting ", "isStaticSchedule": "true", "startDate": "2023-05-01"}
        )
        assert filters == {
            "status": "completed",
            "startDate": "2023-05-01",
            "category": "Meeting",
            "isStaticSchedule": True,
        }

    def test_status_all_is_accepted(self):
        assert validate_list_query({"status": "all"})["status"] == "all"

    def test_collects_every_violation(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_list_query({"status": "done", "startDate": "2023-13-01", "isStaticSchedule": "maybe"})
        assert _params(exc_info) == ["status", "startDate", "isStaticSchedule"]
        assert all(d["location"] == "query" for d in exc_info.value.details)

    def test_end_date_before_start_date(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_list_query({"startDate": "2023-05-10", "endDate": "2023-05-01"})
        assert _params(exc_info) == ["endDate"]

    def test_category_too_long(self):
        with pytest.raises(ValidationError):
            validate_list_query({"category": "x" * 51})


class TestCreate:
    def test_valid_payload_is_trimmed(self):
        cleaned = validate_create(dict(VALID), today=TODAY)
        assert cleaned["title"] == "Team Meeting"
        assert cleaned["isStaticSchedule"] is False

    def test_string_boolean_is_parsed(self):
        cleaned = validate_create(dict(VALID, isStaticSchedule="true"), today=TODAY)
        assert cleaned["isStaticSchedule"] is True

    def test_missing_fields_are_all_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_create({}, today=TODAY)
        assert set(_params(exc_info)) == {"title", "date", "startTime", "endTime", "category", "isStaticSchedule"}

    @pytest.mark.parametrize("end_time", ["09:00", "08:59"])
    def test_end_time_must_follow_start_time(self, end_time):
        with pytest.raises(ValidationError) as exc_info:
            validate_create(dict(VALID, endTime=end_time), today=TODAY)
        assert _params(exc_info) == ["endTime"]

    def test_date_in_the_past(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_create(dict(VALID, date="2023-04-30"), today=TODAY)
        assert _params(exc_info) == ["date"]

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon", 900])
    def test_bad_time_format(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_create(dict(VALID, startTime=value), today=TODAY)
        assert "startTime" in _params(exc_info)

    def test_blank_title_and_long_location(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_create(dict(VALID, title="   ", location="x" * 101), today=TODAY)
        assert _params(exc_info) == ["title", "location"]

    def test_body_must_be_an_object(self):
        with pytest.raises(ValidationError):
            validate_create(["not", "an", "object"], today=TODAY)


class TestUpdate:
    def test_partial_payload(self):
        task_id = str(uuid.uuid4())
        assert validate_update(task_id, {"priority": "high"}, today=TODAY) == {"priority": "high"}

    def test_unknown_keys_pass_through(self):
        task_id = str(uuid.uuid4())
        assert validate_update(task_id, {"color": "red"}, today=TODAY) == {"color": "red"}

    def test_bad_id_and_bad_field_reported_together(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_update("42", {"status": "archived"}, today=TODAY)
        assert _params(exc_info) == ["taskId", "status"]
        assert exc_info.value.details[0]["location"] == "params"

    def test_empty_payload(self):
        with pytest.raises(ValidationError):
            validate_update(str(uuid.uuid4()), {}, today=TODAY)

    def test_times_compared_when_both_present(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_update(str(uuid.uuid4()), {"startTime": "11:00", "endTime": "10:00"}, today=TODAY)
        assert _params(exc_info) == ["endTime"]

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_update(str(uuid.uuid4()), {"title": " "}, today=TODAY)
        assert _params(exc_info) == ["title"]

    def test_blank_location_clears_it(self):
        assert validate_update(str(uuid.uuid4()), {"location": ""}, today=TODAY) == {"location": None}


class TestDelete:
    def test_valid_uuid(self):
        task_id = str(uuid.uuid4())
        assert validate_delete(task_id) == task_id

    def test_invalid_id(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_delete("not-a-uuid")
        assert exc_info.value.message == "Invalid task ID"
