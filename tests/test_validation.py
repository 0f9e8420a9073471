# tests/test_validation.py

from __future__ import annotations

from datetime import date, datetime

from taskboard.models import TaskPriority, TaskStatus
from taskboard.schemas.task import validate_create, validate_update

VALID = {"title": "Write docs", "status": "To Do", "priority": "Low"}


def _paths(result) -> list[str]:
    return [error.path for error in result.errors]


def test_missing_title_is_reported() -> None:
    result = validate_create({"status": "To Do", "priority": "Low"})

    assert not result.valid
    assert result.errors[0].path == "title"
    assert result.errors[0].message == "Title is required"


def test_empty_title_is_reported_as_required() -> None:
    result = validate_create({**VALID, "title": ""})

    assert _paths(result) == ["title"]
    assert result.errors[0].message == "Title is required"


def test_blank_title_is_reported_as_empty() -> None:
    result = validate_create({**VALID, "title": "    "})

    assert _paths(result) == ["title"]
    assert result.errors[0].message == "Title cannot be empty"


def test_title_length_is_checked_after_trimming() -> None:
    ok = validate_create({**VALID, "title": "  " + "a" * 100 + "  "})
    assert ok.valid
    assert ok.data.title == "a" * 100

    too_long = validate_create({**VALID, "title": "a" * 101})
    assert too_long.errors[0].message == "Title must be less than 100 characters"


def test_optional_strings_are_trimmed_and_blank_becomes_absent() -> None:
    result = validate_create(
        {**VALID, "title": "  Write docs ", "description": "", "assignee": "  Ann  "}
    )

    assert result.valid
    assert result.data.title == "Write docs"
    assert result.data.description is None
    assert result.data.assignee == "Ann"


def test_length_limits_on_optional_fields() -> None:
    result = validate_create({**VALID, "description": "d" * 501, "assignee": "a" * 51})

    assert _paths(result) == ["description", "assignee"]
    assert result.errors[0].message == "Description must be less than 500 characters"
    assert result.errors[1].message == "Assignee name must be less than 50 characters"


def test_unknown_enum_values_are_violations_in_field_order() -> None:
    result = validate_create({"title": "", "status": "ToDo", "priority": "Urgent"})

    assert _paths(result) == ["title", "status", "priority"]
    assert result.errors[1].message == "Please select a valid status"
    assert result.errors[2].message == "Please select a valid priority"


def test_wrong_shapes_do_not_raise() -> None:
    assert _paths(validate_create(["not", "an", "object"])) == [""]
    assert _paths(validate_create({**VALID, "title": 42})) == ["title"]
    assert _paths(validate_update("nope")) == [""]


def test_enum_values_are_parsed() -> None:
    result = validate_create({"title": "t", "status": "In Progress", "priority": "High"})

    assert result.data.status is TaskStatus.IN_PROGRESS
    assert result.data.priority is TaskPriority.HIGH


def test_api_accepts_past_due_dates_by_default() -> None:
    result = validate_create({**VALID, "dueDate": "2001-01-01T00:00:00Z"}, strict_due_dates=False)

    assert result.valid
    assert result.data.due_date.year == 2001


def test_strict_mode_rejects_past_due_dates() -> None:
    today = date(2026, 10, 17)

    past = validate_create(
        {**VALID, "dueDate": "2026-10-16T23:00:00"}, strict_due_dates=True, today=today
    )
    assert _paths(past) == ["dueDate"]
    assert past.errors[0].message == "Due date cannot be in the past"

    same_day = validate_create(
        {**VALID, "dueDate": "2026-10-17T00:00:00"}, strict_due_dates=True, today=today
    )
    assert same_day.valid


def test_bad_due_date_and_blank_due_date() -> None:
    bad = validate_create({**VALID, "dueDate": "not-a-date"})
    assert bad.errors[0].path == "dueDate"
    assert bad.errors[0].message == "Please enter a valid date"

    blank = validate_create({**VALID, "dueDate": ""})
    assert blank.valid
    assert blank.data.due_date is None


def test_update_only_includes_supplied_fields() -> None:
    result = validate_update({"status": "Done"})

    assert result.valid
    assert result.data.model_fields_set == {"status"}
    assert result.data.status is TaskStatus.DONE


def test_update_discards_id_and_unknown_fields() -> None:
    result = validate_update({"id": "999", "color": "red", "priority": "High"})

    assert result.valid
    assert result.data.model_fields_set == {"priority"}


def test_update_rejects_null_for_required_fields() -> None:
    result = validate_update({"title": None, "status": None})

    assert _paths(result) == ["title", "status"]
    assert result.errors[0].message == "Title is required"
    assert result.errors[1].message == "Please select a valid status"


def test_update_null_clears_optional_field() -> None:
    result = validate_update({"assignee": None, "dueDate": None})

    assert result.valid
    assert result.data.model_fields_set == {"assignee", "due_date"}
    assert result.data.assignee is None


def test_update_empty_payload_is_valid() -> None:
    result = validate_update({})

    assert result.valid
    assert result.data.model_fields_set == set()


def test_update_applies_field_constraints() -> None:
    result = validate_update({"title": "   ", "dueDate": datetime(2020, 1, 1).isoformat()})

    assert _paths(result) == ["title"]
