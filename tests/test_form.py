# tests/test_form.py

from __future__ import annotations

from datetime import date, datetime

from taskboard.client import TaskForm, form_defaults, validate_form
from taskboard.models import TaskPriority, TaskStatus

TODAY = date(2026, 10, 17)


def test_blank_form_defaults() -> None:
    values = form_defaults()

    assert values["status"] is TaskStatus.TODO
    assert values["priority"] is TaskPriority.MEDIUM
    assert values["dueDate"] is None


def test_blank_form_fails_on_title_only() -> None:
    result = validate_form(form_defaults(), today=TODAY)

    assert [e.path for e in result.errors] == ["title"]


def test_due_date_today_is_allowed() -> None:
    result = validate_form({"title": "t", "dueDate": datetime(2026, 10, 17, 8, 0)}, today=TODAY)

    assert result.valid


def test_due_date_before_today_is_rejected() -> None:
    result = validate_form({"title": "t", "dueDate": "2026-10-16T23:59:00"}, today=TODAY)

    assert result.errors[0].path == "dueDate"
    assert result.errors[0].message == "Due date cannot be in the past"


def test_payload_drops_empty_optionals() -> None:
    form = validate_form({"title": " t ", "assignee": "  "}, today=TODAY).data

    assert isinstance(form, TaskForm)
    assert form.to_payload() == {"title": "t", "status": "To Do", "priority": "Medium"}
    assert form.to_payload(include_cleared=True) == {
        "title": "t",
        "description": None,
        "status": "To Do",
        "priority": "Medium",
        "dueDate": None,
        "assignee": None,
    }
