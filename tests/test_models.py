# tests/test_models.py

from __future__ import annotations

import pytest

from taskpad.models import EditRequest, Task


def test_to_dict_uses_stored_key_names() -> None:
    task = Task(id=1, text="Buy milk", due_date="2024-06-01", created_at=5)
    assert task.to_dict() == {
        "id": 1,
        "text": "Buy milk",
        "completed": False,
        "category": "Other",
        "priority": "medium",
        "dueDate": "2024-06-01",
        "notes": "",
        "createdAt": 5,
    }


def test_absent_due_date_is_stored_empty_and_read_back_as_none() -> None:
    task = Task(id=1, text="x")
    assert task.to_dict()["dueDate"] == ""
    assert Task.from_dict(task.to_dict()).due_date is None


def test_minimal_legacy_record_gets_defaults() -> None:
    task = Task.from_dict({"id": 42, "text": "old one", "completed": True})
    assert task.completed is True
    assert task.category == "Other"
    assert task.priority == "medium"
    assert task.due_date is None
    assert task.notes == ""
    assert task.created_at is None


def test_unknown_priority_normalizes_to_medium() -> None:
    assert Task.from_dict({"id": 1, "text": "x", "priority": "urgent"}).priority == "medium"
    assert Task.from_dict({"id": 1, "text": "x", "priority": "HIGH"}).priority == "high"


@pytest.mark.parametrize("raw", [
    {"id": 1},
    {"id": 1, "text": "   "},
    {"text": "no id"},
    {"id": "7", "text": "string id"},
])
def test_unusable_records_are_rejected(raw: dict) -> None:
    with pytest.raises(ValueError):
        Task.from_dict(raw)


def test_edit_request_cancelled_only_without_title() -> None:
    assert EditRequest().cancelled
    assert EditRequest(notes="n").cancelled
    assert not EditRequest(title="").cancelled


@pytest.mark.parametrize("due, expected", [
    ("2024-06-01", "2024-06-01"),
    (" 2024-06-01 ", "2024-06-01"),
    (20240601, None),
    ("01/06/2024", None),
    ("2024-02-30", None),
    (None, None),
    ("", None),
])
def test_due_date_normalized_on_load(due: object, expected: str | None) -> None:
    assert Task.from_dict({"id": 1, "text": "x", "dueDate": due}).due_date == expected


@pytest.mark.parametrize("flag, expected", [
    (True, True),
    (False, False),
    ("false", False),
    ("true", False),
    (1, False),
    (None, False),
])
def test_completed_accepts_only_real_booleans(flag: object, expected: bool) -> None:
    assert Task.from_dict({"id": 1, "text": "x", "completed": flag}).completed is expected


def test_malformed_due_dates_do_not_break_due_sort() -> None:
    from taskpad.store import TaskStore
    from taskpad.view import is_overdue, visible_tasks

    store = TaskStore([
        {"id": 1, "text": "x", "dueDate": 20240601},
        {"id": 2, "text": "y", "dueDate": "2024-06-01"},
    ])
    ordered = visible_tasks(store.all_tasks(), sort_mode="due-asc", today="2024-06-02")
    assert [t.id for t in ordered] == [2, 1]
    assert [is_overdue(t, "2024-06-02") for t in ordered] == [True, False]
