"""Data models for taskpad.

Exposes the Task dataclass and the EditRequest value type.

Decisions:
- Stored records keep the camelCase keys of the browser task list
  ("dueDate", "createdAt") so existing exports load unchanged.
- An absent due date is None in memory and "" on disk.
- Loading is lenient: a malformed dueDate reads as None and a non-boolean
  completed flag reads as False.
- created_at stays None on legacy records; display code falls back to "now".
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

PRIORITIES: Tuple[str, ...] = ("high", "medium", "low")
DEFAULT_PRIORITY = "medium"
DEFAULT_CATEGORY = "Other"


def normalize_priority(value: Optional[str]) -> str:
    if isinstance(value, str) and value.lower() in PRIORITIES:
        return value.lower()
    return DEFAULT_PRIORITY


def normalize_due_date(value: Any) -> Optional[str]:
    """Return a YYYY-MM-DD string, or None for anything else."""
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date().isoformat()
    except ValueError:
        return None


@dataclass
class Task:
    """A single task.

    Fields:
        id: Creation timestamp in epoch milliseconds, unique per collection.
        text: Trimmed, non-empty title.
        completed: Completion flag, toggled explicitly.
        category: Free-form label, "Other" when unset.
        priority: One of "high", "medium", "low".
        due_date: "YYYY-MM-DD" or None for no deadline.
        notes: Free text, possibly empty.
        created_at: Epoch milliseconds, None on legacy records.
    """
    id: int
    text: str
    completed: bool = False
    category: str = DEFAULT_CATEGORY
    priority: str = DEFAULT_PRIORITY
    due_date: Optional[str] = None
    notes: str = ""
    created_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'text': self.text,
            'completed': self.completed,
            'category': self.category,
            'priority': self.priority,
            'dueDate': self.due_date or "",
            'notes': self.notes,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        """Build a Task from a stored record, defaulting missing fields.

        Minimal records (id, text, completed) from the earlier schema are
        accepted as-is. Raises ValueError when the record has no usable text
        or id; the loader skips such records.
        """
        text = raw.get('text')
        if not isinstance(text, str) or not text.strip():
            raise ValueError(f"task record without text: {raw!r}")
        tid = raw.get('id')
        if isinstance(tid, bool) or not isinstance(tid, (int, float)):
            raise ValueError(f"task record without numeric id: {raw!r}")
        created = raw.get('createdAt')
        if isinstance(created, bool) or not isinstance(created, (int, float)):
            created = None
        return cls(
            id=int(tid),
            text=text.strip(),
            completed=raw.get('completed') is True,
            category=str(raw.get('category') or DEFAULT_CATEGORY),
            priority=normalize_priority(raw.get('priority')),
            due_date=normalize_due_date(raw.get('dueDate')),
            notes=str(raw.get('notes') or ""),
            created_at=int(created) if created is not None else None,
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, text={self.text}, completed={self.completed})"


@dataclass(frozen=True)
class EditRequest:
    """Result of an edit interaction.

    title None means the user cancelled; notes None keeps existing notes.
    A title that trims to empty rejects the whole edit.
    """
    title: Optional[str] = None
    notes: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self.title is None
