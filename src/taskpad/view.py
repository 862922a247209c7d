"""View pipeline: derive the visible, ordered subset of the task collection.

Order of stages is fixed: status filter, then search, then sort. Nothing
here mutates tasks.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Tuple

from taskpad.models import Task

logger = logging.getLogger(__name__)

FILTER_MODES: Tuple[str, ...] = ("all", "pending", "completed", "today")
SORT_MODES: Tuple[str, ...] = ("created-desc", "created-asc", "alpha-asc", "alpha-desc", "due-asc")
DEFAULT_FILTER = "all"
DEFAULT_SORT = "created-desc"


@dataclass(frozen=True)
class Counts:
    total: int
    completed: int
    pending: int


def today_string(now: Optional[date] = None) -> str:
    """Local calendar date as YYYY-MM-DD."""
    return (now or date.today()).isoformat()


def is_overdue(task: Task, today: str) -> bool:
    return bool(task.due_date) and not task.completed and task.due_date < today


def count_tasks(tasks: Iterable[Task]) -> Counts:
    tasks = list(tasks)
    completed = sum(1 for t in tasks if t.completed)
    return Counts(total=len(tasks), completed=completed, pending=len(tasks) - completed)


# -------------------- stages --------------------
def _passes_filter(task: Task, filter_mode: str, today: str) -> bool:
    if filter_mode == "completed" and not task.completed:
        return False
    if filter_mode == "pending" and task.completed:
        return False
    if filter_mode == "today" and task.due_date != today:
        return False
    return True


def _matches_search(task: Task, query: str) -> bool:
    return query in task.text.lower() or query in (task.notes or "").lower()


def _sort(tasks: List[Task], sort_mode: str) -> List[Task]:
    if sort_mode == "created-desc":
        return sorted(tasks, key=lambda t: t.created_at or 0, reverse=True)
    if sort_mode == "created-asc":
        return sorted(tasks, key=lambda t: t.created_at or 0)
    if sort_mode == "alpha-asc":
        return sorted(tasks, key=lambda t: (t.text.casefold(), t.text))
    if sort_mode == "alpha-desc":
        return sorted(tasks, key=lambda t: (t.text.casefold(), t.text), reverse=True)
    if sort_mode == "due-asc":
        # undated tasks go last and keep their relative order
        return sorted(tasks, key=lambda t: (not t.due_date, t.due_date or ""))
    return tasks


def visible_tasks(
    tasks: Iterable[Task],
    filter_mode: str = DEFAULT_FILTER,
    search: str = "",
    sort_mode: str = DEFAULT_SORT,
    today: Optional[str] = None,
) -> List[Task]:
    today = today or today_string()
    query = (search or "").strip().lower()
    filtered = [
        t for t in tasks
        if _passes_filter(t, filter_mode, today) and (not query or _matches_search(t, query))
    ]
    return _sort(filtered, sort_mode)


# -------------------- interactive state --------------------
@dataclass
class ViewState:
    """Pipeline parameters for an interactive session."""
    filter_mode: str = DEFAULT_FILTER
    search: str = ""
    sort_mode: str = DEFAULT_SORT

    def set_filter(self, mode: str) -> bool:
        if mode not in FILTER_MODES:
            logger.debug("Ignoring unknown filter mode %r", mode)
            return False
        self.filter_mode = mode
        return True

    def set_sort(self, mode: str) -> bool:
        if mode not in SORT_MODES:
            logger.debug("Ignoring unknown sort mode %r", mode)
            return False
        self.sort_mode = mode
        return True

    def set_search(self, text: str) -> None:
        self.search = (text or "").strip()

    def apply(self, tasks: Iterable[Task], today: Optional[str] = None) -> List[Task]:
        return visible_tasks(tasks, self.filter_mode, self.search, self.sort_mode, today)
