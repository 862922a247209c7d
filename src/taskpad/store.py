"""Task store: holds the collection, id allocation, mutation and persistence.

Every mutation writes the full collection through the injected storage and
then notifies subscribers. Bad ids and empty text are silent no-ops.
"""
from __future__ import annotations
import logging
import time
from typing import Any, Callable, Iterable, List, Mapping, Optional, Protocol, Union

from taskpad.models import Task, EditRequest, DEFAULT_CATEGORY, normalize_priority
from taskpad.view import Counts, count_tasks

logger = logging.getLogger(__name__)

Listener = Callable[["TaskStore"], None]


class TaskSink(Protocol):
    def save_tasks(self, records: List[dict]) -> None: ...


def _now_ms() -> int:
    return int(time.time() * 1000)


class TaskStore:
    def __init__(
        self,
        tasks: Optional[Iterable[Union[Task, Mapping[str, Any]]]] = None,
        storage: Optional[TaskSink] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self._tasks: List[Task] = []
        self._storage = storage
        self._clock: Callable[[], int] = clock or _now_ms
        self._listeners: List[Listener] = []
        if tasks:
            self._load(tasks)

    # -------------------- loading / migration --------------------
    def _load(self, tasks: Iterable[Union[Task, Mapping[str, Any]]]) -> None:
        seen = set()
        skipped = 0
        for raw in tasks:
            if isinstance(raw, Task):
                task = raw
            else:
                try:
                    task = Task.from_dict(raw)
                except ValueError:
                    skipped += 1
                    continue
            if task.id in seen:  # duplicate ids from hand-edited files
                skipped += 1
                continue
            seen.add(task.id)
            self._tasks.append(task)
        if skipped:
            logger.warning("Skipped %d unusable task record(s)", skipped)
        logger.info("Loaded %d task(s)", len(self._tasks))

    # -------------------- id management --------------------
    def _allocate_id(self, now: int) -> int:
        ids = {t.id for t in self._tasks}
        if now not in ids:
            return now
        return max(ids) + 1

    # -------------------- change notification --------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _commit(self) -> None:
        if self._storage is not None:
            self._storage.save_tasks(self.to_records())
        for listener in list(self._listeners):
            listener(self)

    # -------------------- queries --------------------
    def all_tasks(self) -> List[Task]:
        return list(self._tasks)

    def get(self, task_id: int) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def counts(self) -> Counts:
        return count_tasks(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    # -------------------- task operations --------------------
    def create(
        self,
        text: str,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        due_date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[Task]:
        trimmed = (text or "").strip()
        if not trimmed:
            return None
        now = self._clock()
        task = Task(
            id=self._allocate_id(now),
            text=trimmed,
            completed=False,
            category=category or DEFAULT_CATEGORY,
            priority=normalize_priority(priority),
            due_date=due_date or None,
            notes=notes or "",
            created_at=now,
        )
        self._tasks.append(task)
        logger.debug("Created task %d", task.id)
        self._commit()
        return task

    def toggle_complete(self, task_id: int) -> Optional[Task]:
        task = self.get(task_id)
        if task is not None:
            task.completed = not task.completed
            logger.debug("Task %d completed=%s", task_id, task.completed)
        self._commit()
        return task

    def edit(self, task_id: int, request: EditRequest) -> Optional[Task]:
        """Apply an edit atomically; cancelled or empty titles change nothing."""
        task = self.get(task_id)
        if task is None or request.title is None:
            return None
        trimmed = request.title.strip()
        if not trimmed:
            logger.debug("Rejected empty title for task %d", task_id)
            return None
        task.text = trimmed
        if request.notes is not None:
            task.notes = request.notes
        logger.debug("Edited task %d", task_id)
        self._commit()
        return task

    def delete(self, task_id: int) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = len(self._tasks) != before
        if removed:
            logger.debug("Deleted task %d", task_id)
        self._commit()
        return removed

    # -------------------- serialization --------------------
    def to_records(self) -> List[dict]:
        return [task.to_dict() for task in self._tasks]

    def __str__(self) -> str:
        c = self.counts()
        return f'Total: {c.total}, Completed: {c.completed}, Pending: {c.pending}'
