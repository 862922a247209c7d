"""Terminal rendering of the visible task list.

Each task renders as a header line (position, checkbox, title, category and
priority badges), a meta line (due badge, creation date) and optional
wrapped notes. Rendering never mutates tasks: a legacy task without
created_at is shown with today's date.
"""
from __future__ import annotations
import shutil
import textwrap
from datetime import datetime
from typing import List, Optional, Sequence

from taskpad.models import Task
from taskpad.theme import Palette, color, palette_for, BOLD, DIM, STRIKE, DEFAULT_THEME
from taskpad.view import Counts, ViewState, is_overdue, today_string

PRIORITY_LABELS = {'high': 'High', 'medium': 'Medium', 'low': 'Low'}
MIN_WIDTH = 40


def _term_width() -> int:
    return max(MIN_WIDTH, shutil.get_terminal_size((100, 30)).columns)


def created_label(task: Task, now: Optional[datetime] = None) -> str:
    if task.created_at is None:
        created = now or datetime.now()
    else:
        created = datetime.fromtimestamp(task.created_at / 1000)
    return f"Created: {created.date().isoformat()}"


def due_label(task: Task, today: str) -> Optional[str]:
    if not task.due_date:
        return None
    if is_overdue(task, today):
        return f"Overdue: {task.due_date}"
    return f"Due: {task.due_date}"


def render_task(
    task: Task,
    position: int,
    today: str,
    palette: Optional[Palette] = None,
    now: Optional[datetime] = None,
    width: Optional[int] = None,
    show_id: bool = False,
) -> List[str]:
    pal = palette or palette_for(DEFAULT_THEME)
    width = width or _term_width()
    prefix = f"{position:>3}. [{'x' if task.completed else ' '}] "
    indent = ' ' * len(prefix)

    title_style = (DIM, STRIKE) if task.completed else (pal.text, BOLD)
    category = f"[{task.category or 'Other'}]"
    priority = f"[{PRIORITY_LABELS.get(task.priority, 'Medium')}]"
    badges = color(category, pal.category) + ' ' + color(priority, pal.priority(task.priority))
    title_lines = textwrap.wrap(task.text, max(10, width - len(prefix))) or [task.text]

    lines: List[str] = []
    for idx, chunk in enumerate(title_lines):
        lead = color(prefix, pal.accent) if idx == 0 else indent
        lines.append(lead + color(chunk, *title_style))
    lines[-1] += ' ' + badges

    meta: List[str] = []
    due = due_label(task, today)
    if due:
        meta.append(color(due, pal.overdue if due.startswith('Overdue') else pal.due))
    meta.append(color(created_label(task, now), pal.muted))
    if show_id:
        meta.append(color(f"id {task.id}", pal.muted))
    lines.append(indent + '  '.join(meta))

    if task.notes and task.notes.strip():
        for chunk in textwrap.wrap(task.notes, max(10, width - len(indent) - 2)):
            lines.append(indent + '  ' + color(chunk, pal.muted))
    return lines


def render_list(
    visible: Sequence[Task],
    today: Optional[str] = None,
    palette: Optional[Palette] = None,
    now: Optional[datetime] = None,
    width: Optional[int] = None,
    show_id: bool = False,
) -> List[str]:
    pal = palette or palette_for(DEFAULT_THEME)
    if not visible:
        return [color('  (no tasks)', DIM, pal.muted)]
    today = today or today_string()
    lines: List[str] = []
    for position, task in enumerate(visible, start=1):
        lines.extend(render_task(task, position, today, pal, now, width, show_id))
    return lines


def render_counts(counts: Counts, palette: Optional[Palette] = None) -> str:
    pal = palette or palette_for(DEFAULT_THEME)
    return '  '.join([
        color(f"Total: {counts.total}", pal.accent),
        color(f"Completed: {counts.completed}", pal.done),
        color(f"Pending: {counts.pending}", pal.medium),
    ])


def render_screen(
    visible: Sequence[Task],
    counts: Counts,
    state: ViewState,
    theme: str = DEFAULT_THEME,
    today: Optional[str] = None,
    width: Optional[int] = None,
) -> str:
    pal = palette_for(theme)
    width = width or _term_width()
    header = f"Tasks  filter: {state.filter_mode}  sort: {state.sort_mode}"
    if state.search:
        header += f"  search: {state.search!r}"
    lines = [color(header, pal.accent, BOLD), color('-' * min(width, len(header) + 8), pal.accent)]
    lines.extend(render_list(visible, today, pal, width=width))
    lines.append('')
    lines.append(render_counts(counts, pal))
    return '\n'.join(lines)
