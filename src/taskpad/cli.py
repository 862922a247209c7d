"""Command-line interface: one-shot click commands and the interactive shell.

Tasks are referenced by REF: a number within the visible list is a position
in that list, anything else is a task id. `done`, `edit` and `rm` take the same
--filter/--search/--sort options as `list`, so a position always refers to the
list those options print.
"""
from __future__ import annotations
import logging
import shlex
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Sequence

import click

from taskpad.config import Settings
from taskpad.logging_setup import setup_logging
from taskpad.models import EditRequest, PRIORITIES, Task, normalize_due_date
from taskpad.render import render_counts, render_list, render_screen
from taskpad.storage import Storage, StorageError
from taskpad.theme import THEMES, palette_for, toggle_theme
from taskpad.store import TaskStore
from taskpad.view import FILTER_MODES, SORT_MODES, DEFAULT_FILTER, DEFAULT_SORT, ViewState, visible_tasks

logger = logging.getLogger(__name__)

# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home); 3J first
# improves reliability in some terminals.
def _clear_screen() -> None:
    click.echo("\033[3J\033[H\033[2J\033[H", nl=False)


def _enter_alt_screen() -> None:
    click.echo("\033[?1049h", nl=False)


def _leave_alt_screen() -> None:
    click.echo("\033[?1049l", nl=False)


class DueDate(click.ParamType):
    """YYYY-MM-DD date kept as a string; blank means no due date."""
    name = "date"

    def convert(self, value, param, ctx):
        if value is None or value == "":
            return None
        if isinstance(value, (date, datetime)):
            return value.strftime("%Y-%m-%d")
        due = normalize_due_date(value)
        if due is None:
            self.fail(f"{value!r} is not a YYYY-MM-DD date", param, ctx)
        return due


DUE_DATE = DueDate()


def resolve_ref(store: TaskStore, ref: str, visible: Sequence[Task]) -> Optional[Task]:
    raw = ref.strip().lstrip('#').rstrip('.')
    if not raw.isdigit():
        return None
    number = int(raw)
    if 1 <= number <= len(visible):
        return visible[number - 1]
    return store.get(number)


def prompt_edit(task: Task) -> EditRequest:
    """Ask for a new title, then new notes; aborting either cancels the edit.

    Enter keeps the current value; '-' at the notes prompt clears the notes.
    """
    try:
        title = click.prompt("Edit task title", default=task.text)
        notes = click.prompt("Edit notes ('-' clears)", default=task.notes, show_default=False)
    except click.Abort:
        return EditRequest()
    return EditRequest(title=title, notes="" if notes.strip() == "-" else notes)


class App:
    """Wiring shared by commands: settings, storage and the loaded store."""

    def __init__(self, settings: Settings, storage: Storage):
        self.settings = settings
        self.storage = storage
        self._store: Optional[TaskStore] = None

    @property
    def store(self) -> TaskStore:
        if self._store is None:
            try:
                records = self.storage.load_tasks()
            except StorageError as exc:
                raise click.ClickException(f"Cannot load tasks: {exc}") from exc
            self._store = TaskStore(records, storage=self.storage)
        return self._store

    def theme(self) -> str:
        try:
            return self.storage.load_theme()
        except StorageError as exc:
            raise click.ClickException(f"Cannot load theme: {exc}") from exc

    def view(self, filter_mode: str = DEFAULT_FILTER, search: str = "", sort_mode: str = DEFAULT_SORT) -> List[Task]:
        return visible_tasks(self.store.all_tasks(), filter_mode, search, sort_mode)


def _guard(action):
    """Run a store mutation, turning write failures into click errors."""
    try:
        return action()
    except StorageError as exc:
        logger.error("Save failed: %s", exc)
        raise click.ClickException(f"Cannot save tasks: {exc}") from exc


# -------------------- interactive shell --------------------
HELP_LINES = [
    "Commands:",
    "  add                 Add a task (prompts for every field)",
    "  add <text...>       Shorthand add with defaults (e.g., add buy milk)",
    "  done <ref>          Toggle completion of a task",
    "  edit <ref>          Edit title, then notes (Ctrl-C cancels)",
    "  rm <ref>            Delete a task",
    f"  filter <mode>       {' | '.join(FILTER_MODES)}",
    "  search [text...]    Search titles and notes (no text clears)",
    f"  sort <mode>         {' | '.join(SORT_MODES)}",
    "  theme               Toggle light/dark",
    "  help                Show this help (press Enter to return)",
    "  exit                Leave the shell",
    "",
    "<ref> is the number shown in the list, or a task id.",
]


class Shell:
    def __init__(self, app: App, alt_screen: bool = True):
        self.app = app
        self.store = app.store
        self.state = ViewState()
        self.theme = app.theme()
        self.alt_screen = alt_screen
        self.message: Optional[str] = None
        self._dirty = True
        self.store.subscribe(self._on_change)

    def _on_change(self, _store: TaskStore) -> None:
        self._dirty = True

    def visible(self) -> List[Task]:
        return self.state.apply(self.store.all_tasks())

    def draw(self) -> None:
        _clear_screen()
        click.echo(render_screen(self.visible(), self.store.counts(), self.state, self.theme))
        self._dirty = False

    def run(self) -> None:
        """Main REPL loop; the screen is redrawn whenever tasks or the view change.

        Uses the terminal's alternate screen (if enabled) so earlier renders
        do not remain in scrollback history.
        """
        exit_message: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                if self._dirty:
                    self.draw()
                if self.message:
                    click.echo(f"\n{self.message}")
                    self.message = None
                line = input("\n: ").strip()
                if not line:
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    click.echo('\n'.join(HELP_LINES))
                    input("\nPress Enter to return to the list...")
                    self._dirty = True
                    continue
                if lower in ('exit', 'quit'):
                    exit_message = "Goodbye."
                    break
                self.handle_command(line)
        except (KeyboardInterrupt, EOFError):
            exit_message = "Interrupted. Goodbye."
        finally:
            if self.alt_screen:
                _leave_alt_screen()
            if exit_message:
                click.echo(exit_message)

    # -------------------- command dispatch --------------------
    def handle_command(self, line: str) -> None:
        try:
            tokens = shlex.split(line)
        except ValueError:
            tokens = line.split()
        if not tokens:
            return
        cmd, args = tokens[0].lower(), tokens[1:]
        handlers = {
            'add': self._cmd_add,
            'done': self._cmd_done,
            'edit': self._cmd_edit,
            'rm': self._cmd_rm,
            'filter': self._cmd_filter,
            'search': self._cmd_search,
            'sort': self._cmd_sort,
            'theme': self._cmd_theme,
        }
        handler = handlers.get(cmd)
        if handler is None:
            logger.debug("Unknown shell command %r", cmd)
            self.message = "Unknown command. Type 'help' for instructions."
            return
        try:
            handler(args)
        except click.ClickException as exc:
            self.message = exc.format_message()

    def _find(self, args: List[str], usage: str) -> Optional[Task]:
        if len(args) != 1:
            self.message = f"Usage: {usage}"
            return None
        task = resolve_ref(self.store, args[0], self.visible())
        if task is None:
            self.message = f"No task {args[0]}."
        return task

    # ---- individual command helpers ----
    def _cmd_add(self, args: List[str]) -> None:
        if args:
            text = ' '.join(args)
            category = priority = due = notes = None
        else:
            try:
                text = click.prompt("Task")
                category = click.prompt("Category", default="Other")
                priority = click.prompt("Priority", type=click.Choice(PRIORITIES), default="medium")
                due = click.prompt("Due date (YYYY-MM-DD, blank for none)", type=DUE_DATE, default="",
                                   show_default=False)
                notes = click.prompt("Notes", default="", show_default=False)
            except click.Abort:
                self.message = "Add cancelled."
                self._dirty = True
                return
        task = _guard(lambda: self.store.create(text, category, priority, due, notes))
        if task is None:
            self.message = "Task text required."
        self._dirty = True

    def _cmd_done(self, args: List[str]) -> None:
        task = self._find(args, "done <ref>")
        if task is not None:
            _guard(lambda: self.store.toggle_complete(task.id))

    def _cmd_edit(self, args: List[str]) -> None:
        task = self._find(args, "edit <ref>")
        if task is None:
            return
        request = prompt_edit(task)
        self._dirty = True
        if request.cancelled:
            self.message = "Edit cancelled."
        elif _guard(lambda: self.store.edit(task.id, request)) is None:
            self.message = "Title cannot be empty; task unchanged."

    def _cmd_rm(self, args: List[str]) -> None:
        task = self._find(args, "rm <ref>")
        if task is not None:
            _guard(lambda: self.store.delete(task.id))

    def _cmd_filter(self, args: List[str]) -> None:
        if len(args) != 1 or not self.state.set_filter(args[0].lower()):
            self.message = f"Usage: filter {'|'.join(FILTER_MODES)}"
            return
        self._dirty = True

    def _cmd_search(self, args: List[str]) -> None:
        self.state.set_search(' '.join(args))
        self._dirty = True

    def _cmd_sort(self, args: List[str]) -> None:
        if len(args) != 1 or not self.state.set_sort(args[0].lower()):
            self.message = f"Usage: sort {'|'.join(SORT_MODES)}"
            return
        self._dirty = True

    def _cmd_theme(self, args: List[str]) -> None:
        self.theme = toggle_theme(self.theme)
        _guard(lambda: self.app.storage.save_theme(self.theme))
        self._dirty = True


# -------------------- click commands --------------------
def view_options(func):
    """The list view a REF position is counted in; shared by list, done, edit and rm."""
    func = click.option("--sort", "sort_mode", type=click.Choice(SORT_MODES), default=DEFAULT_SORT)(func)
    func = click.option("-s", "--search", default="")(func)
    func = click.option("-f", "--filter", "filter_mode", type=click.Choice(FILTER_MODES),
                        default=DEFAULT_FILTER)(func)
    return func


@click.group(invoke_without_command=True)
@click.option("--store", "store_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Store file (default: $TASKPAD_STORE_PATH or the data dir).")
@click.option("--log-level", default=None, help="Console log level (default: WARNING).")
@click.pass_context
def main(ctx: click.Context, store_path: Optional[Path], log_level: Optional[str]) -> None:
    """taskpad: a small personal task list."""
    settings = Settings.from_env()
    setup_logging(settings.log_dir, log_level or settings.log_level)
    ctx.obj = App(settings, Storage(store_path or settings.store_path))
    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.option("-c", "--category", default=None, help="Category (default: Other).")
@click.option("-p", "--priority", type=click.Choice(PRIORITIES), default=None)
@click.option("-d", "--due", type=DUE_DATE, default=None, help="Due date, YYYY-MM-DD.")
@click.option("-n", "--notes", default=None)
@click.pass_obj
def add(app: App, text, category, priority, due, notes) -> None:
    """Add a task."""
    task = _guard(lambda: app.store.create(' '.join(text), category, priority, due, notes))
    if task is None:
        raise click.UsageError("Task text required.")
    click.echo(f"Added: {task.text} (id {task.id})")


@main.command(name="list")
@view_options
@click.option("--ids", is_flag=True, help="Show task ids.")
@click.pass_obj
def list_tasks(app: App, filter_mode: str, search: str, sort_mode: str, ids: bool) -> None:
    """Show tasks."""
    visible = app.view(filter_mode, search, sort_mode)
    palette = palette_for(app.theme())
    for line in render_list(visible, palette=palette, show_id=ids):
        click.echo(line)
    click.echo(render_counts(app.store.counts(), palette))


@main.command()
@click.argument("ref")
@view_options
@click.pass_obj
def done(app: App, ref: str, filter_mode: str, search: str, sort_mode: str) -> None:
    """Toggle completion of a task."""
    task = resolve_ref(app.store, ref, app.view(filter_mode, search, sort_mode))
    if task is None:
        click.echo(f"No task {ref}.")
        return
    _guard(lambda: app.store.toggle_complete(task.id))
    click.echo(f"{'Completed' if task.completed else 'Reopened'}: {task.text}")


@main.command()
@click.argument("ref")
@click.option("-t", "--title", default=None)
@click.option("-n", "--notes", default=None)
@view_options
@click.pass_obj
def edit(app: App, ref: str, title: Optional[str], notes: Optional[str],
         filter_mode: str, search: str, sort_mode: str) -> None:
    """Edit a task's title and notes (prompts when no option is given)."""
    task = resolve_ref(app.store, ref, app.view(filter_mode, search, sort_mode))
    if task is None:
        click.echo(f"No task {ref}.")
        return
    if title is None and notes is None:
        request = prompt_edit(task)
    else:
        request = EditRequest(title=task.text if title is None else title, notes=notes)
    if request.cancelled:
        click.echo("Edit cancelled.")
        return
    if _guard(lambda: app.store.edit(task.id, request)) is None:
        click.echo("Title cannot be empty; task unchanged.")
        return
    click.echo(f"Updated: {task.text}")


@main.command()
@click.argument("ref")
@view_options
@click.pass_obj
def rm(app: App, ref: str, filter_mode: str, search: str, sort_mode: str) -> None:
    """Delete a task."""
    task = resolve_ref(app.store, ref, app.view(filter_mode, search, sort_mode))
    if task is None:
        click.echo(f"No task {ref}.")
        return
    _guard(lambda: app.store.delete(task.id))
    click.echo(f"Removed: {task.text}")


@main.command()
@click.pass_obj
def stats(app: App) -> None:
    """Show total, completed and pending counts."""
    click.echo(render_counts(app.store.counts(), palette_for(app.theme())))


@main.command()
@click.argument("name", required=False, type=click.Choice(THEMES))
@click.pass_obj
def theme(app: App, name: Optional[str]) -> None:
    """Set the theme, or toggle it when no name is given."""
    new_theme = name or toggle_theme(app.theme())
    _guard(lambda: app.storage.save_theme(new_theme))
    click.echo(f"Theme: {new_theme}")


@main.command()
@click.pass_obj
def shell(app: App) -> None:
    """Interactive task list."""
    Shell(app, alt_screen=app.settings.alt_screen).run()


if __name__ == '__main__':  # pragma: no cover
    main()
