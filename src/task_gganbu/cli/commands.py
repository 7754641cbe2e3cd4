# src/task_gganbu/cli/commands.py

from __future__ import annotations

import inspect
import logging
import math
from collections.abc import Callable
from pathlib import Path
from typing import cast

from ..core.state import AppState
from ..tasks.export import export_csv
from ..tasks.task_api import wipe_all_data
from ..tasks.task_models import Category, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

DEFAULT_CATEGORY = Category.ADMIN
DEFAULT_POINTS = 1
NOTES_SEPARATOR = "|"

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, /fire, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task) -> str:
    line = (
        f"#{task.id} @{task.position:5.1f} {task.icon:<8} "
        f"[{task.category.value}] {task.points}pt  {task.text}"
    )
    if task.notes:
        line += f"  -- {task.notes}"
    if task.completed:
        line += f"  (done {task.completed})"
    return line


def _add(state: AppState, text: str, category: Category, points: int, notes: str) -> str:
    task = state.registry.insert(text, category, points, notes)
    if task is None:
        return "Nothing added (task text is empty)."
    return f"Added: {format_task(task)}"


def quick_add(state: AppState, line: str) -> str:
    """Plain console input: add with the default category and points."""
    text, _, notes = line.partition(NOTES_SEPARATOR)
    return _add(state, text.strip(), DEFAULT_CATEGORY, DEFAULT_POINTS, notes.strip())


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    usage = "Usage: /add <admin|prep|teach> <1-4> <text> [| notes]"
    if len(args) < 3:
        return usage

    category = Category.parse(args[0])
    if category is None:
        return f"Unknown category: {args[0]}. {usage}"

    try:
        points = int(args[1])
    except ValueError:
        return f"Points must be 1-4. {usage}"
    if points not in (1, 2, 3, 4):
        return f"Points must be 1-4. {usage}"

    text, _, notes = " ".join(args[2:]).partition(NOTES_SEPARATOR)
    return _add(state, text.strip(), category, points, notes.strip())


def cmd_list(state: AppState, args: list[str]) -> str:
    show_all = bool(args) and args[0].lower() == "all"
    tasks = state.registry.tasks if show_all else state.registry.active_tasks()
    if not tasks:
        return "No tasks." if show_all else "No active tasks. Add one with /add or just type it."
    return "\n".join(format_task(t) for t in tasks)


AIM_USAGE = "Usage: /aim <0-100>"


def _parse_aim(raw: str) -> float | None:
    try:
        position = float(raw)
    except ValueError:
        return None
    if not math.isfinite(position):
        return None
    return position


def cmd_aim(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Aim is at {state.controller.aim_position:.1f}. {AIM_USAGE}"
    position = _parse_aim(args[0])
    if position is None:
        return AIM_USAGE
    state.controller.aim_at(position)
    return f"Aiming at {position:.1f}."


def cmd_fire(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    if args:
        position = _parse_aim(args[0])
        if position is None:
            return "Usage: /fire [0-100]"
        state.controller.aim_at(position)
        if emit is not None:
            emit(f"Aiming at {position:.1f}.")

    if not state.controller.fire():
        return "Laser is still firing."
    return f"Pew! Laser fired at {state.controller.aim_position:.1f}."


def cmd_score(state: AppState, args: list[str]) -> str:
    record = state.score.current()
    return f"Daily score ({record.date}): {record.score}"


def cmd_status(state: AppState, args: list[str]) -> str:
    record = state.score.current()
    ctrl = state.controller
    return (
        "Status:\n"
        f"  App: {getattr(state.settings, 'app_name', 'Task Gganbu')}\n"
        f"  Tasks: {len(state.registry.active_tasks())} active / {len(state.registry.tasks)} total\n"
        f"  Daily score: {record.score} ({record.date})\n"
        f"  Laser: {ctrl.state.value} at {ctrl.aim_position:.1f}"
    )


def cmd_export(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    directory = Path(args[0]).expanduser() if args else Path(state.settings.export_dir)
    if emit is not None:
        emit(f"Exporting {len(state.registry.tasks)} tasks...")
    try:
        path = export_csv(state.registry.tasks, directory, now=state.clock.now())
    except OSError as e:
        logger.exception("Export failed dir=%s", directory)
        return f"Export failed: {e}"
    return f"Exported to {path}"


def cmd_wipe(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() != "confirm":
        return (
            "This deletes ALL tasks and today's score and cannot be undone.\n"
            "Type /wipe confirm to proceed."
        )
    wipe_all_data(state)
    return "All data deleted."


registry.register("help", cmd_help, "show this help", aliases=["h", "?"])
registry.register("add", cmd_add, "add a task: /add <admin|prep|teach> <1-4> <text> [| notes]")
registry.register("list", cmd_list, "list active tasks (/list all for everything)", aliases=["ls"])
registry.register("aim", cmd_aim, "move the laser: /aim <0-100>")
registry.register("fire", cmd_fire, "fire the laser (optionally /fire <0-100> to aim first)", aliases=["f"])
registry.register("score", cmd_score, "show today's score")
registry.register("status", cmd_status, "show app status")
registry.register("export", cmd_export, "export all tasks to CSV: /export [dir]")
registry.register("wipe", cmd_wipe, "delete all stored data (asks for confirmation)")
