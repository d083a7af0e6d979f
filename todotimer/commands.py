# todotimer/commands.py

"""Commands and the pure transition function applied by the store.

Every command is total: bad input is coerced (an unparsable duration
becomes 0) and unknown task ids leave the state untouched.
"""

import re
import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple, Type

from .data_model import AppState, Task

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?\d+")


class Command:
    """Base class for everything the store accepts."""


@dataclass(frozen=True)
class SetInputText(Command):
    text: str


@dataclass(frozen=True)
class SetPendingDuration(Command):
    text: str


@dataclass(frozen=True)
class AddTask(Command):
    pass


@dataclass(frozen=True)
class ToggleComplete(Command):
    task_id: int


@dataclass(frozen=True)
class ToggleEdit(Command):
    task_id: int


@dataclass(frozen=True)
class SetEditBuffer(Command):
    text: str


@dataclass(frozen=True)
class SubmitEdit(Command):
    task_id: int


@dataclass(frozen=True)
class DeleteTask(Command):
    task_id: int


@dataclass(frozen=True)
class ResetTimer(Command):
    task_id: int


@dataclass(frozen=True)
class Tick(Command):
    pass


def parse_duration(text: str) -> int:
    """Parse a duration in minutes, falling back to 0."""
    text = text.strip()
    if not _INTEGER.fullmatch(text):
        return 0
    return int(text)


def _update_task(state: AppState, task_id: int,
                 change: Callable[[Task], Task]) -> Tuple[AppState, Optional[Task]]:
    """Replace the matching task(s) with change(task).

    Returns the new state and the last changed task, or the untouched state
    and None when no task has that id.
    """
    changed = None
    tasks = []
    for task in state.tasks:
        if task.task_id == task_id:
            task = change(task)
            changed = task
        tasks.append(task)
    if changed is None:
        return state, None
    return replace(state, tasks=tuple(tasks)), changed


def _set_input_text(state: AppState, command: SetInputText) -> AppState:
    return replace(state, new_task_text=command.text,
                   add_enabled=len(command.text) >= 1)


def _set_pending_duration(state: AppState, command: SetPendingDuration) -> AppState:
    return replace(state, pending_duration=parse_duration(command.text))


def _add_task(state: AppState, command: AddTask) -> AppState:
    # Empty text is not rejected here; the view disables the add action.
    task = Task(
        task_id=state.next_id,
        text=state.new_task_text,
        duration_minutes=state.pending_duration,
    )
    return replace(
        state,
        tasks=state.tasks + (task,),
        next_id=state.next_id + 1,
        new_task_text="",
        add_enabled=False,
        pending_duration=0,
    )


def _toggle_complete(state: AppState, command: ToggleComplete) -> AppState:
    new_state, _ = _update_task(
        state, command.task_id,
        lambda task: replace(task, is_complete=not task.is_complete))
    return new_state


def _released_target(state: AppState, task_id: int) -> Optional[int]:
    """edit_target once task_id leaves edit mode; other editors keep it."""
    return None if state.edit_target == task_id else state.edit_target


def _toggle_edit(state: AppState, command: ToggleEdit) -> AppState:
    new_state, task = _update_task(
        state, command.task_id,
        lambda task: replace(task, is_editing=not task.is_editing))
    if task is None:
        return state
    if task.is_editing:
        edit_target = task.task_id
    else:
        edit_target = _released_target(state, task.task_id)
    return replace(new_state, edit_buffer=task.text, edit_target=edit_target)


def _set_edit_buffer(state: AppState, command: SetEditBuffer) -> AppState:
    return replace(state, edit_buffer=command.text)


def _submit_edit(state: AppState, command: SubmitEdit) -> AppState:
    new_state, task = _update_task(
        state, command.task_id,
        lambda task: replace(task, text=state.edit_buffer, is_editing=False))
    if task is None:
        return state
    return replace(new_state, edit_buffer="",
                   edit_target=_released_target(state, task.task_id))


def _delete_task(state: AppState, command: DeleteTask) -> AppState:
    tasks = tuple(t for t in state.tasks if t.task_id != command.task_id)
    if len(tasks) == len(state.tasks):
        return state
    return replace(state, tasks=tasks,
                   edit_target=_released_target(state, command.task_id))


def _reset_timer(state: AppState, command: ResetTimer) -> AppState:
    new_state, _ = _update_task(
        state, command.task_id,
        lambda task: replace(task, elapsed_seconds=0, is_expired=False))
    return new_state


def _advance(task: Task) -> Task:
    if not task.is_active():
        return task
    elapsed = task.elapsed_seconds + 1
    # Minutes are compared against ticks as-is.
    return replace(
        task,
        elapsed_seconds=elapsed,
        is_expired=elapsed >= task.duration_minutes and task.has_deadline(),
    )


def _tick(state: AppState, command: Tick) -> AppState:
    if not any(task.is_active() for task in state.tasks):
        return state
    return replace(state, tasks=tuple(_advance(task) for task in state.tasks))


_HANDLERS: Dict[Type[Command], Callable[[AppState, Command], AppState]] = {
    SetInputText: _set_input_text,
    SetPendingDuration: _set_pending_duration,
    AddTask: _add_task,
    ToggleComplete: _toggle_complete,
    ToggleEdit: _toggle_edit,
    SetEditBuffer: _set_edit_buffer,
    SubmitEdit: _submit_edit,
    DeleteTask: _delete_task,
    ResetTimer: _reset_timer,
    Tick: _tick,
}


def apply(state: AppState, command: Command) -> AppState:
    """Return the state that results from applying command to state."""
    handler = _HANDLERS.get(type(command))
    if handler is None:
        logger.warning(f"Ignoring unknown command: {command!r}")
        return state
    return handler(state, command)
