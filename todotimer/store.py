# todotimer/store.py

import logging
import datetime
from collections import deque
from typing import Callable, Deque, List, Optional

from .config import ACTIVITY_LIMIT
from .data_model import AppState
from . import commands as cmd

Subscriber = Callable[[AppState], None]


def format_entry(message: str, now: Optional[datetime.datetime] = None) -> str:
    """Prefix a message with a timestamp for the activity log."""
    now = now or datetime.datetime.now()
    timestamp = now.strftime("%Y-%m-%d %H:%M:%S")
    return f"[{timestamp}] {message}"


def describe(before: AppState, after: AppState, command: cmd.Command) -> List[str]:
    """Activity messages for a state change, if it is worth recording."""
    if after is before:
        return []

    if isinstance(command, cmd.AddTask):
        return [f"Added task: '{after.tasks[-1].text}'"]

    if isinstance(command, cmd.Tick):
        return [
            f"Expired task: '{task.text}'"
            for task in after.tasks
            if task.is_expired and not before.find(task.task_id).is_expired
        ]

    task_id = getattr(command, "task_id", None)
    if task_id is None:
        return []
    old, new = before.find(task_id), after.find(task_id)

    if isinstance(command, cmd.DeleteTask):
        return [f"Deleted task: '{old.text}'"]
    if isinstance(command, cmd.ToggleComplete):
        verb = "Completed" if new.is_complete else "Reopened"
        return [f"{verb} task: '{new.text}'"]
    if isinstance(command, cmd.SubmitEdit):
        return [f"Edited task: '{old.text}' -> '{new.text}'"]
    if isinstance(command, cmd.ResetTimer):
        return [f"Reset timer: '{new.text}'"]
    return []


class Store:
    """Holds the application state; the only place it gets replaced.

    Commands are applied one at a time. A command dispatched from inside a
    subscriber is queued and applied after the current one. If a subscriber
    raises, the exception propagates and anything it queued is discarded.
    """

    def __init__(self, state: Optional[AppState] = None):
        self._state = state if state is not None else AppState()
        self._subscribers: List[Subscriber] = []
        self._activity_listeners: List[Callable[[str], None]] = []
        self._queue: Deque[cmd.Command] = deque()
        self._dispatching = False
        self.activity: List[str] = []
        self.logger = logging.getLogger(__name__)

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register callback(state) after each command; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def subscribe_activity(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register callback(entry) for each new activity entry."""
        self._activity_listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._activity_listeners:
                self._activity_listeners.remove(callback)

        return unsubscribe

    def dispatch(self, command: cmd.Command) -> AppState:
        """Apply command (and anything queued meanwhile); return the latest state."""
        self._queue.append(command)
        if self._dispatching:
            return self._state

        self._dispatching = True
        try:
            while self._queue:
                self._apply(self._queue.popleft())
        except Exception:
            # Whatever a failing subscriber queued is dropped with it.
            self._queue.clear()
            raise
        finally:
            self._dispatching = False
        return self._state

    def _apply(self, command: cmd.Command) -> None:
        before = self._state
        self._state = cmd.apply(before, command)
        if not isinstance(command, cmd.Tick):
            self.logger.debug(f"Applied {command!r}")

        for message in describe(before, self._state, command):
            self.add_activity(message)

        for callback in list(self._subscribers):
            callback(self._state)

    def add_activity(self, message: str) -> str:
        """Record a timestamped activity entry and return it."""
        entry = format_entry(message)
        self.activity.append(entry)
        if len(self.activity) > ACTIVITY_LIMIT:
            del self.activity[:-ACTIVITY_LIMIT]
        self.logger.info(message)
        for callback in list(self._activity_listeners):
            callback(entry)
        return entry
