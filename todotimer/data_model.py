# todotimer/data_model.py

from typing import Optional, Tuple
from dataclasses import dataclass

from .config import TASK_COMPLETE_MESSAGE


@dataclass(frozen=True)
class Task:
    """Represents a single task in the todo list."""
    task_id: int
    text: str
    is_complete: bool = False
    is_editing: bool = False
    duration_minutes: int = 0
    elapsed_seconds: int = 0
    is_expired: bool = False

    def is_active(self) -> bool:
        """Check whether the countdown still runs for this task."""
        return not (self.is_complete or self.is_expired)

    def has_deadline(self) -> bool:
        return self.duration_minutes != 0

    def remaining(self) -> int:
        """Ticks left before the task expires (may be zero or negative)."""
        return self.duration_minutes - self.elapsed_seconds

    def remaining_text(self) -> str:
        """Text shown next to the task for its countdown."""
        if self.is_complete:
            return TASK_COMPLETE_MESSAGE
        left = self.remaining()
        if left <= 0:
            return ""
        return f"{left} min"

    def __repr__(self):
        return (
            f"Task(id={self.task_id}, text={self.text!r}, "
            f"complete={self.is_complete}, elapsed={self.elapsed_seconds}/"
            f"{self.duration_minutes})"
        )


@dataclass(frozen=True)
class AppState:
    """The whole application state; replaced, never mutated."""
    tasks: Tuple[Task, ...] = ()
    new_task_text: str = ""
    add_enabled: bool = False
    edit_buffer: str = ""
    edit_target: Optional[int] = None
    pending_duration: int = 0
    next_id: int = 1

    def find(self, task_id: int) -> Optional[Task]:
        """Return the task with the given id, or None."""
        for task in self.tasks:
            if task.task_id == task_id:
                return task
        return None

    def task_ids(self) -> Tuple[int, ...]:
        return tuple(task.task_id for task in self.tasks)
