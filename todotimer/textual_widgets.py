# todotimer/textual_widgets.py

from textual.widgets import ListItem, Label, Static, Input
from textual.app import ComposeResult
from typing import Optional

from .data_model import Task


class TaskItem(ListItem):
    """A ListItem representing a single task row in the ListView."""

    DEFAULT_CSS = """
    TaskItem {
        color: #00dd00;
        text-style: bold;
        height: auto;
    }

    TaskItem > Label {
        color: #00dd00;
        text-style: bold;
    }

    TaskItem.-complete,
    TaskItem.-complete > Label {
        color: #666666;
    }

    TaskItem.-expired,
    TaskItem.-expired > Label {
        color: #dd0000;
    }
    """

    def __init__(self, task: Task, edit_buffer: str = ""):
        self._todo = task
        self._label = Label(self.render_text())
        self._editor: Optional[Input] = None
        children = [self._label]
        if task.is_editing:
            self._editor = Input(
                value=edit_buffer,
                placeholder="Task text",
                id=f"edit-{task.task_id}",
                classes="editor",
            )
            children.append(self._editor)
        super().__init__(*children)
        self._apply_classes()

    def render_text(self) -> str:
        """Return the row text: marker, task text and countdown."""
        task = self._todo
        marker = "[x]" if task.is_complete else ("[!]" if task.is_expired else "[ ]")
        remaining = task.remaining_text()
        if remaining:
            return f"{marker} {task.text}  ({remaining})"
        return f"{marker} {task.text}"

    @property
    def todo(self) -> Task:
        return self._todo

    @property
    def task_id(self) -> int:
        return self._todo.task_id

    @property
    def editor(self) -> Optional[Input]:
        return self._editor

    def update_content(self, task: Optional[Task] = None) -> None:
        """Update the displayed content if the task changes."""
        if task is not None:
            self._todo = task
        self._label.update(self.render_text())
        self._apply_classes()

    def _apply_classes(self) -> None:
        self.set_class(self._todo.is_complete, "-complete")
        self.set_class(self._todo.is_expired and not self._todo.is_complete, "-expired")


class HelpPanel(Static):
    """Shows the help (available commands)."""

    def compose(self) -> ComposeResult:
        lines = [
            "Commands:",
            "  j / ↓ : Move selection down",
            "  k / ↑ : Move selection up",
            "  a: Focus the add form",
            "  space / c: Complete/Reopen selected task",
            "  e: Edit selected task (enter saves, escape cancels)",
            "  d: Delete selected task",
            "  r: Reset the selected task's timer",
            "  h: Toggle this help panel",
            "  L: Toggle activity log panel",
            "  q: Quit",
        ]
        yield Label("\n".join(lines))
