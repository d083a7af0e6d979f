# todotimer/todo_app.py

import sys
import logging
import datetime
from typing import Optional, Tuple

from textual.app import App, ComposeResult
from textual.widgets import Button, Input, Label, ListView, RichLog, Select
from textual.containers import Container, Horizontal
from textual import events

from .config import DURATION_CHOICES, TICK_INTERVAL, configure_logging
from .data_model import AppState, Task
from .store import Store
from .textual_widgets import HelpPanel, TaskItem
from . import commands as cmd


class TodoApp(App):
    """Main TUI Application."""
    CSS = """
    Screen {
        color: #00dd00;
        text-style: bold;
    }

    #header {
        dock: top;
        background: black;
        color: #00dd00;
        text-style: bold;
        padding: 0 1 1 1;
        width: 100%;
        height: 2;
    }

    #add-form {
        height: auto;
    }

    #new-task {
        width: 1fr;
    }

    #duration {
        width: 16;
    }

    ListView {
        width: 100%;
        height: 1fr;
    }

    #help, #log {
        display: none;
        height: auto;
        max-height: 12;
    }
    """

    list_view: Optional[ListView] = None
    log_panel: Optional[RichLog] = None
    help_panel: Optional[HelpPanel] = None

    def __init__(self, store: Optional[Store] = None, tick_interval: float = TICK_INTERVAL):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.store = store if store is not None else Store()
        self.tick_interval = tick_interval

        self._rendered_state: Optional[AppState] = None
        self._render_key: Optional[Tuple[Tuple[int, bool], ...]] = None
        self._unsubscribe = []
        self.logger.debug("TodoApp initialized")

    def compose(self) -> ComposeResult:
        current_date = datetime.datetime.now().strftime("%d.%m.%Y")
        yield Label(f"Todo Timer ({current_date})", id="header")
        with Horizontal(id="add-form"):
            yield Input(placeholder="What needs doing?", id="new-task")
            yield Select(
                [(f"{minutes} min", str(minutes)) for minutes in DURATION_CHOICES],
                value=str(DURATION_CHOICES[0]),
                allow_blank=False,
                id="duration",
            )
            yield Button("Add", id="add", disabled=True)
        with Container():
            yield ListView(id="tasks")
        yield HelpPanel(id="help")
        yield RichLog(id="log")

    async def on_mount(self) -> None:
        """Called once the app is fully loaded."""
        self.list_view = self.query_one(ListView)
        self.help_panel = self.query_one(HelpPanel)
        self.log_panel = self.query_one(RichLog)

        for entry in self.store.activity:
            self.log_panel.write(entry)
        self._unsubscribe = [
            self.store.subscribe(self._on_state),
            self.store.subscribe_activity(self.log_panel.write),
        ]

        await self.refresh_view()
        self.list_view.focus()
        self.set_interval(self.tick_interval, self.tick)

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []

    ############################################################################
    # Rendering
    ############################################################################
    def _on_state(self, state: AppState) -> None:
        if state is not self._rendered_state:
            self.call_later(self.refresh_view)

    async def refresh_view(self) -> None:
        """Bring the widgets in line with the store's current state."""
        if self.list_view is None:
            return
        state = self.store.state
        if state is self._rendered_state:
            return
        self._rendered_state = state

        self.query_one("#add", Button).disabled = not state.add_enabled

        key = tuple((task.task_id, task.is_editing) for task in state.tasks)
        if key == self._render_key:
            for item, task in zip(self.task_items(), state.tasks):
                item.update_content(task)
            return

        # Rows were added, removed or switched edit mode: rebuild the list.
        index = self.list_view.index
        await self.list_view.clear()
        items = [TaskItem(task, self._editor_text(state, task)) for task in state.tasks]
        await self.list_view.extend(items)
        self._render_key = key

        if items:
            self.list_view.index = min(index or 0, len(items) - 1)

        editing = [item for item in items if item.editor is not None]
        target = [item for item in editing if item.task_id == state.edit_target]
        if target or editing:
            (target or editing)[0].editor.focus()
        elif self.focused is None:
            self.list_view.focus()

    @staticmethod
    def _editor_text(state: AppState, task: Task) -> str:
        """Draft for a row's editor; only the edit target owns the buffer."""
        if task.task_id == state.edit_target:
            return state.edit_buffer
        return task.text

    def task_items(self):
        if self.list_view is None:
            return []
        return [child for child in self.list_view.children if isinstance(child, TaskItem)]

    def selected_task_id(self) -> Optional[int]:
        """Return the id of the highlighted task, or None."""
        if self.list_view is None:
            return None
        item = self.list_view.highlighted_child
        if isinstance(item, TaskItem):
            return item.task_id
        return None

    ############################################################################
    # Form events
    ############################################################################
    def on_input_changed(self, event: Input.Changed) -> None:
        input_id = event.input.id or ""
        if input_id == "new-task":
            self.store.dispatch(cmd.SetInputText(event.value))
        elif input_id.startswith("edit-"):
            self.store.dispatch(cmd.SetEditBuffer(event.value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        input_id = event.input.id or ""
        if input_id == "new-task":
            self.add_task()
        elif input_id.startswith("edit-"):
            # The field's own value wins over a buffer another editor may have set.
            self.store.dispatch(cmd.SetEditBuffer(event.value))
            self.store.dispatch(cmd.SubmitEdit(int(input_id[len("edit-"):])))

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "duration":
            self.store.dispatch(cmd.SetPendingDuration(str(event.value)))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add":
            self.add_task()

    def add_task(self) -> None:
        """Add the task typed in the form, if the form allows it."""
        if not self.store.state.add_enabled:
            self.logger.debug("Task text is required, add aborted")
            return
        state = self.store.dispatch(cmd.AddTask())
        self.query_one("#new-task", Input).value = state.new_task_text
        self.query_one("#duration", Select).value = str(state.pending_duration)

    def tick(self) -> None:
        self.store.dispatch(cmd.Tick())

    ############################################################################
    # Handling Key Presses (Commands)
    ############################################################################
    async def on_key(self, event: events.Key) -> None:
        """Handle key events for the main application."""
        focused = self.focused
        if isinstance(focused, Input):
            input_id = focused.id or ""
            if event.key == "escape" and input_id.startswith("edit-"):
                event.stop()
                self.store.dispatch(cmd.ToggleEdit(int(input_id[len("edit-"):])))
            elif event.key == "escape" and self.list_view is not None:
                self.list_view.focus()
            return

        if event.key == "h":
            self.action_show_help()
            return
        elif event.key == "L":
            self.action_toggle_log()
            return
        elif event.key == "q":
            self.exit()
            return

        if focused is not self.list_view:
            return

        if event.key == "a":
            self.query_one("#new-task", Input).focus()
        elif event.key == "j":
            self.list_view.action_cursor_down()
        elif event.key == "k":
            self.list_view.action_cursor_up()
        elif event.key in ("space", "c"):
            self.dispatch_selected(cmd.ToggleComplete)
        elif event.key == "e":
            self.edit_selected()
        elif event.key == "d":
            self.dispatch_selected(cmd.DeleteTask)
        elif event.key == "r":
            self.dispatch_selected(cmd.ResetTimer)
        elif event.key == "escape":
            self.exit()

    def dispatch_selected(self, command_type) -> None:
        """Send a task command for the highlighted task, if any."""
        task_id = self.selected_task_id()
        if task_id is None:
            return
        self.store.dispatch(command_type(task_id))

    def edit_selected(self) -> None:
        """Toggle edit mode on the highlighted task, closing any other open editor."""
        task_id = self.selected_task_id()
        if task_id is None:
            return
        state = self.store.state
        current = state.find(state.edit_target) if state.edit_target is not None else None
        if current is not None and current.task_id != task_id and current.is_editing:
            self.store.dispatch(cmd.ToggleEdit(current.task_id))
        self.store.dispatch(cmd.ToggleEdit(task_id))

    def action_show_help(self) -> None:
        """Toggle help panel (h)."""
        if self.help_panel:
            self.help_panel.display = not self.help_panel.display

    def action_toggle_log(self) -> None:
        """Toggle the activity log panel (L)."""
        if self.log_panel:
            self.log_panel.display = not self.log_panel.display


def main(argv=None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    configure_logging(argv)
    TodoApp().run()
