"""Tests for the command processor."""

import pytest

from todotimer.commands import (
    AddTask,
    Command,
    DeleteTask,
    ResetTimer,
    SetEditBuffer,
    SetInputText,
    SetPendingDuration,
    SubmitEdit,
    Tick,
    ToggleComplete,
    ToggleEdit,
    apply,
    parse_duration,
)
from todotimer.data_model import AppState, Task

from .helpers import add, tick


class TestInputCommands:
    """Tests for the add-form buffers."""

    def test_set_input_text_enables_add(self):
        state = apply(AppState(), SetInputText("b"))

        assert state.new_task_text == "b"
        assert state.add_enabled is True

    def test_empty_input_disables_add(self):
        state = apply(apply(AppState(), SetInputText("buy")), SetInputText(""))

        assert state.new_task_text == ""
        assert state.add_enabled is False

    def test_whitespace_counts_as_text(self):
        assert apply(AppState(), SetInputText(" ")).add_enabled is True

    @pytest.mark.parametrize("text, expected", [
        ("7", 7),
        ("15", 15),
        ("120", 120),
        (" 3 ", 3),
        ("-4", -4),
        ("abc", 0),
        ("", 0),
        ("2.5", 0),
        ("1_000", 0),
    ])
    def test_parse_duration(self, text, expected):
        assert parse_duration(text) == expected

    def test_unparsable_duration_becomes_zero(self):
        state = apply(AppState(pending_duration=5), SetPendingDuration("abc"))

        assert state.pending_duration == 0


class TestAddTask:
    """Tests for AddTask."""

    def test_adds_task_from_buffers(self, milk_state):
        assert milk_state.tasks == (
            Task(task_id=1, text="buy milk", duration_minutes=2),
        )

    def test_resets_form(self):
        state = AppState(new_task_text="x", add_enabled=True, pending_duration=9)

        state = apply(state, AddTask())

        assert state.new_task_text == ""
        assert state.add_enabled is False
        assert state.pending_duration == 0

    def test_ids_increase_and_order_is_kept(self):
        state = add(add(add(AppState(), "a"), "b"), "c")

        assert state.task_ids() == (1, 2, 3)
        assert [t.text for t in state.tasks] == ["a", "b", "c"]
        assert state.next_id == 4

    def test_empty_text_is_not_rejected(self):
        state = apply(AppState(), AddTask())

        assert len(state.tasks) == 1
        assert state.tasks[0].text == ""

    def test_duplicate_texts_get_distinct_ids(self):
        state = add(add(AppState(), "same"), "same")

        assert state.task_ids() == (1, 2)

    def test_input_is_not_mutated(self):
        before = AppState(new_task_text="a", add_enabled=True)

        apply(before, AddTask())

        assert before.tasks == ()
        assert before.new_task_text == "a"


class TestToggleComplete:
    """Tests for ToggleComplete."""

    def test_flips_back_and_forth(self, milk_state):
        once = apply(milk_state, ToggleComplete(1))
        twice = apply(once, ToggleComplete(1))

        assert once.tasks[0].is_complete is True
        assert twice.tasks[0].is_complete is False

    def test_only_target_changes(self):
        state = add(add(AppState(), "a"), "b")

        state = apply(state, ToggleComplete(2))

        assert [t.is_complete for t in state.tasks] == [False, True]

    def test_unknown_id_is_noop(self, milk_state):
        assert apply(milk_state, ToggleComplete(42)) is milk_state


class TestEditing:
    """Tests for ToggleEdit, SetEditBuffer and SubmitEdit."""

    def test_toggle_edit_fills_buffer(self, milk_state):
        state = apply(milk_state, ToggleEdit(1))

        assert state.tasks[0].is_editing is True
        assert state.edit_buffer == "buy milk"
        assert state.edit_target == 1

    def test_toggle_edit_off_clears_target(self, milk_state):
        state = apply(apply(milk_state, ToggleEdit(1)), ToggleEdit(1))

        assert state.tasks[0].is_editing is False
        assert state.edit_buffer == "buy milk"
        assert state.edit_target is None

    def test_closing_other_editor_keeps_target(self):
        state = add(add(AppState(), "alpha"), "beta")
        state = apply(state, ToggleEdit(1))
        state = apply(state, ToggleEdit(2))

        state = apply(state, ToggleEdit(1))

        assert state.edit_target == 2
        assert [t.is_editing for t in state.tasks] == [False, True]

    def test_submitting_other_editor_keeps_target(self):
        state = add(add(AppState(), "alpha"), "beta")
        state = apply(state, ToggleEdit(1))
        state = apply(state, ToggleEdit(2))

        state = apply(state, SubmitEdit(1))

        assert state.edit_target == 2
        assert state.tasks[1].is_editing is True

    def test_submit_edit(self, milk_state):
        state = apply(milk_state, ToggleEdit(1))
        state = apply(state, SetEditBuffer("buy soy milk"))
        state = apply(state, SubmitEdit(1))

        task = state.tasks[0]
        assert task.text == "buy soy milk"
        assert task.is_editing is False
        assert task.task_id == 1
        assert state.edit_buffer == ""
        assert state.edit_target is None

    def test_edit_keeps_identity(self, milk_state):
        state = add(milk_state, "bread")
        state = apply(state, ToggleEdit(1))
        state = apply(state, SetEditBuffer("bread"))
        state = apply(state, SubmitEdit(1))

        # Same text on two tasks, still addressed separately.
        state = apply(state, DeleteTask(1))
        assert [(t.task_id, t.text) for t in state.tasks] == [(2, "bread")]

    def test_submit_without_toggle_uses_buffer(self, milk_state):
        state = apply(milk_state, SetEditBuffer("eggs"))
        state = apply(state, SubmitEdit(1))

        assert state.tasks[0].text == "eggs"

    def test_submit_unknown_id_keeps_buffer(self, milk_state):
        state = apply(milk_state, SetEditBuffer("eggs"))

        assert apply(state, SubmitEdit(9)) is state

    def test_toggle_edit_unknown_id_is_noop(self, milk_state):
        assert apply(milk_state, ToggleEdit(9)) is milk_state


class TestDeleteTask:
    """Tests for DeleteTask."""

    def test_removes_only_target_and_keeps_order(self):
        state = add(add(add(AppState(), "a"), "b"), "c")

        state = apply(state, DeleteTask(2))

        assert [t.text for t in state.tasks] == ["a", "c"]

    def test_ids_are_not_reused(self):
        state = apply(add(AppState(), "a"), DeleteTask(1))
        state = add(state, "b")

        assert state.task_ids() == (2,)

    def test_deleting_edited_task_clears_target(self, milk_state):
        state = apply(milk_state, ToggleEdit(1))

        state = apply(state, DeleteTask(1))

        assert state.tasks == ()
        assert state.edit_target is None

    def test_unknown_id_is_noop(self, milk_state):
        assert apply(milk_state, DeleteTask(5)) is milk_state


class TestTick:
    """Tests for Tick and ResetTimer."""

    def test_scenario_expires_after_duration_ticks(self, milk_state):
        state = tick(milk_state, 2)

        task = state.tasks[0]
        assert task.elapsed_seconds == 2
        assert task.is_expired is True

    def test_not_expired_before_duration(self, milk_state):
        task = tick(milk_state).tasks[0]

        assert task.elapsed_seconds == 1
        assert task.is_expired is False

    def test_completed_task_freezes(self, milk_state):
        state = tick(milk_state, 2)
        state = apply(state, ToggleComplete(1))
        state = tick(state)

        task = state.tasks[0]
        assert task.is_complete is True
        assert task.elapsed_seconds == 2

    def test_expired_task_stays_put(self, milk_state):
        expired = tick(milk_state, 2)

        assert tick(expired, 5).tasks == expired.tasks

    def test_no_deadline_counts_but_never_expires(self):
        state = tick(add(AppState(), "someday"), 100)

        task = state.tasks[0]
        assert task.elapsed_seconds == 100
        assert task.is_expired is False

    def test_only_active_tasks_advance(self):
        state = add(add(AppState(), "a", 5), "b", 5)
        state = apply(state, ToggleComplete(1))

        state = tick(state, 3)

        assert [t.elapsed_seconds for t in state.tasks] == [0, 3]

    def test_tick_without_active_tasks_returns_same_state(self):
        state = AppState()

        assert apply(state, Tick()) is state

    def test_reset_timer(self, milk_state):
        state = apply(tick(milk_state, 2), ResetTimer(1))

        task = state.tasks[0]
        assert task.elapsed_seconds == 0
        assert task.is_expired is False
        assert tick(state).tasks[0].elapsed_seconds == 1

    def test_reset_timer_on_complete_task(self, milk_state):
        state = apply(tick(milk_state), ToggleComplete(1))

        state = apply(state, ResetTimer(1))

        assert state.tasks[0].elapsed_seconds == 0
        assert state.tasks[0].is_complete is True


class TestApply:
    """Tests for the dispatch function itself."""

    def test_deterministic(self, milk_state):
        assert apply(milk_state, Tick()) == apply(milk_state, Tick())

    def test_unknown_command_is_ignored(self, milk_state):
        class Shout(Command):
            pass

        assert apply(milk_state, Shout()) is milk_state
