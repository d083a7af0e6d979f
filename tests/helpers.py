"""Helpers that build states the way the add form does."""

from todotimer.commands import AddTask, SetInputText, SetPendingDuration, Tick, apply
from todotimer.data_model import AppState


def add(state: AppState, text: str, duration: int = 0) -> AppState:
    """Add a task the way the form does: type, pick a duration, submit."""
    state = apply(state, SetInputText(text))
    state = apply(state, SetPendingDuration(str(duration)))
    return apply(state, AddTask())


def tick(state: AppState, times: int = 1) -> AppState:
    for _ in range(times):
        state = apply(state, Tick())
    return state
