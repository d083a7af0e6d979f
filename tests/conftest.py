"""Shared fixtures for the test suite."""

import pytest

from todotimer.data_model import AppState

from .helpers import add


@pytest.fixture()
def milk_state() -> AppState:
    """A single 'buy milk' task with a two minute duration."""
    return add(AppState(), "buy milk", 2)
