# todotimer/__init__.py

from .data_model import AppState, Task
from .store import Store
from .commands import apply

__all__ = ["AppState", "Task", "Store", "apply"]
