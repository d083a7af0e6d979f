# todotimer/config.py

import logging
from typing import List, Optional, Sequence

# Seconds between two Tick commands.
TICK_INTERVAL = 1.0

# Durations (minutes) offered by the add form.
DURATION_CHOICES: List[int] = list(range(0, 16))

DEBUG_LOG_FILE = "debug.log"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# Entries kept in the in-memory activity log.
ACTIVITY_LIMIT = 200

TASK_COMPLETE_MESSAGE = "task complete"


def configure_logging(argv: Optional[Sequence[str]] = None,
                      filename: str = DEBUG_LOG_FILE) -> None:
    """Send debug logging to a file; append instead of truncate with --release."""
    argv = argv or []
    mode = 'a' if '--release' in argv else 'w'
    logging.basicConfig(
        filename=filename,
        filemode=mode,
        level=logging.DEBUG,
        format=LOG_FORMAT
    )
