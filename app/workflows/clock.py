"""Time and identifier sources used on the transition path."""

import threading
import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    """Anything that can report the current time."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """UTC wall clock whose readings never go backwards.

    If the system clock steps back (NTP adjustment), the last reading is
    repeated until real time catches up.
    """

    def __init__(self) -> None:
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = datetime.now(timezone.utc)
            if self._last is not None and current < self._last:
                current = self._last
            self._last = current
            return current


def new_instance_id() -> str:
    """Generate a collision-resistant instance identifier."""
    return str(uuid.uuid4())
