"""Transaction id generation.

Ids are 20 digits: a UTC timestamp down to the second, a two-digit tag
picked once per process, then a four-digit sequence that restarts every
second. A second whose sequence is used up borrows the next one, so
within a process ids sort in generation order.
"""

import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
SEQUENCE_SIZE = 10_000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _next_second(stamp: str) -> str:
    moment = datetime.strptime(stamp, TIMESTAMP_FORMAT) + timedelta(seconds=1)
    return moment.strftime(TIMESTAMP_FORMAT)


class TransactionIdGenerator:
    """Thread-safe generator of unique, time-ordered transaction ids."""

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        node: Optional[int] = None,
    ) -> None:
        self._clock = clock
        self._node = secrets.randbelow(100) if node is None else node % 100
        self._lock = threading.Lock()
        self._last_stamp = ""
        self._sequence = 0

    def next(self) -> str:
        with self._lock:
            stamp = self._clock().strftime(TIMESTAMP_FORMAT)
            if stamp < self._last_stamp:
                # clock stepped backwards; keep ids ordered
                stamp = self._last_stamp
            if stamp == self._last_stamp:
                self._sequence += 1
                if self._sequence >= SEQUENCE_SIZE:
                    # second is used up; borrow the next one
                    stamp = _next_second(stamp)
                    self._sequence = 0
            else:
                self._sequence = 0
            self._last_stamp = stamp
            return f"{stamp}{self._node:02d}{self._sequence:04d}"
