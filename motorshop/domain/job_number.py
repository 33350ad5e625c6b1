"""
Job reference numbers.

References look like ``JOB-2026-4170042``: the creation year, then the
millisecond clock modulo 1000 as three digits, then a process-wide
sequence number padded to four digits. The clock digits alone repeat every
second and collide for jobs created within the same millisecond; the
sequence number is what makes references unique inside the process.
"""

from __future__ import annotations

from datetime import datetime
import itertools
import threading
import time
from typing import Callable, Iterator, Optional

from dateutil.tz import tzutc

DEFAULT_PREFIX = "JOB"
CLOCK_DIGITS = 3
SEQUENCE_DIGITS = 4

_SEQUENCE_LOCK = threading.Lock()
_SEQUENCE: Iterator[int] = itertools.count(1)


def _next_sequence() -> int:
    with _SEQUENCE_LOCK:
        return next(_SEQUENCE)


def _clock_millis() -> int:
    return time.time_ns() // 1_000_000


def _utc_now() -> datetime:
    return datetime.now(tzutc())


class JobNumberGenerator:
    """
    Produces job references of the form ``<prefix>-<year>-<suffix>``.

    All generators in a process draw from one sequence, so two generators
    built with different prefixes or clocks still never hand out the same
    suffix.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        clock: Optional[Callable[[], int]] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            prefix: Leading token, "JOB" unless configured otherwise
            clock: Returns the current time in milliseconds
            now: Returns the current datetime; only the year is used
        """
        if not prefix or "-" in prefix:
            raise ValueError(f"Invalid job number prefix {prefix!r}")
        self.prefix = prefix
        self._clock = clock or _clock_millis
        self._now = now or _utc_now

    def suffix(self) -> str:
        clock_part = self._clock() % (10 ** CLOCK_DIGITS)
        return f"{clock_part:0{CLOCK_DIGITS}d}{_next_sequence():0{SEQUENCE_DIGITS}d}"

    def next_number(self) -> str:
        return f"{self.prefix}-{self._now().year:04d}-{self.suffix()}"

    __call__ = next_number
