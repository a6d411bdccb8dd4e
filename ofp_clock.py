#!/usr/bin/env python3
"""
Clocks for the OFP flight logger

Every component that stamps a passage or a report asks a clock for the
current time, so tests and telemetry replays can substitute a ManualClock.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


class SystemClock:
    """Wall clock in UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:
    """Clock that only moves when told to"""

    def __init__(self, start: Optional[datetime] = None):
        self._current = self._as_utc(start or datetime.now(timezone.utc))

    @staticmethod
    def _as_utc(time: datetime) -> datetime:
        # Naive times are taken to be UTC already
        if time.tzinfo is None:
            return time.replace(tzinfo=timezone.utc)
        return time

    def now(self) -> datetime:
        return self._current

    def set(self, time: datetime) -> None:
        self._current = self._as_utc(time)

    def advance(self, minutes: float = 0, seconds: float = 0) -> datetime:
        self._current += timedelta(minutes=minutes, seconds=seconds)
        return self._current
