#!/usr/bin/env python3
"""
Geodesic fix matching for the OFP flight logger

Watches an ordered list of named fixes and records a passage the first time
the aircraft comes within a fix's tolerance radius.
"""

import logging
from typing import Iterable, List, Optional

from ofp_clock import SystemClock
from ofp_model import NamedFix, PassageKind, PassageLog, PassageRecord, TelemetrySample
from ofp_constants import AIRBORNE_THRESHOLD_KT

# Configure logger
logger = logging.getLogger(__name__)


class GeodesicFixMatcher:
    """
    Detects waypoint overflights.

    Fixes are checked in the order they were added and the first one within
    tolerance wins, even if a later fix is closer. At most one fix is matched
    per sample.
    """

    def __init__(self, passage_log: Optional[PassageLog] = None, clock=None):
        self.passage_log = passage_log if passage_log is not None else PassageLog()
        self.clock = clock or SystemClock()
        self._fixes: List[NamedFix] = []
        self._matched_names = set()

    def add_fix(self, fix: NamedFix) -> None:
        """Add a fix to the end of the watch list"""
        self._fixes.append(fix)
        logger.debug(f"Added GPS fix: {fix.name} at {fix.position} (±{fix.tolerance_nm:.1f} NM)")

    def add_fixes(self, fixes: Iterable[NamedFix]) -> None:
        for fix in fixes:
            self.add_fix(fix)

    @property
    def fixes(self) -> List[NamedFix]:
        return list(self._fixes)

    @property
    def remaining_fixes(self) -> List[NamedFix]:
        """Fixes not yet passed, in watch order"""
        return [fix for fix in self._fixes if fix.name not in self._matched_names]

    def is_passed(self, name: str) -> bool:
        return name in self._matched_names

    def match_position(self, sample: TelemetrySample, has_been_airborne: bool,
                       distance_since_last: float) -> Optional[PassageRecord]:
        """
        Check a sample against the watch list.

        Returns the new passage record, or None if no fix was passed. Nothing
        is matched while taxiing out before the first takeoff.
        """
        if sample.ground_speed < AIRBORNE_THRESHOLD_KT and not has_been_airborne:
            return None

        for fix in self._fixes:
            if fix.name in self._matched_names:
                continue

            distance = sample.position.distance_to(fix.position)
            if distance > fix.tolerance_nm:
                continue

            distance_from_previous = round(distance_since_last) if len(self.passage_log) > 0 else 0
            record = PassageRecord.from_sample(
                sample,
                self.clock.now(),
                fix.name,
                PassageKind.WAYPOINT,
                distance_from_previous,
            )
            self._matched_names.add(fix.name)
            self.passage_log.append(record)
            logger.info(f"Passed GPS fix: {record.fix_name} at {record.timestamp:%H:%M:%S}Z - "
                        f"Speed: {record.ground_speed:.0f} kts")
            return record

        return None

    def check_position(self, sample: TelemetrySample, has_been_airborne: bool,
                       distance_since_last: float) -> bool:
        """Return True if the sample passed a new fix"""
        return self.match_position(sample, has_been_airborne, distance_since_last) is not None

    def add_passed_fix(self, record: PassageRecord) -> bool:
        """Record a passage produced elsewhere, e.g. a takeoff or landing"""
        if not self.passage_log.append(record):
            logger.debug(f"Fix {record.fix_name} already passed, skipping addition.")
            return False
        self._matched_names.add(record.fix_name)
        logger.info(f"Recorded {record.fix_name} at {record.timestamp:%H:%M:%S}Z")
        return True

    def reset(self) -> None:
        """Forget all passages, e.g. when a new flight plan is loaded"""
        self.passage_log.clear()
        self._matched_names.clear()
        logger.info("GPS fix tracker reset")

    def clear_fixes(self) -> None:
        self._fixes.clear()
