#!/usr/bin/env python3
"""
Flight phase tracking for the OFP flight logger

Classifies each telemetry sample as taxi, takeoff roll or airborne using
ground speed, records the TAKEOFF and LANDING passages exactly once per
flight and feeds the fix matcher with the distance flown since the last
recorded passage.
"""

import logging
from typing import Callable, List, Optional

from ofp_matcher import GeodesicFixMatcher
from ofp_model import (
    FlightPhase,
    FlightPlanMeta,
    PassageKind,
    PassageRecord,
    Position,
    TelemetrySample,
    airportCodes,
)
from ofp_constants import AIRBORNE_THRESHOLD_KT, TAKEOFF_ROLL_THRESHOLD_KT

# Configure logger
logger = logging.getLogger(__name__)


class FlightPhaseTracker:
    """
    Ground-speed driven state machine for a single flight.

    PREFLIGHT_TAXI -> TAKEOFF_ROLL -> AIRBORNE -> POSTFLIGHT_TAXI, traversed
    once. After the landing has been recorded no further passages are made.
    """

    def __init__(self, matcher: GeodesicFixMatcher, flight_plan: Optional[FlightPlanMeta] = None,
                 on_passage: Optional[Callable[[PassageRecord], None]] = None):
        self.matcher = matcher
        self.flight_plan = flight_plan
        self.on_passage = on_passage
        self.reset()

    def reset(self) -> None:
        """Return to the pre-flight state"""
        self.has_been_airborne = False
        self.is_currently_airborne = False
        self.in_takeoff_roll = False
        self.takeoff_recorded = False
        self.landing_recorded = False
        self.distance_since_last_record = 0.0
        self.previous_position: Optional[Position] = None
        self.last_ground_speed = 0.0

    @property
    def clock(self):
        return self.matcher.clock

    @property
    def phase(self) -> FlightPhase:
        if self.landing_recorded or (self.has_been_airborne and not self.is_currently_airborne):
            return FlightPhase.POSTFLIGHT_TAXI
        if self.is_currently_airborne:
            return FlightPhase.AIRBORNE
        if self.in_takeoff_roll:
            return FlightPhase.TAKEOFF_ROLL
        return FlightPhase.PREFLIGHT_TAXI

    @property
    def should_stop(self) -> bool:
        """True once the aircraft has flown and slowed to taxi speed again"""
        return self.has_been_airborne and self.last_ground_speed < AIRBORNE_THRESHOLD_KT

    def update(self, sample: TelemetrySample) -> List[PassageRecord]:
        """
        Process one sample, returning any passages it produced.

        The fix matcher is only consulted between the TAKEOFF and LANDING
        records, not on every sample, so the boundary records always open
        and close the passage log.
        """
        new_records: List[PassageRecord] = []
        self.last_ground_speed = sample.ground_speed

        was_airborne = self.is_currently_airborne
        self.is_currently_airborne = sample.ground_speed > AIRBORNE_THRESHOLD_KT

        was_in_takeoff_roll = self.in_takeoff_roll
        self.in_takeoff_roll = (not self.is_currently_airborne and not self.has_been_airborne
                                and sample.ground_speed > TAKEOFF_ROLL_THRESHOLD_KT)
        if self.in_takeoff_roll and not was_in_takeoff_roll:
            logger.info(f"Takeoff roll detected at {sample.ground_speed:.0f} kts")

        if not was_airborne and self.is_currently_airborne and not self.takeoff_recorded:
            self.has_been_airborne = True
            self.distance_since_last_record = 0.0
            self.previous_position = None
            departure_code, _ = airportCodes(self.flight_plan)
            record = self._record_boundary(sample, PassageKind.TAKEOFF, departure_code)
            self.takeoff_recorded = True
            if record:
                new_records.append(record)
            logger.info(f"Aircraft airborne at {sample.ground_speed:.0f} kts")

        if (was_airborne and not self.is_currently_airborne and self.has_been_airborne
                and not self.landing_recorded):
            _, destination_code = airportCodes(self.flight_plan)
            record = self._record_boundary(sample, PassageKind.LANDING, destination_code)
            self.landing_recorded = True
            if record:
                new_records.append(record)
            logger.info(f"Aircraft landed, now at {sample.ground_speed:.0f} kts")

        if self.is_currently_airborne:
            if self.previous_position is not None:
                self.distance_since_last_record += self.previous_position.distance_to(sample.position)
            self.previous_position = sample.position

        # Waypoints only count between the takeoff and landing records
        if self.takeoff_recorded and not self.landing_recorded:
            record = self.matcher.match_position(sample, self.has_been_airborne,
                                                 self.distance_since_last_record)
            if record:
                self.distance_since_last_record = 0.0
                new_records.append(record)
                self._notify(record)

        return new_records

    def _record_boundary(self, sample: TelemetrySample, kind: PassageKind,
                         airport_code: str) -> Optional[PassageRecord]:
        record = PassageRecord.from_sample(
            sample,
            self.clock.now(),
            airport_code,
            kind,
            round(self.distance_since_last_record),
        )
        if not self.matcher.add_passed_fix(record):
            return None
        self._notify(record)
        return record

    def _notify(self, record: PassageRecord) -> None:
        if self.on_passage:
            self.on_passage(record)
