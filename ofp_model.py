#!/usr/bin/env python3
"""
Data models and enums for the OFP flight logger
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from ofp_utils import calculateDistance, finiteOrZero, kgToTonnes
from ofp_constants import (
    DEFAULT_FIX_TOLERANCE_NM,
    DEFAULT_UNKNOWN_TEXT,
    TAKEOFF_PREFIX,
    LANDING_PREFIX,
)


class FlightPhase(Enum):
    PREFLIGHT_TAXI = "TAXI (Pre-flight)"
    TAKEOFF_ROLL = "TAKEOFF ROLL"
    AIRBORNE = "AIRBORNE"
    POSTFLIGHT_TAXI = "TAXI (Post-flight)"


class PassageKind(Enum):
    WAYPOINT = "WAYPOINT"
    TAKEOFF = TAKEOFF_PREFIX
    LANDING = LANDING_PREFIX


@dataclass(frozen=True)
class Position:
    """Latitude/longitude pair in decimal degrees"""
    latitude: float = 0.0
    longitude: float = 0.0

    def distance_to(self, other: 'Position') -> float:
        """Great circle distance to another position in nautical miles"""
        return calculateDistance(self.latitude, self.longitude, other.latitude, other.longitude)

    def __str__(self) -> str:
        return f"{self.latitude:.6f}, {self.longitude:.6f}"


@dataclass
class TelemetrySample:
    """A single telemetry reading from the simulator"""
    position: Position = field(default_factory=Position)
    ground_speed: float = 0.0
    true_airspeed: float = 0.0
    mach: float = 0.0
    altitude: float = 0.0
    heading: float = 0.0
    outside_air_temperature: float = 0.0
    fuel_quantity: float = 0.0
    fuel_capacity: float = 0.0
    fuel_flow: float = 0.0
    fuel_burned: float = 0.0
    aircraft_title: str = ''

    @property
    def fuel_remaining_percentage(self) -> float:
        if self.fuel_capacity > 0:
            return self.fuel_quantity / self.fuel_capacity * 100
        return 0.0


@dataclass(frozen=True)
class NamedFix:
    """A named waypoint to watch for, with its capture radius"""
    name: str
    position: Position
    tolerance_nm: float = DEFAULT_FIX_TOLERANCE_NM
    waypoint_type: str = ''


@dataclass(frozen=True)
class PassageRecord:
    """
    A waypoint overflight, takeoff or landing.

    For TAKEOFF and LANDING records ``name`` holds the airport code; the
    conventional ``"TAKEOFF LGRP"`` label is available as ``fix_name``.
    """
    timestamp: datetime
    name: str
    kind: PassageKind = PassageKind.WAYPOINT
    position: Position = field(default_factory=Position)
    fuel_remaining: float = 0.0
    fuel_remaining_percentage: float = 0.0
    ground_speed: float = 0.0
    altitude: float = 0.0
    heading: float = 0.0
    true_airspeed: float = 0.0
    mach: float = 0.0
    outside_air_temperature: float = 0.0
    fuel_flow: float = 0.0
    fuel_burned: float = 0.0
    distance_from_previous: int = 0

    def __post_init__(self):
        if self.distance_from_previous < 0:
            raise ValueError(f"Negative distance for {self.name}: {self.distance_from_previous}")

    @classmethod
    def from_sample(cls, sample: TelemetrySample, timestamp: datetime, name: str,
                    kind: PassageKind = PassageKind.WAYPOINT,
                    distance_from_previous: int = 0) -> 'PassageRecord':
        """Create a passage record from the aircraft state at the time of passage"""
        return cls(
            timestamp=timestamp,
            name=name,
            kind=kind,
            position=sample.position,
            fuel_remaining=round(finiteOrZero(sample.fuel_quantity)),
            fuel_remaining_percentage=sample.fuel_remaining_percentage,
            ground_speed=sample.ground_speed,
            altitude=sample.altitude,
            heading=sample.heading,
            true_airspeed=sample.true_airspeed,
            mach=sample.mach,
            outside_air_temperature=sample.outside_air_temperature,
            fuel_flow=sample.fuel_flow,
            fuel_burned=sample.fuel_burned,
            distance_from_previous=distance_from_previous,
        )

    @property
    def fix_name(self) -> str:
        """Unique label of the passage, e.g. 'VANES' or 'TAKEOFF LGRP'"""
        if self.kind is PassageKind.WAYPOINT:
            return self.name
        return f"{self.kind.value} {self.name}"

    @property
    def is_boundary(self) -> bool:
        return self.kind is not PassageKind.WAYPOINT

    def __str__(self) -> str:
        return (f"{self.timestamp:%Y-%m-%d %H:%M:%S} - {self.fix_name} - "
                f"Fuel: {kgToTonnes(self.fuel_remaining):.1f} t ({self.fuel_remaining_percentage:.1f}%) - "
                f"Alt: {self.altitude:.0f} ft")


@dataclass(frozen=True)
class FlightPlanMeta:
    """Departure/destination information supplied with a flight plan"""
    departure_code: str = ''
    destination_code: str = ''
    departure_name: str = ''
    destination_name: str = ''
    cruising_altitude: float = 0.0
    title: str = ''
    plan_type: str = ''
    route_type: str = ''


@dataclass
class FlightPlan:
    """A loaded flight plan: metadata and the ordered fixes to watch"""
    meta: FlightPlanMeta = field(default_factory=FlightPlanMeta)
    fixes: List[NamedFix] = field(default_factory=list)


def airportCodes(meta: Optional[FlightPlanMeta]) -> Tuple[str, str]:
    """Departure and destination codes, falling back to UNKNOWN without a plan"""
    if meta is None:
        return DEFAULT_UNKNOWN_TEXT, DEFAULT_UNKNOWN_TEXT
    return (meta.departure_code or DEFAULT_UNKNOWN_TEXT,
            meta.destination_code or DEFAULT_UNKNOWN_TEXT)


class PassageLog:
    """
    Ordered, append-only list of passages.

    A fix name appears at most once; appending a duplicate is a no-op.
    Timestamps never go backwards.
    """

    def __init__(self):
        self._records: List[PassageRecord] = []
        self._names = set()

    def append(self, record: PassageRecord) -> bool:
        """Append a record, returning False if its name was already logged"""
        if record.fix_name in self._names:
            return False
        if self._records and record.timestamp < self._records[-1].timestamp:
            raise ValueError(
                f"Passage {record.fix_name} at {record.timestamp} precedes "
                f"{self._records[-1].fix_name} at {self._records[-1].timestamp}"
            )
        self._records.append(record)
        self._names.add(record.fix_name)
        return True

    def clear(self) -> None:
        self._records.clear()
        self._names.clear()

    def __contains__(self, fix_name: str) -> bool:
        return fix_name in self._names

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PassageRecord]:
        return iter(self._records)

    def __getitem__(self, index):
        return self._records[index]

    @property
    def records(self) -> Tuple[PassageRecord, ...]:
        return tuple(self._records)

    @property
    def names(self) -> List[str]:
        return [record.fix_name for record in self._records]
