#!/usr/bin/env python3
"""
Telemetry sources for the OFP flight logger

A telemetry source hands out one TelemetrySample per poll and returns None
once it has nothing more to give. Replay sources also move a ManualClock to
the time of each sample so passages are stamped with the recorded time.
"""

import csv
import logging
import math
import threading
from typing import Dict, Iterator, List, Optional, TextIO, Tuple

from ofp_clock import ManualClock
from ofp_model import Position, TelemetrySample
from ofp_utils import gallonsToKg, numberOrString, parseTimestamp
from ofp_constants import DEFAULT_SIMULATION_STEP, DEFAULT_SLOT_REPEAT_INTERVAL

# Configure logger
logger = logging.getLogger(__name__)


class TelemetrySource:
    """Base class for pollable telemetry sources"""

    def poll(self) -> Optional[TelemetrySample]:
        raise NotImplementedError

    def __iter__(self) -> Iterator[TelemetrySample]:
        while True:
            sample = self.poll()
            if sample is None:
                return
            yield sample


class CsvTelemetrySource(TelemetrySource):
    """
    Replays telemetry recorded as CSV.

    Required columns are ``time``, ``latitude``, ``longitude`` and
    ``ground_speed``. Fuel may be given in kilograms (``fuel_kg``,
    ``fuel_capacity_kg``) or US gallons (``fuel_gal``, ``fuel_capacity_gal``).
    Blank TAS, Mach and OAT values are kept as NaN.
    """

    REQUIRED_COLUMNS = ('time', 'latitude', 'longitude', 'ground_speed')

    def __init__(self, csv_file: TextIO, clock: ManualClock, aircraft_title: str = ''):
        self.clock = clock
        self.start = clock.now()
        self.aircraft_title = aircraft_title
        self.reader = csv.DictReader(csv_file)
        self.line_number = 1
        self.last_timestamp = None

        missing = [column for column in self.REQUIRED_COLUMNS
                   if column not in (self.reader.fieldnames or [])]
        if missing:
            raise ValueError(f"Telemetry file is missing columns: {', '.join(missing)}")

    @staticmethod
    def _number(row: Dict[str, str], column: str, default: float = 0.0) -> float:
        value = (row.get(column) or '').strip()
        if not value:
            return default
        number = numberOrString(value)
        if isinstance(number, str):
            raise ValueError(f"Invalid value for {column}: {value!r}")
        return number

    def _fuel(self, row: Dict[str, str], column: str) -> float:
        if (row.get(f'{column}_kg') or '').strip():
            return self._number(row, f'{column}_kg')
        return gallonsToKg(self._number(row, f'{column}_gal'))

    def parse_row(self, row: Dict[str, str]) -> TelemetrySample:
        """Convert one CSV row to a sample"""
        return TelemetrySample(
            position=Position(self._number(row, 'latitude'), self._number(row, 'longitude')),
            ground_speed=self._number(row, 'ground_speed'),
            true_airspeed=self._number(row, 'true_airspeed', math.nan),
            mach=self._number(row, 'mach', math.nan),
            altitude=self._number(row, 'altitude'),
            heading=self._number(row, 'heading'),
            outside_air_temperature=self._number(row, 'oat', math.nan),
            fuel_quantity=self._fuel(row, 'fuel'),
            fuel_capacity=self._fuel(row, 'fuel_capacity'),
            fuel_flow=self._number(row, 'fuel_flow'),
            fuel_burned=self._number(row, 'fuel_burned'),
            aircraft_title=(row.get('aircraft') or '').strip() or self.aircraft_title,
        )

    def poll(self) -> Optional[TelemetrySample]:
        for row in self.reader:
            self.line_number += 1
            if not (row.get('latitude') or '').strip() or not (row.get('longitude') or '').strip():
                logger.warning(f"Line {self.line_number}: no position, sample skipped")
                continue
            try:
                timestamp = parseTimestamp(row['time'], self.start)
                sample = self.parse_row(row)
            except ValueError as e:
                logger.warning(f"Line {self.line_number}: {e}")
                continue
            if self.last_timestamp is not None and timestamp < self.last_timestamp:
                logger.warning(f"Line {self.line_number}: time goes backwards, sample skipped")
                continue
            self.last_timestamp = timestamp
            self.clock.set(timestamp)
            return sample
        return None


# Simulated flight from Vienna to Graz with taxi, takeoff and landing phases
# (latitude, longitude, fuel kg, ground speed kt, altitude ft, heading)
SIMULATED_FLIGHT_PATH: List[Tuple[float, float, float, float, float, float]] = [
    (48.1103, 16.5697, 3020, 15, 600, 290),
    (48.1105, 16.5700, 3018, 25, 600, 290),
    (48.1108, 16.5703, 3016, 35, 600, 290),
    (48.1109, 16.5704, 3015, 42, 600, 290),
    (48.1110, 16.5706, 3014, 80, 700, 290),
    (48.1115, 16.5710, 3012, 120, 1500, 270),
    (48.1120, 16.5715, 3010, 160, 5000, 250),
    (48.0000, 16.3000, 2960, 185, 20000, 225),
    (47.9000, 16.1000, 2900, 190, 24000, 225),
    (47.8000, 15.9000, 2840, 185, 24000, 225),
    (47.7000, 15.7000, 2780, 180, 24000, 225),
    (47.6000, 15.5000, 2720, 175, 22000, 200),
    (47.5000, 15.3000, 2660, 170, 18000, 170),
    (47.2000, 15.4000, 2630, 150, 10000, 170),
    (47.1000, 15.4200, 2610, 130, 6000, 170),
    (47.0500, 15.4300, 2600, 110, 3000, 170),
    (47.0200, 15.4380, 2598, 90, 1500, 170),
    (47.0100, 15.4390, 2596, 70, 1200, 170),
    (47.0080, 15.4395, 2594, 50, 1115, 170),
    (47.0077, 15.4396, 2592, 30, 1115, 170),
    (47.0075, 15.4398, 2590, 15, 1115, 170),
]
SIMULATED_FUEL_CAPACITY = 3624
SIMULATED_AIRCRAFT_TITLE = "Simulated Aircraft - Boeing 737-800"


class SimulatedTelemetrySource(TelemetrySource):
    """Plays back a built-in flight, advancing the clock a fixed step per sample"""

    def __init__(self, clock: ManualClock, step_seconds: float = DEFAULT_SIMULATION_STEP,
                 path: Optional[List[Tuple[float, float, float, float, float, float]]] = None):
        self.clock = clock
        self.step_seconds = step_seconds
        self.path = path if path is not None else SIMULATED_FLIGHT_PATH
        self.index = 0

    def poll(self) -> Optional[TelemetrySample]:
        if self.index >= len(self.path):
            logger.debug("End of simulated flight path - aircraft parked")
            return None

        lat, lon, fuel, speed, alt, heading = self.path[self.index]
        if self.index > 0:
            self.clock.advance(seconds=self.step_seconds)
        self.index += 1

        initial_fuel = self.path[0][2]
        return TelemetrySample(
            position=Position(lat, lon),
            ground_speed=speed,
            true_airspeed=speed,
            mach=speed / 661.47,
            altitude=alt,
            heading=heading,
            outside_air_temperature=15 - 1.98 * alt / 1000,
            fuel_quantity=fuel,
            fuel_capacity=SIMULATED_FUEL_CAPACITY,
            fuel_flow=0.0,
            fuel_burned=initial_fuel - fuel,
            aircraft_title=SIMULATED_AIRCRAFT_TITLE,
        )


class SampleSlot:
    """
    Single-writer handoff of the latest sample between an acquisition thread
    and the monitoring loop. Publishing overwrites any sample not yet taken.
    """

    def __init__(self):
        self._condition = threading.Condition()
        self._sample: Optional[TelemetrySample] = None
        self._closed = False

    def publish(self, sample: TelemetrySample) -> None:
        with self._condition:
            self._sample = sample
            self._condition.notify_all()

    def take(self, timeout: Optional[float] = 0) -> Optional[TelemetrySample]:
        """
        Return the newest unseen sample, waiting up to ``timeout`` seconds
        for one to be published (forever if None). Returns None if nothing
        new arrived or the slot was closed while waiting.
        """
        with self._condition:
            self._condition.wait_for(lambda: self._sample is not None or self._closed, timeout)
            sample, self._sample = self._sample, None
            return sample

    def close(self) -> None:
        """Mark acquisition as finished and wake any waiting reader"""
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed


class SlotTelemetrySource(TelemetrySource):
    """
    Adapts a SampleSlot to the polling interface.

    The first poll blocks until acquisition publishes a sample or closes the
    slot. Later polls wait up to ``repeat_interval`` seconds for a new sample
    and otherwise repeat the last one, so the phase tracker keeps seeing the
    current state without the loop spinning. None is returned only once the
    slot is closed.
    """

    def __init__(self, slot: SampleSlot, repeat_interval: float = DEFAULT_SLOT_REPEAT_INTERVAL):
        self.slot = slot
        self.repeat_interval = repeat_interval
        self.last_sample: Optional[TelemetrySample] = None

    def poll(self) -> Optional[TelemetrySample]:
        timeout = None if self.last_sample is None else self.repeat_interval
        sample = self.slot.take(timeout)
        if sample is not None:
            self.last_sample = sample
            return sample
        if self.slot.closed:
            return None
        return self.last_sample
