#!/usr/bin/env python3
"""
Monitoring session for the OFP flight logger

A FlightSession owns everything that belongs to one monitored flight: the
passage log, the fix matcher, the phase tracker, the clock and the loaded
flight plan. The polling loop feeds it one sample at a time and the report
is rendered once when monitoring ends.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from ofp_clock import SystemClock
from ofp_matcher import GeodesicFixMatcher
from ofp_model import FlightPlan, PassageLog, PassageRecord, TelemetrySample
from ofp_phase import FlightPhaseTracker
from ofp_summary import flightSummary
from ofp_writer import OfpWriter, saveReport, summaryFileName
from ofp_constants import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TAKEOFF_ROLL_POLL_INTERVAL,
)

# Configure logger
logger = logging.getLogger(__name__)


class FlightSession:
    """
    State and polling loop for a single monitored flight.
    """

    def __init__(self, clock=None, flight_plan: Optional[FlightPlan] = None,
                 aircraft_title: str = '',
                 poll_interval: float = DEFAULT_POLL_INTERVAL,
                 takeoff_roll_poll_interval: float = DEFAULT_TAKEOFF_ROLL_POLL_INTERVAL,
                 on_passage: Optional[Callable[[PassageRecord], None]] = None):
        self.clock = clock or SystemClock()
        self.aircraft_title = aircraft_title
        self.poll_interval = poll_interval
        self.takeoff_roll_poll_interval = takeoff_roll_poll_interval

        self.passage_log = PassageLog()
        self.matcher = GeodesicFixMatcher(self.passage_log, self.clock)
        self.tracker = FlightPhaseTracker(self.matcher, on_passage=on_passage)
        self.flight_plan: Optional[FlightPlan] = None

        self.samples_processed = 0
        self.finished = False
        self.report_path: Optional[Path] = None

        if flight_plan is not None:
            self.load_flight_plan(flight_plan)

    def load_flight_plan(self, flight_plan: FlightPlan) -> None:
        """Replace the watched fixes and start the flight over"""
        self.matcher.reset()
        self.matcher.clear_fixes()
        self.matcher.add_fixes(flight_plan.fixes)
        self.tracker.reset()
        self.tracker.flight_plan = flight_plan.meta
        self.flight_plan = flight_plan

    @property
    def records(self) -> List[PassageRecord]:
        return list(self.passage_log)

    def process_sample(self, sample: TelemetrySample) -> List[PassageRecord]:
        """Feed one sample through the phase tracker and fix matcher"""
        if sample.aircraft_title and not self.aircraft_title:
            self.aircraft_title = sample.aircraft_title
        self.samples_processed += 1
        return self.tracker.update(sample)

    def next_delay(self) -> float:
        """Seconds to wait before the next poll"""
        if self.tracker.in_takeoff_roll:
            return self.takeoff_roll_poll_interval
        return self.poll_interval

    def monitor(self, source, cancel_event: Optional[threading.Event] = None,
                realtime: bool = True) -> int:
        """
        Poll ``source`` until the aircraft is back to taxi speed after a
        flight, the source runs dry or ``cancel_event`` is set.

        With ``realtime`` the loop waits between polls on the cancel event,
        which is the only point where cancellation is observed. Live sources
        such as SlotTelemetrySource pace themselves by blocking in ``poll``,
        so they can run with ``realtime`` off. Returns the number of samples
        processed.
        """
        cancel_event = cancel_event or threading.Event()
        processed = 0

        while not cancel_event.is_set():
            sample = source.poll()
            if sample is None:
                logger.info("Telemetry source exhausted, stopping monitoring")
                break

            self.process_sample(sample)
            processed += 1
            logger.debug(f"{self.tracker.phase.value} - GS {sample.ground_speed:.0f} kts - "
                         f"{sample.position}")

            if self.tracker.should_stop:
                logger.info("Aircraft back to taxi speed, flight monitoring complete")
                break

            if realtime and cancel_event.wait(self.next_delay()):
                logger.info("Monitoring cancelled")
                break

        return processed

    def render(self) -> str:
        """Render the OFP report for the passages logged so far"""
        meta = self.flight_plan.meta if self.flight_plan else None
        return OfpWriter(self.clock).render(self.records, self.aircraft_title, meta)

    def finish(self, sink: Optional[TextIO] = None, out_path=None,
               file_name: Optional[str] = None) -> Optional[str]:
        """
        Render the report exactly once.

        The text goes to ``sink`` if given, otherwise to a file in
        ``out_path``. Later calls do nothing and return None.
        """
        if self.finished:
            logger.warning("Flight report already generated for this session")
            return None

        report = self.render()
        self.finished = True
        if sink is not None:
            try:
                sink.write(report)
            except OSError as e:
                logger.error(f"Error writing flight report: {e}")
        elif out_path is not None:
            self.report_path = saveReport(out_path, report,
                                          file_name or summaryFileName(self.clock))
        logger.info(self.summary())
        return report

    def summary(self) -> str:
        return flightSummary(self.records, self.aircraft_title)
