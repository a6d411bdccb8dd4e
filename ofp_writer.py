#!/usr/bin/env python3
"""
OFP report writer module for the OFP flight logger

This module renders the logged passages into a fixed-width, OFP style
text report: a header block, a three-line block per passage and a fuel
consumption analysis per leg.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from ofp_clock import SystemClock
from ofp_model import FlightPlanMeta, PassageKind, PassageRecord
from ofp_summary import legSummaries
from ofp_utils import (
    finiteOrZero,
    formatElapsed,
    formatLatitude,
    formatLongitude,
    kgToTonnes,
    toHHmm,
    toOfpDate,
)
from ofp_constants import (
    DEFAULT_UNKNOWN_TEXT,
    OFP_COLUMN_WIDTHS,
    OFP_HEADER_ROWS,
    OFP_NO_FIXES_TEXT,
    OFP_FUEL_ANALYSIS_HEADER,
    OFP_LEG_NAME_WIDTH,
    OFP_LEG_VALUE_WIDTH,
    GENERATED_FORMAT,
    FILE_TIMESTAMP_FORMAT,
    SUMMARY_FILE_PATTERN,
)

# Configure logger
logger = logging.getLogger(__name__)


@dataclass
class RouteEndpoints:
    """Departure and destination as printed on the report"""
    departure_code: str = DEFAULT_UNKNOWN_TEXT
    destination_code: str = DEFAULT_UNKNOWN_TEXT
    departure_name: str = DEFAULT_UNKNOWN_TEXT
    destination_name: str = DEFAULT_UNKNOWN_TEXT


class OfpWriter:
    """
    Handles writing OFP style flight reports.
    Formats passages into the column layout used by airline flight plans.
    """

    def __init__(self, clock=None):
        """Initialize with the clock used for the report date"""
        self.clock = clock or SystemClock()

    @staticmethod
    def format_header_row(cells: Sequence[str]) -> str:
        """Format a column header row, every column left-aligned"""
        return ' '.join(cell.ljust(OFP_COLUMN_WIDTHS[i]) for i, cell in enumerate(cells))

    @staticmethod
    def format_row(cells: Sequence[str]) -> str:
        """Format a data row: first column left-aligned, the rest right-aligned"""
        first = cells[0].ljust(OFP_COLUMN_WIDTHS[0])
        rest = [cell.rjust(OFP_COLUMN_WIDTHS[i + 1]) for i, cell in enumerate(cells[1:])]
        return ' '.join([first] + rest)

    @staticmethod
    def resolve_endpoints(records: Sequence[PassageRecord],
                          flight_plan: Optional[FlightPlanMeta] = None) -> RouteEndpoints:
        """Work out the route endpoints from the takeoff and landing passages"""
        endpoints = RouteEndpoints()
        if not records:
            return endpoints

        if records[0].kind is PassageKind.TAKEOFF:
            endpoints.departure_code = records[0].name
            endpoints.departure_name = (flight_plan and flight_plan.departure_name) or records[0].name
        if records[-1].kind is PassageKind.LANDING:
            endpoints.destination_code = records[-1].name
            endpoints.destination_name = (flight_plan and flight_plan.destination_name) or records[-1].name
        return endpoints

    @staticmethod
    def remove_duplicate_airports(records: Sequence[PassageRecord]) -> List[PassageRecord]:
        """
        Drop plain waypoints named after the departure or destination airport.

        Flight plans often list the airports as waypoints too; the takeoff
        and landing passages already stand for them.
        """
        airports = {record.name for record in records
                    if record.is_boundary and record.name != DEFAULT_UNKNOWN_TEXT}
        return [record for record in records
                if record.is_boundary or record.name not in airports]

    def format_header(self, endpoints: RouteEndpoints, aircraft_title: str) -> List[str]:
        """Build the report header lines"""
        now = self.clock.now()
        return [
            f"{toOfpDate(now)} {endpoints.departure_code}-{endpoints.destination_code}",
            f"OFP 1 {endpoints.departure_name}-{endpoints.destination_name}",
            f"Generated: {now.strftime(GENERATED_FORMAT)}Z",
            f"Aircraft: {aircraft_title}",
            "",
        ]

    def format_record(self, record: PassageRecord, first: PassageRecord,
                      endpoints: RouteEndpoints, remaining_distance: int) -> List[str]:
        """Build the three lines and separator for one passage"""
        position_name = record.name
        if record.kind is PassageKind.TAKEOFF:
            position_name = endpoints.departure_name
        elif record.kind is PassageKind.LANDING:
            position_name = endpoints.destination_name

        flight_level = int(round(finiteOrZero(record.altitude) / 100))
        actual_burn = first.fuel_remaining - record.fuel_remaining

        line_a = [
            "", "", "",
            f"{flight_level:03d}",
            f"{finiteOrZero(record.mach):.2f}",
            f"{finiteOrZero(record.outside_air_temperature):.0f}",
            f"{kgToTonnes(record.fuel_remaining):.1f}",
        ]
        line_b = [
            position_name,
            formatLatitude(record.position.latitude),
            formatElapsed(record.timestamp - first.timestamp),
            str(record.distance_from_previous),
            f"{finiteOrZero(record.true_airspeed):.0f}",
        ]
        line_c = [
            record.name,
            formatLongitude(record.position.longitude),
            toHHmm(record.timestamp),
            str(remaining_distance),
            f"{record.ground_speed:.0f}",
            "",
            f"{kgToTonnes(actual_burn):.1f}",
        ]
        return [self.format_row(line_a), self.format_row(line_b), self.format_row(line_c), ""]

    @staticmethod
    def format_fuel_analysis(records: Sequence[PassageRecord]) -> List[str]:
        """Build the per-leg fuel consumption table"""
        lines = [OFP_FUEL_ANALYSIS_HEADER]
        for leg in legSummaries(records):
            values = [
                f"{leg.minutes:.1f}",
                f"{kgToTonnes(leg.fuel_consumed):.1f}",
                f"{leg.fuel_flow:.0f}",
            ]
            lines.append(leg.name.ljust(OFP_LEG_NAME_WIDTH)
                         + ' '.join(value.ljust(OFP_LEG_VALUE_WIDTH) for value in values))
        return lines

    def render(self, records: Sequence[PassageRecord], aircraft_title: str,
               flight_plan: Optional[FlightPlanMeta] = None) -> str:
        """Render the complete report as text"""
        records = list(records)
        endpoints = self.resolve_endpoints(records, flight_plan)
        records = self.remove_duplicate_airports(records)

        lines = self.format_header(endpoints, aircraft_title)
        if not records:
            lines.append(OFP_NO_FIXES_TEXT)
            return '\n'.join(lines) + '\n'

        lines.extend(self.format_header_row(row) for row in OFP_HEADER_ROWS)

        first = records[0]
        remaining_distance = sum(record.distance_from_previous for record in records)
        for record in records:
            lines.extend(self.format_record(record, first, endpoints, remaining_distance))
            remaining_distance = max(0, remaining_distance - record.distance_from_previous)

        if len(records) > 1:
            lines.extend(self.format_fuel_analysis(records))

        return '\n'.join(lines) + '\n'

    def write_file(self, ofp_file: TextIO, records: Sequence[PassageRecord], aircraft_title: str,
                   flight_plan: Optional[FlightPlanMeta] = None) -> None:
        """Write a complete report to an open text stream"""
        ofp_file.write(self.render(records, aircraft_title, flight_plan))


# Public function - maintain backward compatibility
def writeOutputFile(ofp_file: TextIO, records: Sequence[PassageRecord], aircraft_title: str,
                    flight_plan: Optional[FlightPlanMeta] = None, clock=None) -> None:
    """Write an OFP report from the logged passages"""
    writer = OfpWriter(clock)
    writer.write_file(ofp_file, records, aircraft_title, flight_plan)


def summaryFileName(clock=None) -> str:
    """Default report file name, stamped with the clock's current time"""
    timestamp = (clock or SystemClock()).now().strftime(FILE_TIMESTAMP_FORMAT)
    return SUMMARY_FILE_PATTERN.format(timestamp=timestamp)


def saveReport(out_path, report: str, file_name: str) -> Optional[Path]:
    """
    Write rendered report text to ``out_path/file_name``.

    Returns the path written, or None if the file could not be written. A
    failed write is logged and never raised so the passages stay available.
    """
    summary_file = Path(out_path) / file_name
    try:
        with open(summary_file, 'w', encoding='utf-8') as ofp_file:
            ofp_file.write(report)
    except OSError as e:
        logger.error(f"Error saving flight summary to {summary_file}: {e}")
        return None

    logger.info(f"Flight summary saved to: {summary_file}")
    return summary_file


def saveFlightSummary(out_path, records: Sequence[PassageRecord], aircraft_title: str,
                      flight_plan: Optional[FlightPlanMeta] = None, clock=None,
                      file_name: Optional[str] = None) -> Optional[Path]:
    """Render the passages and write the report to a file in ``out_path``"""
    writer = OfpWriter(clock)
    report = writer.render(records, aircraft_title, flight_plan)
    return saveReport(out_path, report, file_name or summaryFileName(writer.clock))
