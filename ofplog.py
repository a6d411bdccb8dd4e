#!/usr/bin/env python3
"""
OFP Flight Logger

This script follows a flight from recorded or simulated telemetry, logs the
takeoff, landing and every flight plan waypoint passed, and writes an OFP
style flight report.

Usage:
    python ofplog.py [-c config] [-p plan.pln] [-a aircraft] [-o outputFolder] telemetry.csv [...]
    python ofplog.py [-p plan.pln] --simulate
"""

import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import Iterable, Optional

from ofp_config import Config
from ofp_clock import ManualClock
from ofp_flightplan import parseFlightPlan, describeFlightPlan
from ofp_model import FlightPlan
from ofp_session import FlightSession
from ofp_telemetry import CsvTelemetrySource, SimulatedTelemetrySource
from ofp_constants import DEFAULT_OUT_PATH, REPORT_SUFFIX

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger('ofplog')


def loadFlightPlan(config: Config) -> Optional[FlightPlan]:
    """Load the configured flight plan, if any"""
    if not config.flight_plan_path:
        logger.info("No flight plan given, airports will be reported as UNKNOWN")
        return None

    flight_plan = parseFlightPlan(config.flight_plan_path)
    if flight_plan is None:
        logger.warning("Continuing without a flight plan")
    else:
        logger.debug(describeFlightPlan(flight_plan))
    return flight_plan


def newSession(config: Config, clock, flight_plan: Optional[FlightPlan]) -> FlightSession:
    return FlightSession(
        clock=clock,
        flight_plan=flight_plan,
        aircraft_title=config.aircraft,
        poll_interval=config.poll_interval,
        takeoff_roll_poll_interval=config.takeoff_roll_poll_interval,
    )


def reportPath(config: Config, in_path) -> Path:
    """Report file for a telemetry file: <stem>_ofp.txt next to it or in the output folder"""
    in_path = Path(in_path)
    out_path = in_path.with_name(in_path.stem + REPORT_SUFFIX)
    if config.outPath and config.outPath != DEFAULT_OUT_PATH:
        out_path = Path(config.outPath) / out_path.name
    return out_path


def monitorAndReport(session: FlightSession, source, report_file: Optional[Path],
                     config: Config, cancel_event: Optional[threading.Event] = None) -> Optional[str]:
    """Run the monitoring loop; the report is written even if it is interrupted"""
    try:
        session.monitor(source, cancel_event, realtime=config.realtime)
    except KeyboardInterrupt:
        logger.warning("Monitoring interrupted, writing report for the passages logged so far")
    finally:
        report = writeReport(session, report_file, config)
    return report


def writeReport(session: FlightSession, report_file: Optional[Path], config: Config) -> Optional[str]:
    """Finish the session into ``report_file``, or the output folder if none is given"""
    if report_file is None:
        return session.finish(out_path=config.outPath)

    try:
        with open(report_file, 'w', encoding='utf-8') as ofp_file:
            report = session.finish(sink=ofp_file)
    except OSError as e:
        logger.error(f"Error writing {report_file}: {e}")
        return None

    logger.info(f"Successfully generated: {report_file}")
    return report


def process_file(config: Config, in_path, flight_plan: Optional[FlightPlan] = None) -> bool:
    """Replay one telemetry CSV file and write its OFP report"""
    logger.info(f"Processing {in_path}...")
    try:
        with open(in_path, 'r', encoding='utf-8', newline='') as telemetry_file:
            clock = ManualClock()
            source = CsvTelemetrySource(telemetry_file, clock, config.aircraft)
            session = newSession(config, clock, flight_plan)
            report = monitorAndReport(session, source, reportPath(config, in_path), config)
    except (OSError, ValueError) as e:
        logger.error(f"Error processing {in_path}: {e}")
        return False

    if report is None:
        return False

    if session.samples_processed == 0:
        logger.error(f"No valid telemetry found in {in_path}")
        return False
    return True


def process_files(config: Config, in_paths: Iterable) -> int:
    """Process several telemetry files, returning how many succeeded"""
    flight_plan = loadFlightPlan(config)
    return sum(1 for in_path in in_paths if process_file(config, in_path, flight_plan))


def run_simulation(config: Config, cancel_event: Optional[threading.Event] = None) -> FlightSession:
    """Fly the built-in simulated flight and save its report in the output folder"""
    logger.info("Running simulated flight...")
    clock = ManualClock()
    session = newSession(config, clock, loadFlightPlan(config))
    monitorAndReport(session, SimulatedTelemetrySource(clock), None, config, cancel_event)
    return session


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Log flight plan waypoint passages and write an OFP style flight report',
        epilog='Example: python ofplog.py -p LGRPESSA.pln flight.csv'
    )

    parser.add_argument('-a', '--aircraft', default=None, help='Aircraft title printed on the report')
    parser.add_argument('-c', '--config', default=None, help='Path to config file')
    parser.add_argument('-p', '--flightplan', default=None, help='Path to an MSFS .pln flight plan')
    parser.add_argument('-o', '--output', default=None, help='Folder to write the OFP reports to')
    parser.add_argument('--simulate', action='store_true', help='Fly the built-in simulated flight')
    parser.add_argument('--realtime', action='store_true', default=None,
                        help='Wait the poll interval between samples')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    parser.add_argument('telemetry', default=None, nargs='*', help='Path to one or more telemetry CSV files')
    args = parser.parse_args(argv)

    # Set log level based on verbose flag
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.simulate and not args.telemetry:
        parser.error('give at least one telemetry file or --simulate')

    config = Config(args)
    if args.simulate:
        run_simulation(config)
        return 0

    succeeded = process_files(config, args.telemetry)
    logger.info("Processing complete.")
    return 0 if succeeded == len(args.telemetry) else 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except FileNotFoundError as e:
        logger.critical(f"File not found: {e.filename}")
        sys.exit(3)
    except ValueError as e:
        logger.critical(f"Invalid input: {e}")
        sys.exit(2)
    except Exception as e:
        logger.critical(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)
