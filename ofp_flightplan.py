#!/usr/bin/env python3
"""
Flight plan parser module for the OFP flight logger

This module reads MSFS .pln flight plans (AceXML) and turns them into the
departure/destination metadata and the ordered list of fixes to watch.
"""

import logging
import os
import xml.etree.ElementTree as ET
from typing import List, Optional

from ofp_model import FlightPlan, FlightPlanMeta, NamedFix, Position
from ofp_constants import (
    DEFAULT_FIX_TOLERANCE_NM,
    WAYPOINT_TOLERANCES_NM,
    PLN_FLIGHT_PLAN,
    PLN_WAYPOINT,
    PLN_WAYPOINT_TYPE,
    PLN_WORLD_POSITION,
)

# Configure logger
logger = logging.getLogger(__name__)


class WorldPositionParser:
    """
    Parses WorldPosition strings such as
    N36° 24' 19.00",E28° 5' 10.00",+000019.00
    """

    @staticmethod
    def parse_coordinate(coordinate: str) -> Optional[float]:
        """Convert a single N/S/E/W degrees-minutes-seconds value to decimal degrees"""
        coordinate = coordinate.replace('"', '').strip()
        if not coordinate or coordinate[0] not in 'NSEW':
            logger.warning(f"Coordinate without hemisphere: '{coordinate}'")
            return None

        is_negative = coordinate[0] in 'SW'
        degree_parts = coordinate[1:].split('°')
        if len(degree_parts) != 2:
            logger.warning(f"Could not split by degree symbol: '{coordinate}'")
            return None

        minute_parts = degree_parts[1].split("'")
        if len(minute_parts) != 2:
            logger.warning(f"Could not split by minute symbol: '{coordinate}'")
            return None

        try:
            degrees = float(degree_parts[0].strip())
            minutes = float(minute_parts[0].strip())
            seconds = float(minute_parts[1].strip() or 0)
        except ValueError:
            logger.warning(f"Failed to parse numeric values in '{coordinate}'")
            return None

        decimal_degrees = degrees + minutes / 60.0 + seconds / 3600.0
        return -decimal_degrees if is_negative else decimal_degrees

    def parse(self, world_position: str) -> Optional[Position]:
        """Parse a full WorldPosition value; the altitude part is ignored"""
        parts = world_position.split(',')
        if len(parts) < 2:
            logger.warning(f"Not enough parts in world position: '{world_position}'")
            return None

        latitude = self.parse_coordinate(parts[0])
        longitude = self.parse_coordinate(parts[1])
        if latitude is None or longitude is None:
            return None
        return Position(latitude, longitude)


class FlightPlanParser:
    """
    Parses the FlightPlan.FlightPlan element of an MSFS flight plan.
    """

    def __init__(self):
        self.position_parser = WorldPositionParser()

    @staticmethod
    def tolerance_for_waypoint_type(waypoint_type: str) -> float:
        """Capture radius in NM; airports and navaids get a wider radius"""
        return WAYPOINT_TOLERANCES_NM.get(waypoint_type, DEFAULT_FIX_TOLERANCE_NM)

    @staticmethod
    def _text(element: ET.Element, tag: str) -> str:
        child = element.find(tag)
        if child is None or child.text is None:
            return ''
        return child.text.strip()

    def parse_meta(self, plan_element: ET.Element) -> FlightPlanMeta:
        """Extract departure/destination and route information"""
        try:
            cruising_altitude = float(self._text(plan_element, 'CruisingAlt') or 0)
        except ValueError:
            logger.warning("Invalid cruising altitude in flight plan, using 0")
            cruising_altitude = 0.0

        return FlightPlanMeta(
            departure_code=self._text(plan_element, 'DepartureID'),
            destination_code=self._text(plan_element, 'DestinationID'),
            departure_name=self._text(plan_element, 'DepartureName'),
            destination_name=self._text(plan_element, 'DestinationName'),
            cruising_altitude=cruising_altitude,
            title=self._text(plan_element, 'Title'),
            plan_type=self._text(plan_element, 'FPType'),
            route_type=self._text(plan_element, 'RouteType'),
        )

    def parse_waypoints(self, plan_element: ET.Element) -> List[NamedFix]:
        """Extract the ATC waypoints in route order"""
        fixes = []
        for waypoint in plan_element.findall(PLN_WAYPOINT):
            name = waypoint.get('id', '')
            world_position = self._text(waypoint, PLN_WORLD_POSITION)
            if not name or not world_position:
                continue

            position = self.position_parser.parse(world_position)
            if position is None:
                logger.warning(f"Skipping waypoint {name}: invalid position '{world_position}'")
                continue

            waypoint_type = self._text(waypoint, PLN_WAYPOINT_TYPE)
            fixes.append(NamedFix(
                name=name,
                position=position,
                tolerance_nm=self.tolerance_for_waypoint_type(waypoint_type),
                waypoint_type=waypoint_type,
            ))
        return fixes

    def parse_tree(self, root: ET.Element) -> Optional[FlightPlan]:
        plan_element = root.find(PLN_FLIGHT_PLAN)
        if plan_element is None:
            logger.error("Invalid flight plan format")
            return None
        return FlightPlan(meta=self.parse_meta(plan_element), fixes=self.parse_waypoints(plan_element))


def cleanPath(file_path: str) -> str:
    """Remove surrounding whitespace and quotes from a user supplied path"""
    return os.path.abspath(file_path.strip().strip('"'))


def parseFlightPlan(file_path: str) -> Optional[FlightPlan]:
    """Parse an MSFS .pln file, returning None if it is missing or invalid"""
    file_path = cleanPath(file_path)
    if not os.path.isfile(file_path):
        logger.error(f"Flight plan file not found: {file_path}")
        return None

    try:
        tree = ET.parse(file_path)
    except (ET.ParseError, OSError) as e:
        logger.error(f"Error parsing flight plan: {e}")
        return None

    flight_plan = FlightPlanParser().parse_tree(tree.getroot())
    if flight_plan:
        logger.info(f"Loaded flight plan {flight_plan.meta.departure_code}-"
                    f"{flight_plan.meta.destination_code} with {len(flight_plan.fixes)} waypoints")
    return flight_plan


def describeFlightPlan(flight_plan: FlightPlan) -> str:
    """Human readable overview of a loaded flight plan"""
    meta = flight_plan.meta
    lines = [
        f"Flight Plan: {meta.title}",
        f"   From: {meta.departure_code} ({meta.departure_name})",
        f"   To: {meta.destination_code} ({meta.destination_name})",
        f"   Type: {meta.plan_type} - {meta.route_type}",
        f"   Cruising Altitude: {meta.cruising_altitude:.0f} ft",
        f"   Waypoints: {len(flight_plan.fixes)}",
    ]
    for i, fix in enumerate(flight_plan.fixes, 1):
        lines.append(f"   {i:02d}. {fix.name} - {fix.position.latitude:.6f}, "
                     f"{fix.position.longitude:.6f} (±{fix.tolerance_nm:.1f} NM)")
    return '\n'.join(lines)

