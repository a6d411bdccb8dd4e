#!/usr/bin/env python3
"""
Utility functions for the OFP flight logger
"""

import re
import math
from datetime import datetime, timedelta
from typing import Optional, Union

from ofp_constants import (
    EARTH_RADIUS_NM,
    KG_PER_GALLON,
    KG_PER_TONNE,
    MONTH_ABBREVIATIONS,
    TIME_FORMAT_HHMM,
    MINUTES_PER_HOUR,
    MINUTES_PER_DEGREE,
)


def numberOrString(value: str) -> Union[float, str]:
    """Convert a string to a number if possible, otherwise keep as string"""
    if re.sub('^[+-]', '', re.sub('\\.', '', value)).isnumeric():
        return float(value)
    else:
        return value


def calculateDistance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on earth.
    Returns distance in nautical miles.
    """
    # Convert decimal degrees to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    # Haversine formula
    a = math.sin(dlat/2)**2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon/2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))

    return EARTH_RADIUS_NM * c


def finiteOrZero(value: Optional[float]) -> float:
    """Replace NaN, infinity and missing values with 0"""
    if value is None or math.isnan(value) or math.isinf(value):
        return 0.0
    return value


def gallonsToKg(gallons: float) -> float:
    """Convert fuel quantity from US gallons to kilograms (Jet A-1 density)"""
    return gallons * KG_PER_GALLON


def kgToGallons(kg: float) -> float:
    """Convert fuel quantity from kilograms to US gallons"""
    return kg / KG_PER_GALLON


def kgToTonnes(kg: float) -> float:
    """Convert fuel quantity from kilograms to tonnes"""
    return kg / KG_PER_TONNE


def formatCoordinate(value: float, positive: str, negative: str, degree_digits: int) -> str:
    """
    Format a decimal-degree coordinate as '<hemisphere> <degrees> <MM.m>'.

    Minutes are rounded to a tenth before splitting so that 59.96' carries
    into the next whole degree instead of printing as 60.0.
    """
    hemisphere = positive if value >= 0 else negative
    tenths = int(round(abs(value) * MINUTES_PER_DEGREE * 10))
    degrees, minute_tenths = divmod(tenths, MINUTES_PER_DEGREE * 10)
    return f"{hemisphere} {degrees:0{degree_digits}d} {minute_tenths / 10:04.1f}"


def formatLatitude(latitude: float) -> str:
    """Format latitude as N/S DD MM.m"""
    return formatCoordinate(latitude, 'N', 'S', 2)


def formatLongitude(longitude: float) -> str:
    """Format longitude as E/W DDD MM.m"""
    return formatCoordinate(longitude, 'E', 'W', 3)


def formatElapsed(elapsed: timedelta) -> str:
    """Format an elapsed time as HHmm (whole minutes, truncated)"""
    total_minutes = max(0, int(elapsed.total_seconds() // 60))
    hours, minutes = divmod(total_minutes, MINUTES_PER_HOUR)
    return f"{hours:02d}{minutes:02d}"


def toHHmm(time_input: datetime) -> str:
    """Convert a time to HHmm format"""
    return time_input.strftime(TIME_FORMAT_HHMM)


def toOfpDate(time_input: datetime) -> str:
    """Convert a date to the upper-case DDMMMYYYY format used on OFP headers"""
    return f"{time_input.day:02d}{MONTH_ABBREVIATIONS[time_input.month - 1]}{time_input.year:04d}"


def parseTimestamp(value: str, start: datetime) -> datetime:
    """
    Parse a telemetry timestamp.

    Accepts either an ISO-8601 date/time or a number of seconds elapsed
    since ``start``.
    """
    value = value.strip()
    number = numberOrString(value)
    if isinstance(number, float):
        return start + timedelta(seconds=number)
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise ValueError(f"Invalid telemetry timestamp: {value!r}")
    if parsed.tzinfo is None and start.tzinfo is not None:
        parsed = parsed.replace(tzinfo=start.tzinfo)
    return parsed
