#!/usr/bin/env python3
"""
Constants for the OFP flight logger
"""

# Flight phase thresholds (ground speed, knots)
AIRBORNE_THRESHOLD_KT = 45.0
TAKEOFF_ROLL_THRESHOLD_KT = 40.0

# Fix matching
DEFAULT_FIX_TOLERANCE_NM = 0.5
WAYPOINT_TOLERANCES_NM = {
    "Airport": 2.0,
    "Intersection": 0.5,
    "VOR": 1.0,
    "NDB": 1.0,
}

# Earth radius in nautical miles (for distance calculations)
EARTH_RADIUS_NM = 3440.065

# Fuel
KG_PER_GALLON = 3.032
KG_PER_TONNE = 1000.0

# Default configuration values
DEFAULT_UNKNOWN_TEXT = "UNKNOWN"
DEFAULT_OUT_PATH = "."
DEFAULT_AIRCRAFT_TITLE = ""
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_TAKEOFF_ROLL_POLL_INTERVAL = 0.2
DEFAULT_SIMULATION_STEP = 2.0
DEFAULT_SLOT_REPEAT_INTERVAL = 1.0

# Passage labels
TAKEOFF_PREFIX = "TAKEOFF"
LANDING_PREFIX = "LANDING"

# OFP report layout
OFP_COLUMN_WIDTHS = [14, 9, 4, 4, 4, 3, 4]
OFP_HEADER_ROWS = [
    ["", "", "", "FL", "MN", "OAT", "AFOB"],
    ["POSITION", "LAT", "ET", "DIS", "TAS", "", ""],
    ["IDENT", "LONG", "ATO", "RDIS", "GS", "", "ABRN"],
]
OFP_NO_FIXES_TEXT = "No GPS fixes were passed during this flight."
OFP_FUEL_ANALYSIS_HEADER = "Leg           Time   Fuel   FF (kg/h)"
OFP_LEG_NAME_WIDTH = 14
OFP_LEG_VALUE_WIDTH = 6
OFP_LEG_ARROW = "→"

# Month abbreviations for the OFP date line (locale independent)
MONTH_ABBREVIATIONS = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)

# Date and time formats
GENERATED_FORMAT = "%Y-%m-%d %H%M"
TIME_FORMAT_HHMM = "%H%M"
FILE_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
SUMMARY_FILE_PATTERN = "flight_{timestamp}_summary.txt"
REPORT_SUFFIX = "_ofp.txt"

# Flight plan (.pln) elements
PLN_FLIGHT_PLAN = "FlightPlan.FlightPlan"
PLN_WAYPOINT = "ATCWaypoint"
PLN_WAYPOINT_TYPE = "ATCWaypointType"
PLN_WORLD_POSITION = "WorldPosition"

# Configuration sections
CONFIG_SECTION_DEFAULTS = "Defaults"
CONFIG_FILE_NAMES = ("ofplog.conf", "ofplog.ini")

# Math constants
SECONDS_PER_HOUR = 3600
MINUTES_PER_HOUR = 60
MINUTES_PER_DEGREE = 60
