"""
Pytest configuration and shared fixtures for OFP flight logger tests
"""
import pytest
from datetime import datetime, timezone

from ofp_clock import ManualClock
from ofp_model import FlightPlanMeta, Position, TelemetrySample


LGRP = Position(36.405278, 28.086111)
ESSA = Position(59.651944, 17.918611)
VANES = Position(37.0, 27.5)


@pytest.fixture
def start_time():
    return datetime(2025, 7, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(start_time):
    """Manual clock starting on 15 July 2025, 10:00Z"""
    return ManualClock(start_time)


@pytest.fixture
def make_sample():
    """Factory for telemetry samples with sensible cruise values"""
    def _make_sample(position=LGRP, ground_speed=0.0, altitude=1000.0, fuel=8800.0, **kwargs):
        values = dict(
            position=position,
            ground_speed=ground_speed,
            true_airspeed=ground_speed + 5,
            mach=0.5,
            altitude=altitude,
            heading=90.0,
            outside_air_temperature=-10.0,
            fuel_quantity=fuel,
            fuel_capacity=10000.0,
            fuel_flow=2400.0,
            fuel_burned=8800.0 - fuel,
            aircraft_title='Test Aircraft',
        )
        values.update(kwargs)
        return TelemetrySample(**values)
    return _make_sample


@pytest.fixture
def plan_meta():
    return FlightPlanMeta(
        departure_code='LGRP',
        destination_code='ESSA',
        departure_name='DIAGORAS',
        destination_name='ARLANDA',
        cruising_altitude=35000,
    )


@pytest.fixture
def sample_pln_content():
    """Sample MSFS flight plan from Rhodes to Stockholm"""
    return """<?xml version="1.0" encoding="UTF-8"?>
<SimBase.Document Type="AceXML" version="1,0">
    <Descr>AceXML Document</Descr>
    <FlightPlan.FlightPlan>
        <Title>LGRP to ESSA</Title>
        <FPType>IFR</FPType>
        <RouteType>HighAlt</RouteType>
        <CruisingAlt>35000.000</CruisingAlt>
        <DepartureID>LGRP</DepartureID>
        <DepartureName>DIAGORAS</DepartureName>
        <DestinationID>ESSA</DestinationID>
        <DestinationName>ARLANDA</DestinationName>
        <ATCWaypoint id="LGRP">
            <ATCWaypointType>Airport</ATCWaypointType>
            <WorldPosition>N36° 24' 19.00",E28° 5' 10.00",+000019.00</WorldPosition>
        </ATCWaypoint>
        <ATCWaypoint id="VANES">
            <ATCWaypointType>Intersection</ATCWaypointType>
            <WorldPosition>N37° 0' 0.00",E27° 30' 0.00",+035000.00</WorldPosition>
        </ATCWaypoint>
        <ATCWaypoint id="ESSA">
            <ATCWaypointType>Airport</ATCWaypointType>
            <WorldPosition>N59° 39' 7.00",E17° 55' 7.00",+000138.00</WorldPosition>
        </ATCWaypoint>
    </FlightPlan.FlightPlan>
</SimBase.Document>
"""


@pytest.fixture
def sample_pln_file(tmp_path, sample_pln_content):
    """Create a temporary flight plan file for testing"""
    pln_file = tmp_path / "LGRPESSA.pln"
    pln_file.write_text(sample_pln_content, encoding='utf-8')
    return pln_file


@pytest.fixture
def sample_telemetry_content():
    """Telemetry for a short LGRP-ESSA flight, times in seconds from start"""
    header = ("time,latitude,longitude,ground_speed,true_airspeed,mach,altitude,heading,"
              "oat,fuel_kg,fuel_capacity_kg,fuel_flow,fuel_burned,aircraft")
    rows = [
        "0,36.405278,28.086111,10,,,19,0,,8800,10000,800,0,Test 737",
        "60,36.405278,28.086111,42,,,19,0,,8795,10000,2400,5,Test 737",
        "120,36.405278,28.086111,90,95,0.14,50,0,20,8790,10000,2600,10,Test 737",
        "600,36.7,27.8,300,310,0.52,15000,315,-5,8600,10000,2400,200,Test 737",
        "1200,37.0,27.5,300,460,0.78,35000,315,-50,8400,10000,2400,400,Test 737",
        "7200,59.651944,17.918611,140,145,0.22,2000,330,5,7400,10000,1800,1400,Test 737",
        "7260,59.651944,17.918611,30,35,0.05,138,330,10,7390,10000,600,1410,Test 737",
        "7320,59.651944,17.918611,10,12,0.02,138,330,10,7388,10000,400,1412,Test 737",
    ]
    return '\n'.join([header] + rows) + '\n'


@pytest.fixture
def sample_telemetry_file(tmp_path, sample_telemetry_content):
    """Create a temporary telemetry CSV file for testing"""
    telemetry_file = tmp_path / "test_flight.csv"
    telemetry_file.write_text(sample_telemetry_content, encoding='utf-8')
    return telemetry_file


@pytest.fixture
def sample_config_content():
    """Sample configuration file content"""
    return """[Defaults]
Aircraft = Test Aircraft - Boeing 737-800
OutPath = .
FlightPlan =
PollInterval = 2
TakeoffRollPollInterval = 0.5
Realtime = no
"""


@pytest.fixture
def sample_config_file(tmp_path, sample_config_content):
    """Create a temporary config file for testing"""
    config_file = tmp_path / "test_config.conf"
    config_file.write_text(sample_config_content, encoding='utf-8')
    return config_file


@pytest.fixture
def temp_output_dir(tmp_path):
    """Create a temporary output directory"""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


@pytest.fixture
def mock_cli_args(sample_config_file, sample_pln_file, temp_output_dir):
    """Mock command-line arguments for testing"""
    class MockArgs:
        def __init__(self):
            self.config = str(sample_config_file)
            self.aircraft = None
            self.flightplan = str(sample_pln_file)
            self.output = str(temp_output_dir)
            self.realtime = None
            self.simulate = False
            self.telemetry = []

    return MockArgs()
