"""
Tests for ofp_telemetry.py telemetry sources
"""
import pytest
import math
import threading
import time
from io import StringIO
from datetime import datetime, timedelta, timezone
from ofp_telemetry import (
    CsvTelemetrySource,
    SampleSlot,
    SimulatedTelemetrySource,
    SlotTelemetrySource,
    SIMULATED_FLIGHT_PATH,
)
from ofp_model import Position, TelemetrySample


class TestCsvTelemetrySource:
    """Tests for CsvTelemetrySource"""

    def test_reads_samples(self, sample_telemetry_content, clock, start_time):
        source = CsvTelemetrySource(StringIO(sample_telemetry_content), clock)
        samples = list(source)
        assert len(samples) == 8
        assert samples[2].ground_speed == 90
        assert samples[2].true_airspeed == 95
        assert samples[2].fuel_quantity == 8790
        assert samples[2].aircraft_title == "Test 737"
        assert clock.now() == start_time + timedelta(seconds=7320)

    def test_clock_follows_samples(self, sample_telemetry_content, clock, start_time):
        source = CsvTelemetrySource(StringIO(sample_telemetry_content), clock)
        source.poll()
        assert clock.now() == start_time
        source.poll()
        assert clock.now() == start_time + timedelta(seconds=60)

    def test_blank_airdata_is_nan(self, sample_telemetry_content, clock):
        sample = CsvTelemetrySource(StringIO(sample_telemetry_content), clock).poll()
        assert math.isnan(sample.true_airspeed)
        assert math.isnan(sample.mach)
        assert math.isnan(sample.outside_air_temperature)

    def test_fuel_in_gallons(self, clock):
        content = ("time,latitude,longitude,ground_speed,fuel_gal,fuel_capacity_gal\n"
                   "0,59.65,17.92,0,1000,2000\n")
        sample = CsvTelemetrySource(StringIO(content), clock).poll()
        assert sample.fuel_quantity == pytest.approx(3032.0)
        assert sample.fuel_capacity == pytest.approx(6064.0)
        assert sample.fuel_remaining_percentage == pytest.approx(50.0)

    def test_iso_timestamps(self, clock):
        content = ("time,latitude,longitude,ground_speed\n"
                   "2025-07-15T12:00:00Z,59.65,17.92,0\n")
        CsvTelemetrySource(StringIO(content), clock).poll()
        assert clock.now() == datetime(2025, 7, 15, 12, 0, tzinfo=timezone.utc)

    def test_rows_without_position_skipped(self, clock):
        content = ("time,latitude,longitude,ground_speed\n"
                   "0,,17.92,0\n"
                   "5,59.65,17.92,12\n")
        samples = list(CsvTelemetrySource(StringIO(content), clock))
        assert [sample.ground_speed for sample in samples] == [12]

    def test_invalid_rows_skipped(self, clock):
        content = ("time,latitude,longitude,ground_speed\n"
                   "0,59.65,17.92,fast\n"
                   "later,59.65,17.92,5\n"
                   "10,59.65,17.92,12\n")
        samples = list(CsvTelemetrySource(StringIO(content), clock))
        assert [sample.ground_speed for sample in samples] == [12]

    def test_time_going_backwards_skipped(self, clock):
        content = ("time,latitude,longitude,ground_speed\n"
                   "10,59.65,17.92,5\n"
                   "5,59.65,17.92,6\n"
                   "15,59.65,17.92,7\n")
        samples = list(CsvTelemetrySource(StringIO(content), clock))
        assert [sample.ground_speed for sample in samples] == [5, 7]

    def test_missing_columns(self, clock):
        with pytest.raises(ValueError):
            CsvTelemetrySource(StringIO("time,latitude\n0,59.65\n"), clock)

    def test_default_aircraft_title(self, clock):
        content = "time,latitude,longitude,ground_speed\n0,59.65,17.92,0\n"
        sample = CsvTelemetrySource(StringIO(content), clock, "Fallback").poll()
        assert sample.aircraft_title == "Fallback"


class TestSimulatedTelemetrySource:
    """Tests for SimulatedTelemetrySource"""

    def test_plays_whole_path(self, clock, start_time):
        samples = list(SimulatedTelemetrySource(clock))
        assert len(samples) == len(SIMULATED_FLIGHT_PATH)
        assert clock.now() == start_time + timedelta(seconds=2 * (len(SIMULATED_FLIGHT_PATH) - 1))

    def test_first_sample_at_start(self, clock, start_time):
        sample = SimulatedTelemetrySource(clock).poll()
        assert clock.now() == start_time
        assert sample.position == Position(48.1103, 16.5697)
        assert sample.fuel_burned == 0

    def test_flight_profile(self, clock):
        speeds = [sample.ground_speed for sample in SimulatedTelemetrySource(clock)]
        assert speeds[0] < 40
        assert max(speeds) > 45
        assert speeds[-1] < 45

    def test_custom_path_and_step(self, clock, start_time):
        source = SimulatedTelemetrySource(clock, step_seconds=10,
                                          path=[(0, 0, 100, 10, 0, 0), (0, 0.1, 99, 80, 500, 90)])
        samples = list(source)
        assert samples[1].fuel_burned == 1
        assert clock.now() == start_time + timedelta(seconds=10)
        assert source.poll() is None


class TestSampleSlot:
    """Tests for the single-slot sample handoff"""

    def test_last_value_wins(self):
        slot = SampleSlot()
        slot.publish(TelemetrySample(ground_speed=10))
        slot.publish(TelemetrySample(ground_speed=20))
        assert slot.take().ground_speed == 20
        assert slot.take() is None

    def test_publish_from_thread(self):
        slot = SampleSlot()
        worker = threading.Thread(target=lambda: slot.publish(TelemetrySample(ground_speed=99)))
        worker.start()
        worker.join()
        assert slot.take().ground_speed == 99

    def test_take_waits_for_publish(self):
        slot = SampleSlot()
        publisher = threading.Timer(0.05, slot.publish, [TelemetrySample(ground_speed=77)])
        publisher.start()
        try:
            assert slot.take(timeout=5).ground_speed == 77
        finally:
            publisher.cancel()

    def test_take_times_out(self):
        slot = SampleSlot()
        started = time.monotonic()
        assert slot.take(timeout=0.05) is None
        assert time.monotonic() - started >= 0.04

    def test_close_wakes_reader(self):
        slot = SampleSlot()
        closer = threading.Timer(0.05, slot.close)
        closer.start()
        try:
            assert slot.take(timeout=None) is None
        finally:
            closer.cancel()
        assert slot.closed


class TestSlotTelemetrySource:
    """Tests for SlotTelemetrySource"""

    def test_first_poll_waits_for_acquisition(self):
        slot = SampleSlot()
        source = SlotTelemetrySource(slot)
        publisher = threading.Timer(0.05, slot.publish, [TelemetrySample(ground_speed=50)])
        publisher.start()
        try:
            assert source.poll().ground_speed == 50
        finally:
            publisher.cancel()

    def test_repeats_last_sample(self):
        slot = SampleSlot()
        source = SlotTelemetrySource(slot, repeat_interval=0.01)
        slot.publish(TelemetrySample(ground_speed=50))
        assert source.poll().ground_speed == 50
        assert source.poll().ground_speed == 50

    def test_repeat_waits_between_polls(self):
        slot = SampleSlot()
        source = SlotTelemetrySource(slot, repeat_interval=0.05)
        slot.publish(TelemetrySample(ground_speed=50))
        source.poll()
        started = time.monotonic()
        assert source.poll().ground_speed == 50
        assert time.monotonic() - started >= 0.04

    def test_closed_before_any_sample(self):
        slot = SampleSlot()
        slot.close()
        assert SlotTelemetrySource(slot).poll() is None

    def test_pending_sample_delivered_after_close(self):
        slot = SampleSlot()
        source = SlotTelemetrySource(slot)
        slot.publish(TelemetrySample(ground_speed=30))
        slot.close()
        assert source.poll().ground_speed == 30
        assert source.poll() is None
