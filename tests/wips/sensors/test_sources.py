"""
Unit tests for wips/sensors/sources.py.

Tests cover:
    - Capability probing order and fallback warnings
    - Partial channel availability and per-channel failures
    - Legacy unit conversion (heading proxy, deg/s -> rad/s)
    - Simulator manual controls and trace replay
"""

import numpy as np
import pytest

from wips.sensors import (
    ChannelStatus,
    LegacySensorSource,
    ModernSensorSource,
    SensingMode,
    SensorError,
    SensorFallbackWarning,
    SimulatedSensorSource,
    select_sensor_source,
)
from wips.sim import generate_zone_walk


def _vec(x, y, z):
    return lambda: (x, y, z)


class TestSelectSensorSource:
    """Capability probing: Modern -> Legacy -> Simulated."""

    def test_modern_preferred(self):
        modern = ModernSensorSource(magnetometer=_vec(30.0, 0.0, 40.0))
        legacy = LegacySensorSource(orientation=lambda: 10.0)
        sim = SimulatedSensorSource()

        src = select_sensor_source([sim, legacy, modern])

        assert src is modern
        assert src.started
        assert src.sensing_mode is SensingMode.MAGNITUDE

    def test_fallback_to_legacy_warns(self):
        legacy = LegacySensorSource(orientation=lambda: 10.0)

        with pytest.warns(SensorFallbackWarning, match="modern"):
            src = select_sensor_source(
                [ModernSensorSource(), legacy, SimulatedSensorSource()]
            )

        assert src is legacy
        assert src.sensing_mode is SensingMode.HEADING

    def test_fallback_to_simulator(self):
        with pytest.warns(SensorFallbackWarning, match="using simulated"):
            src = select_sensor_source(
                [ModernSensorSource(), LegacySensorSource(), SimulatedSensorSource()]
            )
        assert src.name == "simulated"

    def test_no_source_available(self):
        with pytest.raises(ValueError, match="No available sensor source"):
            select_sensor_source([ModernSensorSource(), LegacySensorSource()])

    def test_start_false_leaves_source_stopped(self):
        src = select_sensor_source([SimulatedSensorSource()], start=False)
        assert not src.started


class TestModernSensorSource:
    def test_poll_before_start(self):
        src = ModernSensorSource(magnetometer=_vec(1.0, 0.0, 0.0))
        with pytest.raises(RuntimeError, match="not started"):
            src.poll()

    def test_reduces_to_magnitudes(self):
        src = ModernSensorSource(
            magnetometer=_vec(30.0, 0.0, 40.0),
            accelerometer=_vec(0.3, 0.4, 0.0),
            gyroscope=_vec(0.0, 0.0, 0.2),
        )
        src.start()

        updates = src.poll()

        assert updates == pytest.approx({"mag": 50.0, "accel": 0.5, "gyro": 0.2})
        assert src.active
        assert src.errors == {}

    def test_missing_channels_are_reported_not_polled(self):
        src = ModernSensorSource(magnetometer=_vec(0.0, 0.0, 45.0))
        src.start()

        updates = src.poll()

        assert set(updates) == {"mag"}
        assert src.errors == {
            "accel": "LinearAccelerationSensor API unavailable",
            "gyro": "Gyroscope API unavailable",
        }
        assert src.channels["mag"] == ChannelStatus(active=True)

    def test_no_new_reading(self):
        src = ModernSensorSource(magnetometer=lambda: None)
        src.start()
        assert src.poll() == {}
        assert not src.active

    def test_channel_failure_is_advisory(self):
        def broken():
            raise SensorError("permission denied")

        src = ModernSensorSource(magnetometer=_vec(0.0, 0.0, 45.0), gyroscope=broken)
        src.start()

        with pytest.warns(SensorFallbackWarning, match="gyro channel failed"):
            updates = src.poll()

        assert "gyro" not in updates
        assert updates["mag"] == pytest.approx(45.0)
        assert src.errors["gyro"] == "permission denied"

        # A failed channel is not read again
        assert "gyro" not in src.poll()

    def test_other_exceptions_propagate(self):
        def buggy():
            raise KeyError("x")

        src = ModernSensorSource(magnetometer=buggy)
        src.start()
        with pytest.raises(KeyError):
            src.poll()


class TestLegacySensorSource:
    def test_heading_proxy_and_units(self):
        src = LegacySensorSource(
            orientation=lambda: -90.0,
            acceleration=_vec(0.0, 0.6, 0.8),
            rotation_rate=_vec(90.0, 0.0, 0.0),
        )
        src.start()

        updates = src.poll()

        assert updates["mag"] == pytest.approx(270.0)
        assert updates["accel"] == pytest.approx(1.0)
        assert updates["gyro"] == pytest.approx(np.pi / 2)

    def test_unavailable(self):
        src = LegacySensorSource()
        assert not src.is_available()
        src.start()
        assert set(src.errors) == {"mag", "accel", "gyro"}


class TestSimulatedSensorSource:
    def test_manual_controls(self):
        src = SimulatedSensorSource(mag=48.0)
        src.start()
        assert src.poll() == {"mag": 48.0, "accel": 0.0, "gyro": 0.0}

        src.set_mag(60.0)
        src.hold_movement()
        assert src.poll() == {"mag": 60.0, "accel": 2.0, "gyro": 1.0}

        src.release_movement()
        assert src.poll() == {"mag": 60.0, "accel": 0.0, "gyro": 0.0}

    def test_always_available(self):
        assert SimulatedSensorSource().is_available()

    def test_trace_replay(self):
        trace = generate_zone_walk(dwell_s=1.0, transit_s=0.5, seed=0)
        src = SimulatedSensorSource(trace=trace)
        src.start()

        rows = []
        while not src.exhausted:
            rows.append(src.poll())

        assert len(rows) == trace.n_samples
        assert rows[0]["mag"] == pytest.approx(trace.mag[0])
        assert rows[-1]["wifi"] == pytest.approx(trace.wifi[-1])
        assert src.poll() == {}
        assert src.active

    def test_trace_length_mismatch(self):
        class Bad:
            mag = np.zeros(3)
            accel = np.zeros(2)
            gyro = np.zeros(3)

        with pytest.raises(ValueError, match="same length"):
            SimulatedSensorSource(trace=Bad())

    def test_stop(self):
        src = SimulatedSensorSource()
        src.start()
        src.stop()
        with pytest.raises(RuntimeError):
            src.poll()
