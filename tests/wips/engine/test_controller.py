"""
Unit tests for wips/engine/controller.py.

Tests cover:
    - Level-triggered motion state and prediction on every ingest
    - TRAIN / TRACK modes
    - Recording through the controller and clearing zones
    - Manual signal-strength range
"""

import pytest

from wips.config import ClassifierConfig, WipsConfig
from wips.engine import ControllerSnapshot, Mode, ZoneController
from wips.fingerprinting import EmptyRecordingWarning, Sample
from wips.sensors import (
    LegacySensorSource,
    MotionState,
    SensingMode,
    SimulatedSensorSource,
)


class MsClock:
    """Clock advanced in whole milliseconds so window boundaries are exact."""

    def __init__(self):
        self.ms = 0

    def __call__(self):
        return self.ms / 1000.0

    def advance(self, ms):
        self.ms += ms


@pytest.fixture
def clock():
    return MsClock()


@pytest.fixture
def controller(clock):
    return ZoneController(clock=clock)


def record_zone(controller, clock, zone_id, steps=40):
    """Record a zone with the current sample, ticking every 100 ms."""
    assert controller.start_recording(zone_id)
    for _ in range(steps):
        clock.advance(100)
        result = controller.tick()
        if result is not None:
            return result
    return None


def train_two_zones(controller, clock):
    controller.ingest_sample(mag=50.0, accel=0.0, gyro=0.0, wifi=-60.0)
    record_zone(controller, clock, 1)
    controller.ingest_sample(mag=55.0, wifi=-65.0)
    record_zone(controller, clock, 2)


class TestInitialState:
    def test_defaults(self, controller):
        assert controller.mode is Mode.TRAIN
        assert controller.sample == Sample(wifi=-70.0)
        assert controller.motion_state is MotionState.STATIONARY
        assert controller.prediction is None
        assert controller.recording_zone is None
        assert controller.recording_progress == 0.0
        assert list(controller.fingerprints) == [1, 2, 3]
        assert controller.classifier_config == ClassifierConfig.magnitude()

    def test_for_source_heading(self):
        ctl = ZoneController.for_source(LegacySensorSource(orientation=lambda: 0.0))
        assert ctl.sensing_mode is SensingMode.HEADING
        assert ctl.classifier_config == ClassifierConfig.heading()

    def test_for_source_simulated(self):
        ctl = ZoneController.for_source(SimulatedSensorSource())
        assert ctl.sensing_mode is SensingMode.MAGNITUDE

    def test_custom_zones(self):
        ctl = ZoneController(WipsConfig(zone_names=("Office", "Lab")))
        assert ctl.registry.get(2).name == "Lab"


class TestIngest:
    def test_partial_update_keeps_other_fields(self, controller):
        controller.ingest_sample(mag=48.0)
        controller.ingest_sample({"accel": 0.2})
        assert controller.sample == Sample(mag=48.0, accel=0.2, wifi=-70.0)

    def test_motion_recomputed_each_sample(self, controller):
        controller.ingest_sample(accel=2.0)
        assert controller.motion_state is MotionState.MOVING
        controller.ingest_sample(accel=0.1)
        assert controller.motion_state is MotionState.STATIONARY
        controller.ingest_sample(gyro=0.9)
        assert controller.motion_state is MotionState.MOVING

    def test_empty_update_is_noop(self, controller):
        before = controller.snapshot()
        controller.ingest_sample({})
        assert controller.sample is before.sample

    def test_unknown_field(self, controller):
        with pytest.raises(ValueError, match="Unknown sample field"):
            controller.ingest_sample(rssi=-50.0)

    def test_signal_strength_range(self, controller):
        controller.set_signal_strength(-30)
        assert controller.sample.wifi == -30.0
        controller.set_signal_strength(-90)
        assert controller.sample.wifi == -90.0

        with pytest.raises(ValueError, match="outside"):
            controller.set_signal_strength(-95)
        with pytest.raises(ValueError, match="outside"):
            controller.set_signal_strength(-20)
        assert controller.sample.wifi == -90.0


class TestRecording:
    def test_record_stores_fingerprint(self, controller, clock):
        controller.ingest_sample(mag=48.0, wifi=-55.0)

        result = record_zone(controller, clock, 1)

        assert result.zone_id == 1
        assert result.n_samples == 30
        fp = controller.fingerprints[1]
        assert fp.is_trained
        assert fp.data == Sample(mag=48.0, wifi=-55.0)
        assert controller.recording_zone is None

    def test_progress_reported(self, controller, clock):
        controller.start_recording(2)
        for _ in range(15):
            clock.advance(100)
            controller.tick()
        assert controller.recording_zone == 2
        assert controller.recording_progress == pytest.approx(50.0)

    def test_unknown_zone(self, controller):
        with pytest.raises(ValueError, match="Zone 7 not found"):
            controller.start_recording(7)

    def test_second_start_ignored(self, controller, clock):
        controller.start_recording(1)
        clock.advance(100)
        controller.tick()
        assert not controller.start_recording(2)
        assert controller.recording_zone == 1

    def test_tick_when_idle(self, controller):
        assert controller.tick() is None

    def test_empty_finish(self, controller):
        controller.start_recording(3)
        with pytest.warns(EmptyRecordingWarning):
            result = controller.finish_recording()
        assert result.fingerprint is None
        assert not controller.fingerprints[3].is_trained
        assert controller.recording_zone is None

    def test_cancel(self, controller, clock):
        controller.start_recording(1)
        clock.advance(100)
        controller.tick()
        assert controller.cancel_recording()
        assert controller.recording_zone is None
        assert not controller.fingerprints[1].is_trained

    def test_rerecord_replaces(self, controller, clock):
        controller.ingest_sample(mag=40.0)
        record_zone(controller, clock, 1)
        controller.ingest_sample(mag=44.0)
        record_zone(controller, clock, 1)
        assert controller.fingerprints[1].data.mag == pytest.approx(44.0)


class TestTracking:
    def test_train_mode_never_predicts(self, controller, clock):
        train_two_zones(controller, clock)
        controller.ingest_sample(mag=50.0, wifi=-60.0)
        assert controller.prediction is None

    def test_track_mode_predicts(self, controller, clock):
        train_two_zones(controller, clock)
        controller.set_mode(Mode.TRACK)
        controller.ingest_sample(mag=50.0, wifi=-60.0)

        p = controller.prediction
        assert p.zone_id == 1
        assert p.confidence == 100.0

    def test_set_mode_recomputes(self, controller, clock):
        train_two_zones(controller, clock)
        controller.ingest_sample(mag=55.0, wifi=-65.0)
        controller.set_mode("TRACK")
        assert controller.prediction.zone_id == 2
        controller.set_mode(Mode.TRAIN)
        assert controller.prediction is None

    def test_moving_clears_prediction(self, controller, clock):
        train_two_zones(controller, clock)
        controller.set_mode(Mode.TRACK)
        controller.ingest_sample(mag=50.0, wifi=-60.0)
        assert controller.prediction is not None

        controller.ingest_sample(accel=2.0)
        assert controller.prediction is None

        controller.ingest_sample(accel=0.0)
        assert controller.prediction.zone_id == 1

    def test_out_of_tolerance(self, controller, clock):
        train_two_zones(controller, clock)
        controller.set_mode(Mode.TRACK)
        controller.ingest_sample(mag=70.0, wifi=-60.0)
        assert controller.prediction is None

    def test_clear_zone(self, controller, clock):
        train_two_zones(controller, clock)
        controller.set_mode(Mode.TRACK)
        controller.ingest_sample(mag=50.0, wifi=-60.0)

        controller.clear_zone(1)

        assert not controller.fingerprints[1].is_trained
        assert controller.fingerprints[2].is_trained
        # Zone B score 2*5 + 5 = 15 is not below tolerance
        assert controller.prediction is None

    def test_clear_untrained_zone(self, controller):
        controller.clear_zone(3)
        assert not controller.fingerprints[3].is_trained

    def test_snapshot(self, controller, clock):
        train_two_zones(controller, clock)
        controller.set_mode(Mode.TRACK)
        controller.ingest_sample(mag=55.0, wifi=-65.0)

        snap = controller.snapshot()

        assert isinstance(snap, ControllerSnapshot)
        assert snap.t == pytest.approx(clock())
        assert snap.mode is Mode.TRACK
        assert snap.prediction.zone_id == 2
        assert snap.fingerprints[1].is_trained
