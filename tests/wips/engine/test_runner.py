"""
Unit tests for wips/engine/runner.py (session loop and simulated clock).
"""

import pytest

from wips.engine import Mode, SimulatedClock, ZoneController, iter_session
from wips.fingerprinting import Sample
from wips.sensors import MotionState, SimulatedSensorSource
from wips.sim import generate_zone_walk


class TestSimulatedClock:
    def test_advance(self):
        clock = SimulatedClock(t0=5.0)
        clock.sleep(0.5)
        assert clock() == pytest.approx(5.5)
        assert clock.now == pytest.approx(5.5)

    def test_negative_sleep(self):
        with pytest.raises(ValueError):
            SimulatedClock().sleep(-1.0)


class TestIterSession:
    def test_duration_limit(self):
        clock = SimulatedClock()
        ctl = ZoneController(clock=clock)
        src = SimulatedSensorSource(mag=48.0)
        src.start()

        snaps = list(iter_session(ctl, src, duration_s=1.0, sleep=clock.sleep))

        assert 10 <= len(snaps) <= 11
        assert snaps[-1].sample.mag == 48.0

    def test_invalid_interval(self):
        clock = SimulatedClock()
        src = SimulatedSensorSource()
        src.start()
        with pytest.raises(ValueError, match="interval_s"):
            next(iter_session(ZoneController(clock=clock), src, interval_s=0.0, sleep=clock.sleep))

    def test_manual_recording_through_loop(self):
        clock = SimulatedClock()
        ctl = ZoneController(clock=clock)
        src = SimulatedSensorSource(mag=48.0)
        src.start()
        ctl.set_signal_strength(-55)

        ctl.start_recording(1)
        for snap in iter_session(ctl, src, duration_s=3.5, sleep=clock.sleep):
            pass

        fp = ctl.fingerprints[1]
        assert fp.is_trained
        assert fp.data.mag == pytest.approx(48.0)
        assert fp.data.wifi == pytest.approx(-55.0)

    def test_hold_movement_gates_prediction(self):
        clock = SimulatedClock()
        ctl = ZoneController(clock=clock)
        ctl.registry.set_fingerprint(1, Sample(mag=48.0, wifi=-55.0))
        ctl.set_mode(Mode.TRACK)

        src = SimulatedSensorSource(mag=48.0)
        src.start()
        ctl.ingest_sample(wifi=-55.0)
        session = iter_session(ctl, src, sleep=clock.sleep)

        snap = next(session)
        assert snap.motion_state is MotionState.STATIONARY
        assert snap.prediction.zone_id == 1

        src.hold_movement()
        snap = next(session)
        assert snap.motion_state is MotionState.MOVING
        assert snap.prediction is None

        src.release_movement()
        snap = next(session)
        assert snap.prediction.zone_id == 1


def test_train_then_track_replay():
    """Record every zone from one walk, then track a second walk."""
    clock = SimulatedClock()
    ctl = ZoneController(clock=clock)

    train = generate_zone_walk(visits=[1, 2, 3], dwell_s=6.0, transit_s=2.0, seed=1)
    src = SimulatedSensorSource(trace=train)
    src.start()
    starts = {start + 10: zone_id for zone_id, start, _ in train.dwell_segments()}
    for i, _ in enumerate(iter_session(ctl, src, sleep=clock.sleep)):
        if i in starts:
            assert ctl.start_recording(starts[i])

    assert [fp.zone_id for fp in ctl.registry.trained()] == [1, 2, 3]
    for zone_id in (1, 2, 3):
        data = ctl.fingerprints[zone_id].data
        assert data.accel < 0.5
        assert data.gyro < 0.5

    ctl.set_mode(Mode.TRACK)
    track = generate_zone_walk(dwell_s=6.0, transit_s=2.0, seed=2)
    src = SimulatedSensorSource(trace=track)
    src.start()

    n_dwell = n_correct = 0
    for i, snap in enumerate(iter_session(ctl, src, sleep=clock.sleep)):
        truth = int(track.zone_truth[i])
        if truth == 0:
            # Walking between zones is always gated
            assert snap.motion_state is MotionState.MOVING
            assert snap.prediction is None
            continue
        n_dwell += 1
        if snap.prediction is not None and snap.prediction.zone_id == truth:
            n_correct += 1

    assert n_correct / n_dwell > 0.9
