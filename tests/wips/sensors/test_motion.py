"""
Unit tests for wips/sensors/motion.py (zero-velocity motion gate).

Tests cover:
    - Threshold boundary (equal counts as stationary)
    - Independent accel and gyro channels
    - Custom thresholds and the sample-based helper
"""

import unittest

import pytest

from wips.fingerprinting import Sample
from wips.sensors import MotionState, detect_motion, is_stationary


class TestDetectMotion(unittest.TestCase):
    """Test suite for detect_motion()."""

    def test_still_device(self) -> None:
        self.assertIs(detect_motion(0.0, 0.0), MotionState.STATIONARY)

    def test_walking(self) -> None:
        self.assertIs(detect_motion(2.0, 1.0), MotionState.MOVING)

    def test_threshold_is_exclusive(self) -> None:
        """A magnitude exactly at the threshold is not motion."""
        self.assertIs(detect_motion(0.5, 0.5), MotionState.STATIONARY)

    def test_just_above_threshold(self) -> None:
        self.assertIs(detect_motion(0.5001, 0.0), MotionState.MOVING)
        self.assertIs(detect_motion(0.0, 0.5001), MotionState.MOVING)

    def test_rotation_alone_is_motion(self) -> None:
        self.assertIs(detect_motion(0.0, 0.8), MotionState.MOVING)

    def test_custom_threshold(self) -> None:
        self.assertIs(detect_motion(0.8, 0.0, threshold=1.0), MotionState.STATIONARY)
        self.assertIs(detect_motion(1.2, 0.0, threshold=1.0), MotionState.MOVING)


@pytest.mark.parametrize("accel", [0.0, 0.3, 0.5, 0.6, 5.0])
@pytest.mark.parametrize("gyro", [0.0, 0.5, 0.7])
def test_moving_iff_either_exceeds(accel, gyro):
    expected = MotionState.MOVING if (accel > 0.5 or gyro > 0.5) else MotionState.STATIONARY
    assert detect_motion(accel, gyro) is expected


def test_is_stationary_reads_sample_fields():
    assert is_stationary(Sample(mag=40.0, accel=0.1, gyro=0.1))
    assert not is_stationary(Sample(mag=40.0, accel=2.0, gyro=0.0))
    assert is_stationary(Sample(accel=2.0), threshold=3.0)
