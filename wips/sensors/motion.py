"""
Motion gating for zone classification.

This module implements the instantaneous zero-velocity (ZUPT-style) gate
used before fingerprint matching. Fingerprints are recorded while the
device is held still, so live samples taken during motion are not
comparable with them and classification is suspended.

Unlike a windowed SHOE detector, the gate here is a pure function of the
two latest magnitudes: no window, no hysteresis. It is re-evaluated on
every incoming sample.
"""

from .types import MotionState


def detect_motion(accel: float, gyro: float, threshold: float = 0.5) -> MotionState:
    """
    Classify the device as MOVING or STATIONARY.

    MOVING if:  accel > threshold  OR  gyro > threshold

    Args:
        accel: Linear acceleration magnitude (gravity removed). Units: m/s².
        gyro: Angular rate magnitude. Units: rad/s.
        threshold: Motion threshold applied to both magnitudes.
                   Default 0.5 filters out hand jitter.

    Returns:
        MotionState.MOVING or MotionState.STATIONARY.

    Example:
        >>> detect_motion(0.1, 0.05)
        <MotionState.STATIONARY: 'STATIONARY'>
        >>> detect_motion(2.0, 0.0)  # walking
        <MotionState.MOVING: 'MOVING'>

    Notes:
        - A value exactly equal to the threshold counts as stationary.
        - Both channels are checked independently: rotating in place is
          motion even with zero linear acceleration.
    """
    if accel > threshold or gyro > threshold:
        return MotionState.MOVING
    return MotionState.STATIONARY


def is_stationary(sample, threshold: float = 0.5) -> bool:
    """
    Check whether a sample passes the zero-velocity gate.

    Args:
        sample: Any object with ``accel`` and ``gyro`` attributes
                (typically wips.fingerprinting.Sample).
        threshold: Motion threshold.

    Returns:
        True if the sample is STATIONARY.
    """
    return detect_motion(sample.accel, sample.gyro, threshold) is MotionState.STATIONARY
