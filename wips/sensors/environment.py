"""
Environmental and inertial reading reductions.

Sensor adapters deliver three-axis vectors (magnetometer, linear
accelerometer, gyroscope) or orientation angles. The zone engine works on
scalars only, so every reading is reduced here before it becomes a field
of a Sample:

    - Vector magnitude ||v|| for magnetometer / accel / gyro triples
    - Compass heading from an orientation event (alpha angle), degrees in
      [0, 360)
"""

import numpy as np

from ..utils.angles import wrap_heading_deg


def vector_magnitude(v) -> float:
    """
    Euclidean norm of a three-axis reading.

    Args:
        v: Reading vector, shape (3,). Any units (μT, m/s², rad/s).

    Returns:
        ||v|| as a float, same units as the input.

    Raises:
        ValueError: If v does not have shape (3,) or is not finite.

    Example:
        >>> vector_magnitude([3.0, 4.0, 0.0])
        5.0
    """
    v = np.asarray(v, dtype=float)
    if v.shape != (3,):
        raise ValueError(f"reading must have shape (3,), got {v.shape}")
    if not np.all(np.isfinite(v)):
        raise ValueError(f"reading contains non-finite values: {v}")
    return float(np.linalg.norm(v))


def compass_heading_deg(alpha: float) -> float:
    """
    Normalize an orientation alpha angle to a compass heading.

    Orientation events report alpha in degrees; depending on the platform the
    value may be negative or exceed 360.

    Args:
        alpha: Rotation about the vertical axis in degrees.

    Returns:
        Heading in degrees, range [0, 360).

    Raises:
        ValueError: If alpha is not finite.
    """
    alpha = float(alpha)
    if not np.isfinite(alpha):
        raise ValueError(f"alpha must be finite, got {alpha}")
    return wrap_heading_deg(alpha)

