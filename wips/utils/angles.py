"""
Angle wrapping and heading utilities.

Provides functions for handling angular quantities used by the zone
classifier. Compass helpers work in degrees on the [0, 360)
circle used by device orientation readings.

Critical for:
- Heading-proxy fingerprints (compass heading instead of field magnitude)
- Normalizing orientation alpha angles to compass degrees
"""

import numpy as np
from typing import Union


def wrap_heading_deg(heading: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Wrap compass heading to [0, 360) degrees.

    Args:
        heading: Heading in degrees (can be any value, e.g. -90 or 725)

    Returns:
        Heading in range [0, 360)

    Example:
        >>> wrap_heading_deg(-90.0)
        270.0
        >>> wrap_heading_deg(725.0)
        5.0
    """
    wrapped = np.mod(heading, 360.0)
    # Tiny negative inputs round up to exactly 360.0
    wrapped = np.where(wrapped >= 360.0, 0.0, wrapped)
    if isinstance(heading, np.ndarray):
        return wrapped
    return float(wrapped)


def heading_diff_deg(heading1: Union[float, np.ndarray],
                     heading2: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Compute the shortest unsigned difference between two compass headings.

    The direct difference d = |h1 - h2| (after wrapping to [0, 360)) is
    compared with the way round the other side of the circle, 360 - d, and
    the smaller one is returned.

    Args:
        heading1: First heading in degrees
        heading2: Second heading in degrees

    Returns:
        Shortest angular distance in [0, 180]

    Example:
        >>> heading_diff_deg(359.0, 1.0)  # across north
        2.0
        >>> heading_diff_deg(90.0, 270.0)  # opposite
        180.0

    Notes:
        Without this, headings either side of north produce huge errors:
        359° vs 1° -> 358° (WRONG!), with heading_diff_deg -> 2° (CORRECT!)
    """
    d = np.abs(np.mod(heading1, 360.0) - np.mod(heading2, 360.0))
    d = np.minimum(d, 360.0 - d)
    if isinstance(d, np.ndarray):
        return d
    return float(d)
