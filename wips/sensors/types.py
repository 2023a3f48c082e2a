"""
Sensor data structures for zone positioning.

This module defines the enumerations and status packets shared by the
motion detector, the sensor sources and the controller.

Primary data structures:
    MotionState: Binary motion classification (MOVING / STATIONARY)
    SensingMode: Meaning of the ``mag`` feature (field magnitude or heading)
    ChannelStatus: Availability and last error of one sensor channel

Author: Navigation Engineer
Date: 2024
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MotionState(str, Enum):
    """Binary motion state derived from the latest accel/gyro magnitudes."""

    MOVING = "MOVING"
    STATIONARY = "STATIONARY"


class SensingMode(str, Enum):
    """
    What the ``mag`` feature of a sample represents.

    MAGNITUDE: ||B|| of the three-axis magnetometer, in μT.
    HEADING: compass heading in degrees [0, 360), used as a proxy when no
             raw magnetometer is available. Needs circular distance.
    """

    MAGNITUDE = "MAGNITUDE"
    HEADING = "HEADING"


# Sample channels, in the order they are stored in feature vectors
CHANNELS = ("mag", "accel", "gyro")


@dataclass(frozen=True)
class ChannelStatus:
    """
    Availability of a single sensor channel.

    Attributes:
        active: True once the channel has produced at least one reading and
                has not failed since.
        error: Advisory message for the last failure or unavailability,
               None when the channel is healthy.
    """

    active: bool = False
    error: Optional[str] = None
