"""
Sensor models and adapters for zone positioning.

Modules:
    types: Motion state, sensing mode and channel status
    motion: Zero-velocity motion gate
    environment: Reduction of three-axis readings and orientation angles
    sources: Modern / Legacy / Simulated sensor sources and probing

Example:
    >>> from wips.sensors import SimulatedSensorSource, detect_motion
    >>> src = SimulatedSensorSource(mag=48.0)
    >>> src.start()
    >>> src.poll()
    {'mag': 48.0, 'accel': 0.0, 'gyro': 0.0}
    >>> detect_motion(accel=0.0, gyro=0.0)
    <MotionState.STATIONARY: 'STATIONARY'>
"""

from .environment import (
    compass_heading_deg,
    vector_magnitude,
)
from .motion import detect_motion, is_stationary
from .sources import (
    LegacySensorSource,
    ModernSensorSource,
    SensorError,
    SensorFallbackWarning,
    SensorSource,
    SimulatedSensorSource,
    select_sensor_source,
)
from .types import CHANNELS, ChannelStatus, MotionState, SensingMode

__all__ = [
    # Types
    "MotionState",
    "SensingMode",
    "ChannelStatus",
    "CHANNELS",
    # Motion gate
    "detect_motion",
    "is_stationary",
    # Reading reductions
    "vector_magnitude",
    "compass_heading_deg",
    # Sources
    "SensorSource",
    "ModernSensorSource",
    "LegacySensorSource",
    "SimulatedSensorSource",
    "SensorError",
    "SensorFallbackWarning",
    "select_sensor_source",
]
