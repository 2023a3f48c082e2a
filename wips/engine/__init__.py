"""
Zone engine: controller state and session driver.

Modules:
    controller: ZoneController owning sample, registry, recording and prediction
    runner: iter_session loop and SimulatedClock for offline replay
"""

from .controller import ControllerSnapshot, Mode, ZoneController
from .runner import SimulatedClock, iter_session

__all__ = [
    "Mode",
    "ZoneController",
    "ControllerSnapshot",
    "SimulatedClock",
    "iter_session",
]
