"""
Synchronous session driver.

Polls a sensor source and ticks a ZoneController at the recorder cadence.
The loop is single-threaded: source updates, motion gating, recording and
classification all happen in order on every step, so no locking is needed.

For offline replays a SimulatedClock can be passed as both the controller
clock and the sleep function, which makes a session run instantly while
keeping the recording window timing exact.
"""

import time
from typing import Callable, Iterator, Optional

from ..sensors import SensorSource
from .controller import ControllerSnapshot, ZoneController


class SimulatedClock:
    """
    Manually advanced clock.

    Example:
        >>> clock = SimulatedClock()
        >>> clock.sleep(0.1)
        >>> clock()
        0.1
    """

    def __init__(self, t0: float = 0.0):
        self.now = float(t0)

    def __call__(self) -> float:
        return self.now

    def sleep(self, dt: float) -> None:
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        self.now += dt


def iter_session(
    controller: ZoneController,
    source: SensorSource,
    duration_s: Optional[float] = None,
    interval_s: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[ControllerSnapshot]:
    """
    Run the acquisition loop, yielding a snapshot after every step.

    Each step: poll the source -> ingest -> tick -> snapshot -> sleep.

    Args:
        controller: Controller to drive. Its clock is used for timing.
        source: Started sensor source.
        duration_s: Stop after this many seconds (None = until the source
                    is exhausted or the caller stops iterating).
        interval_s: Step interval. Defaults to the recorder cadence.
        sleep: Sleep function (SimulatedClock.sleep for offline replay).

    Yields:
        ControllerSnapshot after each step.
    """
    if interval_s is None:
        interval_s = controller.config.recorder.interval_ms / 1000.0
    if interval_s <= 0:
        raise ValueError(f"interval_s must be positive, got {interval_s}")

    clock = controller.clock
    t_start = clock()
    while True:
        if duration_s is not None and clock() - t_start >= duration_s:
            return
        if getattr(source, "exhausted", False):
            return

        updates = source.poll()
        if updates:
            controller.ingest_sample(updates)
        controller.tick()
        yield controller.snapshot()
        sleep(interval_s)
