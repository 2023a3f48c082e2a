"""
Sensor sources: environment adapters producing normalized sample fields.

Three acquisition strategies are modelled behind one interface:

    - ModernSensorSource: generic three-axis sensors (magnetometer, linear
      accelerometer, gyroscope). The ``mag`` field is the field magnitude.
    - LegacySensorSource: orientation and motion events. The ``mag`` field is
      the compass heading (heading-proxy mode).
    - SimulatedSensorSource: manual inputs or replay of a simulated trace.

All of them report partial updates: a channel that never produces a reading
simply never appears in poll(), so the consumer keeps its previous value.
Channel failures are advisory; they are recorded in the channel status and
reported with a SensorFallbackWarning, never raised to the caller.

Capability probing picks the best available source in the fixed order
Modern -> Legacy -> Simulated (see select_sensor_source).
"""

import warnings
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Sequence

import numpy as np

from .environment import compass_heading_deg, vector_magnitude
from .types import CHANNELS, ChannelStatus, SensingMode


# A reader returns the latest reading, or None if nothing new arrived
VectorReader = Callable[[], Optional[Sequence[float]]]
ScalarReader = Callable[[], Optional[float]]

# Values the simulator uses while "hold to simulate movement" is pressed
SIM_MOVING_ACCEL = 2.0
SIM_MOVING_GYRO = 1.0


class SensorError(RuntimeError):
    """Raised by a reader when its sensor fails (permission, hardware, ...)."""


class SensorFallbackWarning(UserWarning):
    """A sensor channel failed or a lower-capability source was selected."""


class SensorSource(ABC):
    """
    Abstract base class for sensor sources.

    Subclasses define which channels they can serve and how a raw reading is
    reduced to a scalar. The base class owns the channel status bookkeeping.

    Attributes:
        name: Short identifier used in advisory messages.
        priority: Probing order, lower is preferred.
        sensing_mode: Meaning of the ``mag`` field produced by this source.
    """

    name = "abstract"
    priority = 99
    sensing_mode = SensingMode.MAGNITUDE

    def __init__(self):
        self._channels: Dict[str, ChannelStatus] = {ch: ChannelStatus() for ch in CHANNELS}
        self._started = False

    @abstractmethod
    def is_available(self) -> bool:
        """Capability probe: can this source serve the magnetic channel?"""
        pass

    @abstractmethod
    def _read_channel(self, channel: str) -> Optional[float]:
        """
        Read one channel.

        Returns:
            Scalar reading, or None if no new reading is available.

        Raises:
            SensorError: If the channel failed.
        """
        pass

    def _unavailable_channels(self) -> Dict[str, str]:
        """Channels that cannot be served, mapped to an advisory message."""
        return {}

    def start(self) -> None:
        """Start acquisition; channels that cannot be served are marked with an error."""
        for channel, message in self._unavailable_channels().items():
            self._channels[channel] = ChannelStatus(active=False, error=message)
        self._started = True

    def stop(self) -> None:
        """Stop acquisition."""
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def channels(self) -> Dict[str, ChannelStatus]:
        """Per-channel status (copy)."""
        return dict(self._channels)

    @property
    def active(self) -> bool:
        """True once the magnetic channel delivers real readings."""
        return self._channels["mag"].active

    @property
    def errors(self) -> Dict[str, str]:
        """Advisory messages of failed or unavailable channels."""
        return {ch: st.error for ch, st in self._channels.items() if st.error is not None}

    def _fail(self, channel: str, message: str) -> None:
        self._channels[channel] = ChannelStatus(active=False, error=message)
        warnings.warn(
            f"{self.name}: {channel} channel failed ({message}); "
            f"keeping last known value",
            SensorFallbackWarning,
            stacklevel=3,
        )

    def poll(self) -> Dict[str, float]:
        """
        Collect the latest readings of all healthy channels.

        Returns:
            Dict mapping field name to scalar value for every channel that
            produced a reading. Missing keys mean "keep the previous value".

        Raises:
            RuntimeError: If the source has not been started.
        """
        if not self._started:
            raise RuntimeError(f"{self.name} source not started. Call start() first.")

        updates: Dict[str, float] = {}
        for channel in CHANNELS:
            if self._channels[channel].error is not None:
                continue
            try:
                value = self._read_channel(channel)
            except SensorError as e:
                self._fail(channel, str(e))
                continue
            if value is None:
                continue
            updates[channel] = value
            self._channels[channel] = ChannelStatus(active=True)
        return updates

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mode={self.sensing_mode.value}, started={self._started})"


class ModernSensorSource(SensorSource):
    """
    Generic-sensor adapter (three-axis magnetometer, linear accel, gyroscope).

    Each reader returns an (x, y, z) reading or None. Readings are reduced to
    magnitudes, so ``mag`` is ||B|| in μT, ``accel`` is ||a|| in m/s² with
    gravity removed and ``gyro`` is ||ω|| in rad/s.

    Args:
        magnetometer: Reader for the magnetic field vector.
        accelerometer: Reader for the linear acceleration vector.
        gyroscope: Reader for the angular velocity vector.

    Example:
        >>> src = ModernSensorSource(magnetometer=lambda: (30.0, 0.0, 40.0))
        >>> src.start()
        >>> src.poll()
        {'mag': 50.0}
    """

    name = "modern"
    priority = 0
    sensing_mode = SensingMode.MAGNITUDE

    _LABELS = {
        "mag": "Magnetometer",
        "accel": "LinearAccelerationSensor",
        "gyro": "Gyroscope",
    }

    def __init__(
        self,
        magnetometer: Optional[VectorReader] = None,
        accelerometer: Optional[VectorReader] = None,
        gyroscope: Optional[VectorReader] = None,
    ):
        super().__init__()
        self._readers = {"mag": magnetometer, "accel": accelerometer, "gyro": gyroscope}

    def is_available(self) -> bool:
        return self._readers["mag"] is not None

    def _unavailable_channels(self) -> Dict[str, str]:
        return {
            ch: f"{self._LABELS[ch]} API unavailable"
            for ch, reader in self._readers.items()
            if reader is None
        }

    def _read_channel(self, channel: str) -> Optional[float]:
        reading = self._readers[channel]()
        if reading is None:
            return None
        return vector_magnitude(reading)


class LegacySensorSource(SensorSource):
    """
    Orientation/motion event adapter (heading-proxy mode).

    ``mag`` is the compass heading from the orientation alpha angle, in
    degrees [0, 360). ``accel`` is the magnitude of the acceleration vector
    (gravity removed, m/s²). ``gyro`` is the magnitude of the rotation rate,
    converted from deg/s to rad/s so the motion threshold keeps one meaning
    across sources.

    Args:
        orientation: Reader returning alpha in degrees, or None.
        acceleration: Reader returning (x, y, z) acceleration, or None.
        rotation_rate: Reader returning (alpha, beta, gamma) rates in deg/s.
    """

    name = "legacy"
    priority = 1
    sensing_mode = SensingMode.HEADING

    def __init__(
        self,
        orientation: Optional[ScalarReader] = None,
        acceleration: Optional[VectorReader] = None,
        rotation_rate: Optional[VectorReader] = None,
    ):
        super().__init__()
        self._readers = {"mag": orientation, "accel": acceleration, "gyro": rotation_rate}

    def is_available(self) -> bool:
        return self._readers["mag"] is not None

    def _unavailable_channels(self) -> Dict[str, str]:
        labels = {"mag": "Orientation events", "accel": "Motion events", "gyro": "Motion events"}
        return {
            ch: f"{labels[ch]} unavailable"
            for ch, reader in self._readers.items()
            if reader is None
        }

    def _read_channel(self, channel: str) -> Optional[float]:
        reading = self._readers[channel]()
        if reading is None:
            return None
        if channel == "mag":
            return compass_heading_deg(reading)
        if channel == "gyro":
            return float(np.deg2rad(vector_magnitude(reading)))
        return vector_magnitude(reading)


class SimulatedSensorSource(SensorSource):
    """
    Manual / simulated input, always available.

    Two ways to drive it:
        - Manual: set_mag() and hold_movement() / release_movement(), the
          equivalents of the simulator slider and the "hold to simulate
          movement" button.
        - Replay: pass a trace (e.g. wips.sim.ZoneWalkTrace); each poll()
          returns the next row, including ``wifi`` when the trace has it.

    Args:
        mag: Initial magnetic value.
        trace: Optional object with ``mag``, ``accel``, ``gyro`` arrays
               (and optionally ``wifi``) of equal length.
    """

    name = "simulated"
    priority = 2
    sensing_mode = SensingMode.MAGNITUDE

    def __init__(self, mag: float = 0.0, trace=None):
        super().__init__()
        self._values = {"mag": float(mag), "accel": 0.0, "gyro": 0.0}
        self._trace = trace
        self._index = 0
        if trace is not None:
            n = len(trace.mag)
            if len(trace.accel) != n or len(trace.gyro) != n:
                raise ValueError("trace mag, accel and gyro must have the same length")

    def is_available(self) -> bool:
        return True

    @property
    def exhausted(self) -> bool:
        """True when a replayed trace has no rows left."""
        return self._trace is not None and self._index >= len(self._trace.mag)

    def set_mag(self, value: float) -> None:
        self._values["mag"] = float(value)

    def hold_movement(self) -> None:
        self._values["accel"] = SIM_MOVING_ACCEL
        self._values["gyro"] = SIM_MOVING_GYRO

    def release_movement(self) -> None:
        self._values["accel"] = 0.0
        self._values["gyro"] = 0.0

    def _read_channel(self, channel: str) -> Optional[float]:
        return self._values[channel]

    def poll(self) -> Dict[str, float]:
        if self._trace is None:
            return super().poll()
        if not self._started:
            raise RuntimeError(f"{self.name} source not started. Call start() first.")
        if self.exhausted:
            return {}

        i = self._index
        self._index += 1
        updates = {ch: float(getattr(self._trace, ch)[i]) for ch in CHANNELS}
        wifi = getattr(self._trace, "wifi", None)
        if wifi is not None:
            updates["wifi"] = float(wifi[i])
        for ch in CHANNELS:
            self._channels[ch] = ChannelStatus(active=True)
        return updates


def select_sensor_source(candidates: Sequence[SensorSource], start: bool = True) -> SensorSource:
    """
    Pick the best available sensor source.

    Candidates are probed in priority order (Modern, Legacy, Simulated)
    regardless of the order given. Falling back past a higher-priority
    candidate emits a SensorFallbackWarning.

    Args:
        candidates: Sources to probe.
        start: Start the selected source before returning it.

    Returns:
        The first available source.

    Raises:
        ValueError: If no candidate is available.

    Example:
        >>> src = select_sensor_source([ModernSensorSource(), SimulatedSensorSource()])
        >>> src.name  # magnetometer missing -> simulator, with a warning
        'simulated'
    """
    ordered = sorted(candidates, key=lambda s: s.priority)
    skipped = []
    for source in ordered:
        if source.is_available():
            if skipped:
                warnings.warn(
                    f"{', '.join(skipped)} sensor source(s) unavailable; "
                    f"using {source.name}",
                    SensorFallbackWarning,
                    stacklevel=2,
                )
            if start:
                source.start()
            return source
        skipped.append(source.name)

    raise ValueError(
        f"No available sensor source among: {[s.name for s in ordered]}"
    )
