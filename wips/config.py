"""Configuration for the zone fingerprinting engine.

All tunable constants live in small frozen dataclasses with classmethod
presets, so that a complete setup can be written to and read back from a
JSON file next to the recorded data.

Author: Navigation Engineer
Date: 2024
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from .sensors.types import SensingMode


DEFAULT_ZONE_NAMES = (
    "Zone 1 (Desk)",
    "Zone 2 (Kitchen)",
    "Zone 3 (Hallway)",
)


@dataclass(frozen=True)
class MotionConfig:
    """
    Motion gate parameters.

    Attributes:
        threshold: Accel or gyro magnitude above which the device counts as
                   MOVING. Same units as the incoming magnitudes
                   (m/s² linear acceleration, rad/s angular rate).
    """

    threshold: float = 0.5

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ValueError(f"threshold must be non-negative, got {self.threshold}")


@dataclass(frozen=True)
class RecorderConfig:
    """
    Fingerprint recording window.

    Attributes:
        window_ms: Length of one recording window in milliseconds.
        interval_ms: Sampling cadence inside the window in milliseconds.
    """

    window_ms: float = 3000.0
    interval_ms: float = 100.0

    def __post_init__(self) -> None:
        if self.window_ms <= 0:
            raise ValueError(f"window_ms must be positive, got {self.window_ms}")
        if self.interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {self.interval_ms}")
        if self.interval_ms > self.window_ms:
            raise ValueError(
                f"interval_ms ({self.interval_ms}) must not exceed "
                f"window_ms ({self.window_ms})"
            )

    @property
    def expected_ticks(self) -> float:
        """Number of sampling ticks in one full window."""
        return self.window_ms / self.interval_ms


@dataclass(frozen=True)
class ClassifierConfig:
    """
    Weighted-distance classifier constants.

    The score against a fingerprint f is
        score = mag_weight * |z.mag - f.mag| + wifi_weight * |z.wifi - f.wifi|
    with the magnetic term measured around the circle when circular_mag is
    set. A zone is accepted when score < tolerance and reported with
    confidence = max(0, 100 - score * confidence_scale).

    Attributes:
        mag_weight: Weight of the magnetic difference.
        wifi_weight: Weight of the signal-strength difference.
        tolerance: Strict upper bound on the accepted score.
        confidence_scale: Confidence points lost per unit of score.
        circular_mag: Treat ``mag`` as a compass heading in degrees.
        mode: Sensing mode the constants were tuned for.
    """

    mag_weight: float = 2.0
    wifi_weight: float = 1.0
    tolerance: float = 15.0
    confidence_scale: float = 5.0
    circular_mag: bool = False
    mode: SensingMode = SensingMode.MAGNITUDE

    def __post_init__(self) -> None:
        if self.mag_weight < 0 or self.wifi_weight < 0:
            raise ValueError(
                f"weights must be non-negative, got mag_weight={self.mag_weight}, "
                f"wifi_weight={self.wifi_weight}"
            )
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        if self.confidence_scale < 0:
            raise ValueError(
                f"confidence_scale must be non-negative, got {self.confidence_scale}"
            )

    @classmethod
    def magnitude(cls) -> "ClassifierConfig":
        """Constants for true field-magnitude sensing (magnetometer available)."""
        return cls(
            mag_weight=2.0,
            wifi_weight=1.0,
            tolerance=15.0,
            confidence_scale=5.0,
            circular_mag=False,
            mode=SensingMode.MAGNITUDE,
        )

    @classmethod
    def heading(cls) -> "ClassifierConfig":
        """
        Constants for the compass-heading proxy.

        A heading is a much coarser location signature than ||B||, so the
        magnetic term is weighted down and the tolerance widened.
        """
        return cls(
            mag_weight=1.0,
            wifi_weight=1.0,
            tolerance=40.0,
            confidence_scale=2.0,
            circular_mag=True,
            mode=SensingMode.HEADING,
        )

    @classmethod
    def for_mode(cls, mode: SensingMode) -> "ClassifierConfig":
        """Preset matching a sensing mode."""
        if SensingMode(mode) is SensingMode.HEADING:
            return cls.heading()
        return cls.magnitude()


@dataclass(frozen=True)
class SignalConfig:
    """
    Manual signal-strength input range, in dBm.

    Attributes:
        min_dbm: Weakest accepted value.
        max_dbm: Strongest accepted value.
        default_dbm: Value before any input is given.
    """

    min_dbm: float = -90.0
    max_dbm: float = -30.0
    default_dbm: float = -70.0

    def __post_init__(self) -> None:
        if self.min_dbm >= self.max_dbm:
            raise ValueError(
                f"min_dbm ({self.min_dbm}) must be below max_dbm ({self.max_dbm})"
            )
        if not self.min_dbm <= self.default_dbm <= self.max_dbm:
            raise ValueError(
                f"default_dbm ({self.default_dbm}) outside "
                f"[{self.min_dbm}, {self.max_dbm}]"
            )

    def validate(self, value: float) -> float:
        """Return value as float, raising ValueError when out of range."""
        value = float(value)
        if not self.min_dbm <= value <= self.max_dbm:
            raise ValueError(
                f"Signal strength {value} dBm outside "
                f"[{self.min_dbm}, {self.max_dbm}]"
            )
        return value


@dataclass(frozen=True)
class WipsConfig:
    """
    Complete engine configuration.

    Attributes:
        zone_names: Human-readable zone labels; zone ids are 1..N in order.
        motion: Motion gate parameters.
        recorder: Recording window parameters.
        signal: Manual signal-strength range.
    """

    zone_names: Tuple[str, ...] = DEFAULT_ZONE_NAMES
    motion: MotionConfig = field(default_factory=MotionConfig)
    recorder: RecorderConfig = field(default_factory=RecorderConfig)
    signal: SignalConfig = field(default_factory=SignalConfig)

    def __post_init__(self) -> None:
        # Lists from JSON become tuples so the config stays hashable
        object.__setattr__(self, "zone_names", tuple(self.zone_names))
        if len(self.zone_names) == 0:
            raise ValueError("zone_names must contain at least one zone")
        if len(set(self.zone_names)) != len(self.zone_names):
            raise ValueError(f"zone_names must be unique, got {list(self.zone_names)}")

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form suitable for json.dump."""
        d = asdict(self)
        d["zone_names"] = list(self.zone_names)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WipsConfig":
        """
        Build a config from a dict, filling missing sections with defaults.

        Raises:
            ValueError: If a section contains unknown keys or invalid values.
        """
        sections = {"motion": MotionConfig, "recorder": RecorderConfig, "signal": SignalConfig}
        unknown = set(d) - set(sections) - {"zone_names"}
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")

        kwargs: Dict[str, Any] = {}
        if "zone_names" in d:
            kwargs["zone_names"] = tuple(d["zone_names"])
        for key, section_cls in sections.items():
            if key in d:
                try:
                    kwargs[key] = section_cls(**d[key])
                except TypeError as e:
                    raise ValueError(f"Invalid '{key}' section: {e}") from e
        return cls(**kwargs)


def load_config(path: Union[str, Path]) -> WipsConfig:
    """
    Load a WipsConfig from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the content is not a valid configuration.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a JSON object, got {type(data).__name__}")
    return WipsConfig.from_dict(data)


def save_config(config: WipsConfig, path: Union[str, Path]) -> None:
    """Write a WipsConfig as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
