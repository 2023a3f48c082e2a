"""Type definitions and data structures for zone fingerprinting.

This module defines the core data structures of the zone engine: the
four-feature Sample, the per-zone Fingerprint and the ZoneRegistry that
plays the role of the radio map.

Author: Navigation Engineer
Date: 2024
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Sequence

import numpy as np


# Feature order used by as_array() / from_array()
FEATURE_NAMES = ("mag", "accel", "gyro", "wifi")


@dataclass(frozen=True)
class Sample:
    """
    Instantaneous sensor snapshot.

    Attributes:
        mag: Magnetic field magnitude in μT, or compass heading in degrees
             [0, 360) in heading-proxy mode.
        accel: Linear acceleration magnitude, >= 0.
        gyro: Angular rate magnitude, >= 0.
        wifi: Signal strength in dBm, typically in [-90, -30].

    Examples:
        >>> s = Sample(mag=48.2, accel=0.1, gyro=0.02, wifi=-62)
        >>> s.as_array()
        array([ 48.2 ,   0.1 ,   0.02, -62.  ])
        >>> s.with_updates(wifi=-55).wifi
        -55.0
    """

    mag: float = 0.0
    accel: float = 0.0
    gyro: float = 0.0
    wifi: float = -70.0

    def __post_init__(self) -> None:
        """Coerce to float and validate value ranges."""
        for name in FEATURE_NAMES:
            value = float(getattr(self, name))
            if not np.isfinite(value):
                raise ValueError(f"Sample.{name} must be finite, got {value}")
            object.__setattr__(self, name, value)

        if self.accel < 0:
            raise ValueError(f"Sample.accel must be non-negative, got {self.accel}")
        if self.gyro < 0:
            raise ValueError(f"Sample.gyro must be non-negative, got {self.gyro}")

    def as_array(self) -> np.ndarray:
        """Feature vector in FEATURE_NAMES order, shape (4,)."""
        return np.array([self.mag, self.accel, self.gyro, self.wifi], dtype=float)

    @classmethod
    def from_array(cls, v: np.ndarray) -> "Sample":
        """Build a Sample from a feature vector of shape (4,)."""
        v = np.asarray(v, dtype=float)
        if v.shape != (len(FEATURE_NAMES),):
            raise ValueError(
                f"feature vector must have shape ({len(FEATURE_NAMES)},), got {v.shape}"
            )
        return cls(*v.tolist())

    def with_updates(self, **fields: float) -> "Sample":
        """
        Copy with some fields replaced.

        Raises:
            ValueError: If a field name is not one of FEATURE_NAMES.
        """
        unknown = set(fields) - set(FEATURE_NAMES)
        if unknown:
            raise ValueError(
                f"Unknown sample field(s): {sorted(unknown)}. "
                f"Valid fields: {list(FEATURE_NAMES)}"
            )
        return replace(self, **fields)


@dataclass(frozen=True)
class Fingerprint:
    """
    A zone and its recorded signature.

    Attributes:
        zone_id: Integer zone identifier (1-based).
        name: Human-readable zone label, e.g. "Zone 2 (Kitchen)".
        data: Averaged Sample of one recording window, or None if untrained.
    """

    zone_id: int
    name: str
    data: Optional[Sample] = None

    @property
    def is_trained(self) -> bool:
        return self.data is not None


class ZoneRegistry:
    """
    Fixed set of zones with at most one fingerprint each.

    The registry is created once from a list of zone names; ids are assigned
    1..N in list order and never change. Zones are only trained or cleared,
    never added or removed. Iteration is always in ascending zone id order,
    which the classifier relies on for deterministic tie-breaking.

    Examples:
        >>> reg = ZoneRegistry.from_names(["Desk", "Kitchen"])
        >>> reg.set_fingerprint(1, Sample(mag=50, wifi=-60))
        >>> [fp.zone_id for fp in reg.trained()]
        [1]
        >>> reg.clear(1)
        >>> len(reg.trained())
        0
    """

    def __init__(self, zones: Dict[int, str]):
        if not zones:
            raise ValueError("ZoneRegistry needs at least one zone")
        for zone_id in zones:
            if not isinstance(zone_id, (int, np.integer)) or isinstance(zone_id, bool):
                raise TypeError(f"zone ids must be integers, got {zone_id!r}")
        self._zones: Dict[int, Fingerprint] = {
            int(zone_id): Fingerprint(zone_id=int(zone_id), name=name)
            for zone_id, name in sorted(zones.items())
        }

    @classmethod
    def from_names(cls, names: Sequence[str]) -> "ZoneRegistry":
        """Create an untrained registry with ids 1..len(names)."""
        return cls({i + 1: name for i, name in enumerate(names)})

    @property
    def zone_ids(self) -> List[int]:
        """Sorted zone identifiers."""
        return list(self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    def __iter__(self) -> Iterator[Fingerprint]:
        return iter(self._zones.values())

    def __contains__(self, zone_id) -> bool:
        return zone_id in self._zones

    def get(self, zone_id: int) -> Fingerprint:
        """
        Get the fingerprint record of a zone.

        Raises:
            ValueError: If zone_id does not exist in the registry.
        """
        if zone_id not in self._zones:
            raise ValueError(
                f"Zone {zone_id} not found in registry. "
                f"Available zones: {self.zone_ids}"
            )
        return self._zones[zone_id]

    def set_fingerprint(self, zone_id: int, data: Sample) -> None:
        """Replace the fingerprint of a zone with a newly recorded one."""
        if not isinstance(data, Sample):
            raise TypeError(f"data must be a Sample, got {type(data).__name__}")
        self._zones[zone_id] = replace(self.get(zone_id), data=data)

    def clear(self, zone_id: int) -> None:
        """Drop the fingerprint of a zone. Clearing an untrained zone is a no-op."""
        self._zones[zone_id] = replace(self.get(zone_id), data=None)

    def trained(self) -> List[Fingerprint]:
        """Trained zones in ascending id order."""
        return [fp for fp in self._zones.values() if fp.is_trained]

    def snapshot(self) -> Dict[int, Fingerprint]:
        """Copy of the id -> Fingerprint mapping."""
        return dict(self._zones)

    def __repr__(self) -> str:
        return (
            f"ZoneRegistry(n_zones={len(self)}, "
            f"trained={[fp.zone_id for fp in self.trained()]})"
        )
