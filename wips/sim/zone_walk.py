"""
Synthetic zone-walk traces.

Generates a sensor trace for a person who walks between zones and stands
still in each one for a while. During a dwell the magnetic and signal
readings scatter around the zone's signature and accel/gyro stay well below
the motion threshold; during a transit accel/gyro are high and the magnetic
and signal readings blend from one zone's signature to the next.

The trace can be replayed through SimulatedSensorSource(trace=...).

Author: Navigation Engineer
Date: 2024
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np


@dataclass(frozen=True)
class ZoneSignature:
    """
    Mean readings of a zone and their scatter.

    Attributes:
        name: Zone label.
        mag: Mean magnetic field magnitude (μT).
        wifi: Mean signal strength (dBm).
        mag_std: Magnetic reading noise std (μT).
        wifi_std: Signal strength noise std (dB).
    """

    name: str
    mag: float
    wifi: float
    mag_std: float = 0.5
    wifi_std: float = 1.0


DEFAULT_SIGNATURES = (
    ZoneSignature("Zone 1 (Desk)", mag=48.0, wifi=-45.0),
    ZoneSignature("Zone 2 (Kitchen)", mag=36.0, wifi=-70.0),
    ZoneSignature("Zone 3 (Hallway)", mag=60.0, wifi=-82.0),
)


@dataclass(frozen=True)
class ZoneWalkTrace:
    """
    Time series of samples with ground-truth zone labels.

    Attributes:
        t: Timestamps in seconds, shape (N,).
        mag: Magnetic readings, shape (N,).
        accel: Acceleration magnitudes, shape (N,).
        gyro: Angular rate magnitudes, shape (N,).
        wifi: Signal strengths in whole dBm, shape (N,).
        zone_truth: Zone id per sample, 0 while in transit, shape (N,).
        zone_names: Labels of zones 1..K.
    """

    t: np.ndarray
    mag: np.ndarray
    accel: np.ndarray
    gyro: np.ndarray
    wifi: np.ndarray
    zone_truth: np.ndarray
    zone_names: Tuple[str, ...]

    def __post_init__(self) -> None:
        n = self.t.shape[0]
        for name in ("mag", "accel", "gyro", "wifi", "zone_truth"):
            arr = getattr(self, name)
            if arr.shape != (n,):
                raise ValueError(
                    f"ZoneWalkTrace.{name} must have shape ({n},), got {arr.shape}"
                )
        if not np.issubdtype(self.zone_truth.dtype, np.integer):
            raise TypeError(
                f"zone_truth must have integer dtype, got {self.zone_truth.dtype}"
            )

    @property
    def n_samples(self) -> int:
        return self.t.shape[0]

    def dwell_segments(self) -> List[Tuple[int, int, int]]:
        """
        Contiguous stationary segments.

        Returns:
            List of (zone_id, start_index, end_index_exclusive).
        """
        segments = []
        start = 0
        for i in range(1, self.n_samples + 1):
            if i == self.n_samples or self.zone_truth[i] != self.zone_truth[start]:
                zone_id = int(self.zone_truth[start])
                if zone_id != 0:
                    segments.append((zone_id, start, i))
                start = i
        return segments


def generate_zone_walk(
    signatures: Sequence[ZoneSignature] = DEFAULT_SIGNATURES,
    visits: Optional[Sequence[int]] = None,
    dwell_s: float = 8.0,
    transit_s: float = 3.0,
    dt: float = 0.1,
    moving_accel: float = 2.0,
    moving_gyro: float = 1.0,
    still_noise_std: float = 0.05,
    seed: int = 42,
) -> ZoneWalkTrace:
    """
    Generate a walk that dwells in a sequence of zones.

    Args:
        signatures: Zone signatures; zone ids are 1..len(signatures).
        visits: Zone ids in visiting order. Default: every zone once, then
                back through them in reverse (1, 2, 3, 2, 1 for three zones).
        dwell_s: Time spent standing in each visited zone (s).
        transit_s: Walking time between consecutive visits (s).
        dt: Sample period (s). 0.1 matches the recorder cadence.
        moving_accel: Mean acceleration magnitude while walking (m/s²).
        moving_gyro: Mean angular rate magnitude while walking (rad/s).
        still_noise_std: Std of accel/gyro jitter while standing.
        seed: Random seed for reproducibility.

    Returns:
        ZoneWalkTrace.

    Raises:
        ValueError: If a visit references an unknown zone or durations are
                    not positive.
    """
    if len(signatures) == 0:
        raise ValueError("at least one zone signature is required")
    if dwell_s <= 0 or dt <= 0 or transit_s < 0:
        raise ValueError(
            f"invalid durations: dwell_s={dwell_s}, transit_s={transit_s}, dt={dt}"
        )

    n_zones = len(signatures)
    if visits is None:
        forward = list(range(1, n_zones + 1))
        visits = forward + forward[-2::-1]
    for zone_id in visits:
        if not 1 <= zone_id <= n_zones:
            raise ValueError(f"visit to unknown zone {zone_id}; zones are 1..{n_zones}")

    rng = np.random.default_rng(seed)
    n_dwell = max(1, int(round(dwell_s / dt)))
    n_transit = int(round(transit_s / dt))

    mag, accel, gyro, wifi, truth = [], [], [], [], []

    def _still(n):
        return np.abs(rng.normal(0.0, still_noise_std, n))

    for k, zone_id in enumerate(visits):
        sig = signatures[zone_id - 1]

        if k > 0 and n_transit > 0:
            prev = signatures[visits[k - 1] - 1]
            alpha = np.linspace(0.0, 1.0, n_transit + 2)[1:-1]
            mag.append((1 - alpha) * prev.mag + alpha * sig.mag + rng.normal(0, 2.0, n_transit))
            wifi.append((1 - alpha) * prev.wifi + alpha * sig.wifi + rng.normal(0, 3.0, n_transit))
            accel.append(np.abs(moving_accel + rng.normal(0, 0.3, n_transit)))
            gyro.append(np.abs(moving_gyro + rng.normal(0, 0.2, n_transit)))
            truth.append(np.zeros(n_transit, dtype=int))

        mag.append(sig.mag + rng.normal(0, sig.mag_std, n_dwell))
        wifi.append(sig.wifi + rng.normal(0, sig.wifi_std, n_dwell))
        accel.append(_still(n_dwell))
        gyro.append(_still(n_dwell))
        truth.append(np.full(n_dwell, zone_id, dtype=int))

    wifi_all = np.clip(np.round(np.concatenate(wifi)), -90, -30)
    n = sum(len(z) for z in truth)

    return ZoneWalkTrace(
        t=np.arange(n) * dt,
        mag=np.concatenate(mag),
        accel=np.concatenate(accel),
        gyro=np.concatenate(gyro),
        wifi=wifi_all,
        zone_truth=np.concatenate(truth),
        zone_names=tuple(s.name for s in signatures),
    )


def save_trace(trace: ZoneWalkTrace, data_dir: Union[str, Path]) -> None:
    """
    Save a trace to disk.

    Creates directory structure:
        data_dir/
        ├── trace.npz       # t, mag, accel, gyro, wifi, zone_truth
        └── zones.json      # zone names
    """
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)

    np.savez(
        data_dir / "trace.npz",
        t=trace.t,
        mag=trace.mag,
        accel=trace.accel,
        gyro=trace.gyro,
        wifi=trace.wifi,
        zone_truth=trace.zone_truth,
    )
    with open(data_dir / "zones.json", "w", encoding="utf-8") as f:
        json.dump({"zone_names": list(trace.zone_names)}, f, indent=2)


def load_trace(data_dir: Union[str, Path]) -> ZoneWalkTrace:
    """
    Load a trace saved by save_trace().

    Raises:
        FileNotFoundError: If required files are missing.
    """
    data_dir = Path(data_dir)
    trace_file = data_dir / "trace.npz"
    zones_file = data_dir / "zones.json"
    for filepath in (trace_file, zones_file):
        if not filepath.exists():
            raise FileNotFoundError(f"Required file not found: {filepath}")

    with np.load(trace_file) as data:
        arrays = {key: data[key] for key in data.files}
    with open(zones_file, "r", encoding="utf-8") as f:
        zone_names = tuple(json.load(f)["zone_names"])

    return ZoneWalkTrace(zone_names=zone_names, **arrays)
