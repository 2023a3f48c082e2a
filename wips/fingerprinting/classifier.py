"""Weighted nearest-zone classification.

This module implements the zone decision rule of the engine, a nearest
neighbor search over the trained zones with a weighted Manhattan-style
distance on two of the four features:

    score_i = w_mag * D_mag(z.mag, f_i.mag) + w_wifi * |z.wifi - f_i.wifi|
    i*      = argmin_i score_i                    (ties -> lowest zone id)
    accept  i* if score_{i*} < tolerance
    conf    = max(0, 100 - score_{i*} * confidence_scale)

D_mag is the absolute difference for field magnitudes and the shortest
circular difference for compass headings. Classification is suspended
while the device is moving (zero-velocity gate).

Author: Navigation Engineer
Date: 2024
"""

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from ..config import ClassifierConfig
from ..sensors.types import MotionState
from ..utils.angles import heading_diff_deg
from .types import Sample, ZoneRegistry


@dataclass(frozen=True)
class Prediction:
    """
    Best-matching zone for a live sample.

    Attributes:
        zone_id: Identifier of the matched zone.
        name: Human-readable zone label.
        confidence: Score mapped to [0, 100]. A monotonic transform of the
                    score for user feedback, not a probability.
        score: Raw weighted distance to the zone fingerprint.
    """

    zone_id: int
    name: str
    confidence: float
    score: float


def mag_difference(live_mag: float, ref_mag: float, circular: bool = False) -> float:
    """
    Distance between two magnetic readings.

    Args:
        live_mag: Live reading.
        ref_mag: Fingerprint reading.
        circular: Readings are compass headings in degrees; use the shorter
                  way round the circle, min(d, 360 - d).

    Returns:
        Non-negative difference.

    Examples:
        >>> mag_difference(50.0, 55.0)
        5.0
        >>> mag_difference(359.0, 1.0, circular=True)
        2.0
    """
    if circular:
        return heading_diff_deg(live_mag, ref_mag)
    return abs(live_mag - ref_mag)


def zone_score(live: Sample, ref: Sample, config: Optional[ClassifierConfig] = None) -> float:
    """
    Weighted distance between a live sample and a fingerprint.

    Only ``mag`` and ``wifi`` take part; accel and gyro describe motion,
    not place.

    Args:
        live: Live sample z.
        ref: Fingerprint sample f.
        config: Weights and distance mode. Defaults to the magnitude preset.

    Returns:
        score = mag_weight * D_mag + wifi_weight * |z.wifi - f.wifi|
    """
    if config is None:
        config = ClassifierConfig.magnitude()

    mag_diff = mag_difference(live.mag, ref.mag, circular=config.circular_mag)
    wifi_diff = abs(live.wifi - ref.wifi)
    return config.mag_weight * mag_diff + config.wifi_weight * wifi_diff


def zone_scores(
    live: Sample,
    registry: ZoneRegistry,
    config: Optional[ClassifierConfig] = None,
) -> Dict[int, float]:
    """
    Score the live sample against every trained zone.

    Args:
        live: Live sample.
        registry: Zone registry; untrained zones are skipped.
        config: Classifier constants.

    Returns:
        Dict zone_id -> score in ascending zone id order. Empty if no zone
        is trained.
    """
    return {fp.zone_id: zone_score(live, fp.data, config) for fp in registry.trained()}


def confidence_from_score(score: float, config: Optional[ClassifierConfig] = None) -> float:
    """Map a score to the [0, 100] confidence shown to the user."""
    if config is None:
        config = ClassifierConfig.magnitude()
    return max(0.0, 100.0 - score * config.confidence_scale)


def classify(
    live: Sample,
    registry: ZoneRegistry,
    motion_state: MotionState,
    config: Optional[ClassifierConfig] = None,
) -> Optional[Prediction]:
    """
    Find the zone the device is in.

    Args:
        live: Live sample z.
        registry: Trained zone fingerprints.
        motion_state: Current motion state; MOVING suppresses classification.
        config: Classifier constants (magnitude or heading preset).

    Returns:
        Prediction for the best zone, or None if the device is moving, no
        zone is trained, or the best score is not strictly below tolerance.

    Examples:
        >>> reg = ZoneRegistry.from_names(["Zone A", "Zone B"])
        >>> reg.set_fingerprint(1, Sample(mag=50, wifi=-60))
        >>> reg.set_fingerprint(2, Sample(mag=55, wifi=-65))
        >>> p = classify(Sample(mag=50, wifi=-60), reg, MotionState.STATIONARY)
        >>> (p.zone_id, p.score, p.confidence)
        (1, 0.0, 100.0)
        >>> classify(Sample(mag=70, wifi=-60), reg, MotionState.STATIONARY) is None
        True
    """
    if config is None:
        config = ClassifierConfig.magnitude()

    # Zero-velocity gate: live readings are too noisy while moving
    if MotionState(motion_state) is MotionState.MOVING:
        return None

    scores = zone_scores(live, registry, config)
    if not scores:
        return None

    zone_ids = list(scores)
    values = np.array([scores[zid] for zid in zone_ids])

    # argmin returns the first minimum, i.e. the lowest zone id on ties
    i_star = int(np.argmin(values))
    best_id = zone_ids[i_star]
    best_score = float(values[i_star])

    if not best_score < config.tolerance:
        return None

    return Prediction(
        zone_id=best_id,
        name=registry.get(best_id).name,
        confidence=confidence_from_score(best_score, config),
        score=best_score,
    )
