"""Zone fingerprinting: recording and weighted nearest-zone matching.

Main components:
    - Sample, Fingerprint, ZoneRegistry: core data structures
    - FingerprintRecorder, average_samples: time-window recording
    - classify, zone_scores: weighted nearest-zone decision with motion gate
    - validate_registry, print_registry_summary: diagnostics

Example usage:
    >>> from wips.fingerprinting import Sample, ZoneRegistry, classify
    >>> from wips.sensors import MotionState
    >>> reg = ZoneRegistry.from_names(["Zone 1 (Desk)", "Zone 2 (Kitchen)"])
    >>> reg.set_fingerprint(1, Sample(mag=48.0, wifi=-55))
    >>> classify(Sample(mag=48.5, wifi=-56), reg, MotionState.STATIONARY).zone_id
    1

Author: Navigation Engineer
Date: 2024
"""

from .classifier import (
    Prediction,
    classify,
    confidence_from_score,
    mag_difference,
    zone_score,
    zone_scores,
)
from .recorder import (
    EmptyRecordingWarning,
    FingerprintRecorder,
    RecordingResult,
    RecordingSession,
    average_samples,
)
from .summary import print_registry_summary, validate_registry
from .types import FEATURE_NAMES, Fingerprint, Sample, ZoneRegistry

__all__ = [
    # Core types
    "Sample",
    "Fingerprint",
    "ZoneRegistry",
    "FEATURE_NAMES",
    # Recording
    "FingerprintRecorder",
    "RecordingSession",
    "RecordingResult",
    "EmptyRecordingWarning",
    "average_samples",
    # Classification
    "Prediction",
    "classify",
    "zone_score",
    "zone_scores",
    "mag_difference",
    "confidence_from_score",
    # Diagnostics
    "validate_registry",
    "print_registry_summary",
]
