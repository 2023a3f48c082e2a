"""
Simulation utilities for generating synthetic zone-walk sensor traces.

Modules:
    zone_walk: Dwell/transit walks over zones with ground-truth labels

Author: Navigation Engineer
Date: 2024
"""

from .zone_walk import (
    DEFAULT_SIGNATURES,
    ZoneSignature,
    ZoneWalkTrace,
    generate_zone_walk,
    load_trace,
    save_trace,
)

__all__ = [
    "ZoneSignature",
    "ZoneWalkTrace",
    "DEFAULT_SIGNATURES",
    "generate_zone_walk",
    "save_trace",
    "load_trace",
]
