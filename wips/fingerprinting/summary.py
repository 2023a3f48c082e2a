"""Registry diagnostics: validation and human-readable summaries.

Author: Navigation Engineer
Date: 2024
"""

import warnings
from itertools import combinations
from typing import Optional

from ..config import ClassifierConfig
from .classifier import zone_score
from .types import ZoneRegistry


def validate_registry(
    registry: ZoneRegistry,
    config: Optional[ClassifierConfig] = None,
    warn: bool = False,
) -> dict:
    """
    Perform quality checks on a zone registry.

    Checks include:
    - Training coverage: no trained zone is an error (nothing can
      ever be matched); a single trained zone is a warning
    - Separability: any two trained fingerprints must score at least the
      tolerance against each other, otherwise a live sample taken in one of
      them can be accepted as the other

    Args:
        registry: Zone registry to validate.
        config: Classifier constants used for the separability check.
        warn: Also emit each warning through the warnings module.

    Returns:
        Dictionary with validation results and warnings:
            {
                'valid': bool,
                'errors': list of error messages,
                'warnings': list of warning messages,
                'stats': dict with registry statistics
            }

    Examples:
        >>> result = validate_registry(reg)
        >>> if not result['valid']:
        ...     print("Errors:", result['errors'])
        >>> if result['warnings']:
        ...     print("Warnings:", result['warnings'])
    """
    if config is None:
        config = ClassifierConfig.magnitude()

    errors = []
    warning_msgs = []
    stats = {}

    trained = registry.trained()
    stats["n_zones"] = len(registry)
    stats["n_trained"] = len(trained)
    stats["untrained_zone_ids"] = [fp.zone_id for fp in registry if not fp.is_trained]

    # Check 1: Training coverage
    if len(trained) == 0:
        errors.append("No zone is trained; classification will always return None")
    elif len(trained) == 1:
        warning_msgs.append(
            f"Only zone {trained[0].zone_id} is trained; "
            f"every accepted match will be that zone"
        )

    # Check 2: Pairwise separability
    pair_scores = {}
    for a, b in combinations(trained, 2):
        score = zone_score(a.data, b.data, config)
        pair_scores[(a.zone_id, b.zone_id)] = score
        if score < config.tolerance:
            warning_msgs.append(
                f"Zones {a.zone_id} and {b.zone_id} are hard to tell apart "
                f"(score {score:.1f} < tolerance {config.tolerance:g})"
            )
    stats["pair_scores"] = pair_scores
    if pair_scores:
        stats["min_pair_score"] = float(min(pair_scores.values()))

    if warn:
        for msg in warning_msgs:
            warnings.warn(msg, UserWarning, stacklevel=2)

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warning_msgs,
        "stats": stats,
    }


def print_registry_summary(registry: ZoneRegistry) -> None:
    """
    Print a human-readable summary of the registry.

    Examples:
        >>> print_registry_summary(reg)
        Zone Registry Summary
        ==================================================
        Zones:   3
        Trained: 2
        ...
    """
    trained = registry.trained()

    print("Zone Registry Summary")
    print("=" * 50)
    print(f"Zones:   {len(registry)}")
    print(f"Trained: {len(trained)}")
    print()

    print("Fingerprints:")
    for fp in registry:
        if fp.data is None:
            print(f"  [{fp.zone_id}] {fp.name}: (untrained)")
            continue
        d = fp.data
        print(
            f"  [{fp.zone_id}] {fp.name}: "
            f"mag={d.mag:.1f} wifi={d.wifi:.0f} "
            f"acc={d.accel:.2f} gyr={d.gyro:.2f}"
        )
    print()
