"""
Evaluation metrics for zone classification.

Zone predictions are categorical, so instead of position errors the
metrics here count how often a prediction was made while the person was
standing in a zone (coverage) and how often it named the right zone
(accuracy).

Author: Navigation Engineering Team
Date: 2024
"""

from typing import Dict, Optional, Sequence

import numpy as np


def zone_metrics(
    predicted: Sequence[Optional[int]],
    truth: Sequence[int],
    n_zones: Optional[int] = None,
) -> Dict[str, object]:
    """
    Compute zone classification statistics.

    Args:
        predicted: Predicted zone id per sample, None (or 0) for "unknown".
        truth: True zone id per sample, 0 while in transit.
        n_zones: Number of zones; inferred from the data if None.

    Returns:
        stats: Dictionary with keys:
               - 'n_dwell': samples taken inside a zone (truth != 0)
               - 'n_predicted': dwell samples that received a prediction
               - 'coverage': n_predicted / n_dwell
               - 'accuracy': correct / n_predicted over dwell samples
               - 'transit_predictions': predictions made while in transit
               - 'confusion': (n_zones+1, n_zones+1) counts, rows = truth,
                 cols = prediction, index 0 = unknown / transit

    Raises:
        ValueError: If inputs have different lengths.
    """
    pred = np.array([0 if p is None else int(p) for p in predicted], dtype=int)
    truth = np.asarray(truth, dtype=int)

    if pred.shape != truth.shape:
        raise ValueError(
            f"Shape mismatch: predicted {pred.shape} vs truth {truth.shape}"
        )

    if n_zones is None:
        n_zones = int(max(pred.max(initial=0), truth.max(initial=0)))

    confusion = np.zeros((n_zones + 1, n_zones + 1), dtype=int)
    np.add.at(confusion, (truth, pred), 1)

    dwell = truth != 0
    made = pred != 0
    n_dwell = int(np.sum(dwell))
    n_predicted = int(np.sum(dwell & made))
    n_correct = int(np.sum(dwell & made & (pred == truth)))

    return {
        "n_dwell": n_dwell,
        "n_predicted": n_predicted,
        "coverage": n_predicted / n_dwell if n_dwell else 0.0,
        "accuracy": n_correct / n_predicted if n_predicted else 0.0,
        "transit_predictions": int(np.sum(~dwell & made)),
        "confusion": confusion,
    }
