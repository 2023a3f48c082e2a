"""
Evaluation and Visualization Module.

Modules:
    metrics: Zone classification coverage, accuracy and confusion
    plots: Session timeline figures
"""

from .metrics import zone_metrics
from .plots import plot_zone_timeline, save_figure

__all__ = [
    # Metrics
    "zone_metrics",
    # Plots
    "plot_zone_timeline",
    "save_figure",
]
