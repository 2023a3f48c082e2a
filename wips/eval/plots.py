"""
Visualization utilities for zone tracking sessions.

This module provides plotting functions for replayed sessions: the raw
features over time and predicted vs. true zone.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np


def plot_zone_timeline(
    t: np.ndarray,
    mag: np.ndarray,
    wifi: np.ndarray,
    moving: np.ndarray,
    truth: np.ndarray,
    predicted: Sequence[Optional[int]],
    zone_names: Optional[Sequence[str]] = None,
    title: str = "Zone Tracking Timeline",
) -> plt.Figure:
    """
    Plot features, motion gate and zone decisions of a session.

    Args:
        t: Time stamps (s), shape (N,)
        mag: Magnetic readings, shape (N,)
        wifi: Signal strengths (dBm), shape (N,)
        moving: Boolean motion gate per sample, shape (N,)
        truth: True zone id per sample (0 = transit), shape (N,)
        predicted: Predicted zone id per sample, None for unknown
        zone_names: Labels for zones 1..K (y tick labels)
        title: Figure title

    Returns:
        fig: Matplotlib figure
    """
    pred = np.array([np.nan if p is None else p for p in predicted], dtype=float)

    fig, axes = plt.subplots(3, 1, figsize=(12, 8), sharex=True)

    ax = axes[0]
    ax.plot(t, mag, "b-", linewidth=1, label="mag")
    ax.set_ylabel("Magnetic")
    ax2 = ax.twinx()
    ax2.plot(t, wifi, "g-", linewidth=1, alpha=0.7, label="wifi")
    ax2.set_ylabel("Signal (dBm)")
    ax.grid(True, alpha=0.3)
    ax.set_title(title)

    ax = axes[1]
    ax.fill_between(t, 0, np.asarray(moving, dtype=float), step="post",
                    color="orange", alpha=0.5, label="MOVING")
    ax.set_ylabel("Motion gate")
    ax.set_yticks([0, 1])
    ax.set_yticklabels(["still", "moving"])
    ax.grid(True, alpha=0.3)

    ax = axes[2]
    ax.step(t, truth, "k-", where="post", linewidth=2, label="Truth")
    ax.plot(t, pred, "r.", markersize=3, label="Predicted")
    ax.set_ylabel("Zone")
    ax.set_xlabel("Time (s)")
    if zone_names is not None:
        ax.set_yticks(range(len(zone_names) + 1))
        ax.set_yticklabels(["-"] + list(zone_names))
    ax.legend(loc="upper right")
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    return fig


def save_figure(
    fig: plt.Figure,
    out_dir: Union[str, Path],
    name: str,
    formats: Tuple[str, ...] = ("svg", "png"),
) -> List[Path]:
    """
    Save figure in multiple formats.

    Args:
        fig: Matplotlib figure to save
        out_dir: Output directory
        name: Base filename (without extension)
        formats: Tuple of format extensions

    Returns:
        paths: List of saved file paths
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for fmt in formats:
        filepath = out_dir / f"{name}.{fmt}"
        fig.savefig(filepath, dpi=150, bbox_inches="tight")
        paths.append(filepath)

    return paths
