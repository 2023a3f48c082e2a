"""
Utility functions for zone positioning.

This module provides angle operations shared by the sensor adapters and
the zone classifier.
"""

from .angles import heading_diff_deg, wrap_heading_deg

__all__ = [
    'wrap_heading_deg',
    'heading_diff_deg',
]
