"""
Zone Tracking: Fingerprint-Based Zone-Level Indoor Positioning

Trains one averaged fingerprint per zone while standing still, then
names the current zone from live sensor samples whenever the motion gate
reports the device as stationary.

Examples:
    - example_zone_tracking.py: Train-then-track on a simulated walk

Author: Navigation Engineer
Date: 2024
"""

__version__ = "0.1.0"
__all__ = []
