"""Zone-level indoor positioning by sensor fingerprinting.

This package contains the components of the WIPS zone engine:
- sensors: Sensor sources, reading reductions and the motion gate
- fingerprinting: Zone registry, fingerprint recording and classification
- engine: Controller state and the session driver
- sim: Synthetic zone-walk traces
- eval: Metrics and plots for replayed sessions
"""

__version__ = "0.1.0"
