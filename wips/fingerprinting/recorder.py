"""Fingerprint recording: time-window collection and scan averaging.

A fingerprint is taken by holding the device still in a zone for a short
window while the current sample is copied into a buffer at a fixed cadence.
At the end of the window the buffer is averaged field by field, which
reduces short-term fading on the signal strength and jitter on the
magnetometer.

The recording window and the sampling ticker both live in one
RecordingSession, and every exit path (finish or cancel) goes through the
same teardown, so the ticker can never outlive its window.

Author: Navigation Engineer
Date: 2024
"""

import warnings
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from ..config import RecorderConfig
from .types import Sample


class EmptyRecordingWarning(UserWarning):
    """A recording window ended without collecting any sample."""


def average_samples(samples: Sequence[Sample]) -> Optional[Sample]:
    """
    Average a buffer of samples into one fingerprint sample.

    Each of the four fields is averaged independently (arithmetic mean).
    The mean is taken over offsets from the first sample, so a buffer of
    identical samples averages back to exactly that sample instead of
    picking up summation rounding.

    Notes:
        In heading-proxy mode the mag field holds a compass heading, and it
        is averaged arithmetically like every other field. A recording whose
        headings straddle north (358 deg and 2 deg) therefore averages to
        about 180 deg. Record heading-proxy zones facing away from north.

    Args:
        samples: Buffered samples, any length.

    Returns:
        Averaged Sample, or None if the buffer is empty.

    Examples:
        >>> buf = [Sample(mag=10, accel=1, gyro=1, wifi=-60)] * 5
        >>> average_samples(buf)
        Sample(mag=10.0, accel=1.0, gyro=1.0, wifi=-60.0)
        >>> average_samples([]) is None
        True
    """
    if len(samples) == 0:
        return None

    scans = np.array([s.as_array() for s in samples])  # (S, 4)
    ref = scans[0]
    return Sample.from_array(ref + np.mean(scans - ref, axis=0))


@dataclass
class RecordingSession:
    """
    State of an in-progress recording.

    Attributes:
        zone_id: Zone being recorded.
        started_at_ms: Clock time at start, in milliseconds.
        samples: Buffered samples.
        ticks: Number of sampling ticks that appended a sample.
    """

    zone_id: int
    started_at_ms: float
    samples: List[Sample] = field(default_factory=list)
    ticks: int = 0

    def elapsed_ms(self, now_ms: float) -> float:
        return now_ms - self.started_at_ms


@dataclass(frozen=True)
class RecordingResult:
    """
    Outcome of a finished recording.

    Attributes:
        zone_id: Zone that was recorded.
        fingerprint: Averaged sample, or None when the buffer was empty.
        n_samples: Number of buffered samples.
    """

    zone_id: int
    fingerprint: Optional[Sample]
    n_samples: int


class FingerprintRecorder:
    """
    Collects samples for one zone at a time.

    Usage:
        recorder.start(zone_id, now_ms)         # open a window
        recorder.tick(current_sample, now_ms)   # every interval_ms
        -> RecordingResult when the window is full, else None

    A full window holds window_ms / interval_ms samples: a tick landing on
    the window boundary is buffered before the window closes, and ticks
    arriving up to half a cadence late still count as inside the window.

    Only one recording can be active; start() while recording is a no-op
    that leaves the active one untouched.

    Args:
        config: Window length and sampling cadence.
    """

    def __init__(self, config: Optional[RecorderConfig] = None):
        self.config = config if config is not None else RecorderConfig()
        self._session: Optional[RecordingSession] = None

    @property
    def is_recording(self) -> bool:
        return self._session is not None

    @property
    def recording_zone(self) -> Optional[int]:
        return self._session.zone_id if self._session is not None else None

    @property
    def buffer_size(self) -> int:
        return len(self._session.samples) if self._session is not None else 0

    @property
    def progress(self) -> float:
        """
        Recording progress in percent.

            progress = 100 * ticks / (window_ms / interval_ms)

        Clamped to [0, 100]. A window that closes on its sample count reads
        exactly 100 on its last tick.
        """
        if self._session is None:
            return 0.0
        pct = 100.0 * self._session.ticks / self.config.expected_ticks
        return min(pct, 100.0)

    def start(self, zone_id: int, now_ms: float) -> bool:
        """
        Open a recording window for a zone.

        Returns:
            True if a new recording started, False if one was already active.
        """
        if self._session is not None:
            return False
        self._session = RecordingSession(zone_id=zone_id, started_at_ms=float(now_ms))
        return True

    def tick(self, sample: Sample, now_ms: float) -> Optional[RecordingResult]:
        """
        Sampling tick: buffer the current sample, then close the window
        once it is full or its time is up.

        Args:
            sample: Latest available sample (not a fresh hardware read).
            now_ms: Current clock time in milliseconds.

        Returns:
            RecordingResult if the window closed on this tick, else None.
            Also None when nothing is being recorded.
        """
        session = self._session
        if session is None:
            return None

        cfg = self.config
        elapsed = session.elapsed_ms(now_ms)
        # Boundary tick belongs to the window; half a cadence absorbs clock drift
        if elapsed < cfg.window_ms + 0.5 * cfg.interval_ms:
            session.samples.append(sample)
            session.ticks += 1

        if elapsed >= cfg.window_ms or session.ticks >= cfg.expected_ticks:
            return self.finish()
        return None

    def finish(self) -> Optional[RecordingResult]:
        """
        Close the window and average the buffer.

        The session is torn down whether or not a fingerprint was produced.
        An empty buffer yields a result with fingerprint=None and an
        EmptyRecordingWarning.

        Returns:
            RecordingResult, or None if nothing was being recorded.
        """
        session = self._teardown()
        if session is None:
            return None

        fingerprint = average_samples(session.samples)
        if fingerprint is None:
            warnings.warn(
                f"Recording for zone {session.zone_id} collected no samples; "
                f"no fingerprint stored",
                EmptyRecordingWarning,
                stacklevel=2,
            )
        return RecordingResult(
            zone_id=session.zone_id,
            fingerprint=fingerprint,
            n_samples=len(session.samples),
        )

    def cancel(self) -> bool:
        """Abort the active recording without producing a fingerprint."""
        return self._teardown() is not None

    def _teardown(self) -> Optional[RecordingSession]:
        session, self._session = self._session, None
        return session
