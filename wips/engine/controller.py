"""
Zone controller: the single owner of the engine state.

The controller holds the current sample, the derived motion state, the zone
registry, the recording session and the latest prediction. State changes
only through its mutating operations:

    ingest_sample, set_signal_strength, set_mode,
    start_recording, tick, finish_recording, cancel_recording, clear_zone

Every operation that can affect the prediction recomputes it immediately
(level-triggered), so readers always see a consistent snapshot.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Mapping, Optional

from ..config import ClassifierConfig, WipsConfig
from ..fingerprinting import (
    Fingerprint,
    FingerprintRecorder,
    Prediction,
    RecordingResult,
    Sample,
    ZoneRegistry,
    classify,
)
from ..sensors import MotionState, SensingMode, SensorSource, detect_motion


class Mode(str, Enum):
    """Operating mode: record zones (TRAIN) or classify live samples (TRACK)."""

    TRAIN = "TRAIN"
    TRACK = "TRACK"


@dataclass(frozen=True)
class ControllerSnapshot:
    """
    Read-only view of the controller state at one instant.

    Attributes:
        t: Clock time of the snapshot in seconds.
        sample: Current sample.
        motion_state: Motion state derived from the current sample.
        prediction: Latest prediction, None when unknown, moving or in TRAIN.
        mode: Operating mode.
        sensing_mode: Meaning of the ``mag`` feature.
        fingerprints: zone_id -> Fingerprint.
        recording_zone: Zone being recorded, or None.
        recording_progress: Recording progress in percent, [0, 100].
    """

    t: float
    sample: Sample
    motion_state: MotionState
    prediction: Optional[Prediction]
    mode: Mode
    sensing_mode: SensingMode
    fingerprints: Dict[int, Fingerprint]
    recording_zone: Optional[int]
    recording_progress: float


class ZoneController:
    """
    Application state and operations of the zone positioning engine.

    Args:
        config: Engine configuration (zones, motion gate, recorder, signal).
        sensing_mode: What the ``mag`` feature means; selects the classifier
                      preset unless classifier_config is given.
        classifier_config: Explicit classifier constants.
        clock: Monotonic clock in seconds.

    Example:
        >>> ctl = ZoneController()
        >>> ctl.ingest_sample(mag=48.0, accel=0.0, gyro=0.0)
        >>> ctl.set_signal_strength(-55)
        >>> ctl.start_recording(1)
        True
    """

    def __init__(
        self,
        config: Optional[WipsConfig] = None,
        sensing_mode: SensingMode = SensingMode.MAGNITUDE,
        classifier_config: Optional[ClassifierConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config if config is not None else WipsConfig()
        self.clock = clock
        self.registry = ZoneRegistry.from_names(self.config.zone_names)
        self.recorder = FingerprintRecorder(self.config.recorder)

        self._sensing_mode = SensingMode(sensing_mode)
        if classifier_config is None:
            classifier_config = ClassifierConfig.for_mode(self._sensing_mode)
        self.classifier_config = classifier_config

        self._mode = Mode.TRAIN
        self._sample = Sample(wifi=self.config.signal.default_dbm)
        self._motion_state = self._detect_motion(self._sample)
        self._prediction: Optional[Prediction] = None

    @classmethod
    def for_source(
        cls,
        source: SensorSource,
        config: Optional[WipsConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "ZoneController":
        """Controller whose classifier constants match a sensor source."""
        return cls(config=config, sensing_mode=source.sensing_mode, clock=clock)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def sample(self) -> Sample:
        return self._sample

    @property
    def motion_state(self) -> MotionState:
        return self._motion_state

    @property
    def prediction(self) -> Optional[Prediction]:
        return self._prediction

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def sensing_mode(self) -> SensingMode:
        return self._sensing_mode

    @property
    def fingerprints(self) -> Dict[int, Fingerprint]:
        return self.registry.snapshot()

    @property
    def recording_zone(self) -> Optional[int]:
        return self.recorder.recording_zone

    @property
    def recording_progress(self) -> float:
        return self.recorder.progress

    def snapshot(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            t=self.clock(),
            sample=self._sample,
            motion_state=self._motion_state,
            prediction=self._prediction,
            mode=self._mode,
            sensing_mode=self._sensing_mode,
            fingerprints=self.fingerprints,
            recording_zone=self.recording_zone,
            recording_progress=self.recording_progress,
        )

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def ingest_sample(self, updates: Optional[Mapping[str, float]] = None, **fields: float) -> None:
        """
        Merge new readings into the current sample.

        Fields that are not given keep their last known value, so a source
        with missing channels degrades to stale values instead of failing.

        Args:
            updates: Mapping field -> value (e.g. the result of source.poll()).
            **fields: Same, as keyword arguments.

        Raises:
            ValueError: If a field name is unknown or a value is invalid.
        """
        merged = dict(updates or {})
        merged.update(fields)
        if not merged:
            return
        self._sample = self._sample.with_updates(**merged)
        self._motion_state = self._detect_motion(self._sample)
        self._update_prediction()

    def set_signal_strength(self, dbm: float) -> None:
        """
        Manual signal-strength input.

        Raises:
            ValueError: If dbm lies outside the configured range.
        """
        self.ingest_sample(wifi=self.config.signal.validate(dbm))

    def set_mode(self, mode: Mode) -> None:
        self._mode = Mode(mode)
        self._update_prediction()

    def start_recording(self, zone_id: int) -> bool:
        """
        Start recording a fingerprint for a zone.

        Returns:
            True if recording started, False if another recording is active
            (the active one is left untouched).

        Raises:
            ValueError: If zone_id does not exist.
        """
        self.registry.get(zone_id)
        return self.recorder.start(zone_id, self._now_ms())

    def tick(self) -> Optional[RecordingResult]:
        """
        Sampling tick; buffers the current sample while recording.

        Returns:
            RecordingResult when a recording window closed on this tick.
        """
        result = self.recorder.tick(self._sample, self._now_ms())
        if result is not None:
            self._store(result)
        return result

    def finish_recording(self) -> Optional[RecordingResult]:
        """
        Close the active recording now and store its fingerprint.

        Returns:
            RecordingResult (fingerprint None for an empty buffer), or None
            if nothing was being recorded.
        """
        result = self.recorder.finish()
        if result is not None:
            self._store(result)
        return result

    def cancel_recording(self) -> bool:
        return self.recorder.cancel()

    def clear_zone(self, zone_id: int) -> None:
        """Remove a zone's fingerprint; other zones are unaffected."""
        self.registry.clear(zone_id)
        self._update_prediction()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _now_ms(self) -> float:
        return self.clock() * 1000.0

    def _detect_motion(self, sample: Sample) -> MotionState:
        return detect_motion(sample.accel, sample.gyro, self.config.motion.threshold)

    def _store(self, result: RecordingResult) -> None:
        if result.fingerprint is None:
            return
        self.registry.set_fingerprint(result.zone_id, result.fingerprint)
        self._update_prediction()

    def _update_prediction(self) -> None:
        if self._mode is not Mode.TRACK:
            self._prediction = None
            return
        self._prediction = classify(
            self._sample, self.registry, self._motion_state, self.classifier_config
        )
