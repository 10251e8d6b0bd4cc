"""Frame -> pitch -> swara -> history, plus the recording state machine."""

import threading
import time
from enum import Enum

from config import CAPTURE_RETRY_DELAY, DEFAULT_SETTINGS, MAX_CAPTURE_ERRORS
from errors import AudioSessionClosed, EmptyScale
from pitch_estimator import estimate_pitch
from pitch_history import PitchHistory, PitchSample
from swara_classifier import classify
from swara_scale import generate_scale


class PipelineState(Enum):
    IDLE = "idle"
    RECORDING = "recording"


class SwaraPipeline:
    """
    Owns the current Scale and the PitchHistory.

    The scale is published by replacing a single reference, so a tick always
    sees one complete scale. History appends happen under the same lock as
    state changes: once stop_recording() returns, no tick can append.
    """

    def __init__(self, settings=DEFAULT_SETTINGS, strict=__debug__, clock=time.monotonic):
        self.settings = settings
        self.strict = strict
        self.clock = clock
        self._scale = generate_scale(settings.base_frequency)
        self.history = PitchHistory(settings.history_capacity)
        self._state = PipelineState.IDLE
        self._lock = threading.Lock()
        self._thread = None
        self.last_sample = None
        self.capture_error = None       # set when the capture loop gives up

    # ── Scale ──────────────────────────────────────────────────────────────

    @property
    def scale(self):
        return self._scale

    @property
    def base_frequency(self):
        return self._scale.base_frequency

    def set_base_frequency(self, value):
        """Central point to change Sa. Invalid input leaves the old scale in place."""
        scale = generate_scale(value)
        self._scale = scale
        return scale

    # ── State machine ──────────────────────────────────────────────────────

    @property
    def state(self):
        return self._state

    @property
    def is_recording(self):
        return self._state is PipelineState.RECORDING

    def start_recording(self):
        with self._lock:
            self.history.clear()
            self.last_sample = None
            self.capture_error = None
            self._state = PipelineState.RECORDING

    def stop_recording(self):
        with self._lock:
            self._state = PipelineState.IDLE
            self.last_sample = None

    def clear_history(self):
        self.history.clear()

    def history_snapshot(self):
        return self.history.snapshot()

    # ── Per-tick processing ────────────────────────────────────────────────

    def classify_frequency(self, frequency, timestamp=None):
        """Build a PitchSample for frequency against the current scale."""
        scale = self._scale
        try:
            match = classify(frequency, scale, scale.base_frequency)
        except EmptyScale:
            if self.strict:
                raise
            print("[Pipeline] Empty scale, skipping tick")
            return None
        ts = self.clock() if timestamp is None else timestamp
        if match is None:
            return PitchSample(frequency=frequency, swara_name=None, timestamp=ts)
        return PitchSample(frequency=frequency, swara_name=match.name, timestamp=ts,
                           delta=match.delta, cents=match.cents)

    def process_frame(self, magnitudes, sample_rate, timestamp=None):
        """
        Run one tick

        Returns:
            The PitchSample for this frame, or None for silence, out-of-band
            frames and skipped ticks. The sample is only stored while recording.
        """
        s = self.settings
        freq = estimate_pitch(magnitudes, sample_rate, s.band_min, s.band_max)
        if freq is None:
            return None
        sample = self.classify_frequency(freq, timestamp)
        if sample is None:
            return None
        with self._lock:
            if self._state is PipelineState.RECORDING:
                self.last_sample = sample
                if sample.matched or s.record_unmatched:
                    self.history.append(sample)
        return sample

    # ── Capture loop ───────────────────────────────────────────────────────

    def run(self, session, max_frames=None):
        """Pull frames from an open AudioSession until recording stops."""
        frames = 0
        failures = 0
        while self.is_recording:
            if max_frames is not None and frames >= max_frames:
                break
            try:
                frame = session.next_frame()
            except AudioSessionClosed:
                break
            except Exception as e:
                failures += 1
                print(f"[Pipeline] Capture: {e}")
                if failures >= MAX_CAPTURE_ERRORS:
                    self.capture_error = e
                    self.stop_recording()
                    break
                time.sleep(CAPTURE_RETRY_DELAY)
                continue
            failures = 0
            if frame is None:
                time.sleep(0.005)
                continue
            frames += 1
            if not self.is_recording:
                break
            magnitudes, rate = frame
            try:
                self.process_frame(magnitudes, rate)
            except EmptyScale:
                self.stop_recording()
                raise
            except Exception as e:
                print(f"[Pipeline] Process: {e}")
        return frames

    def start_capture(self, session):
        """Enter RECORDING and process session frames on a daemon thread."""
        self.start_recording()
        self._thread = threading.Thread(target=self.run, args=(session,), daemon=True)
        self._thread.start()
        return self._thread

    def stop_capture(self, timeout=1.0):
        self.stop_recording()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
