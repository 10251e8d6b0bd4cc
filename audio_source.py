"""Audio frame sources and the scoped session that owns one."""

import threading
import time
from abc import ABC, abstractmethod

import numpy as np

from config import CHUNK, RATE
from errors import AudioSessionClosed, AudioSourceError
from pitch_estimator import magnitude_spectrum


class AudioFrameSource(ABC):
    """Abstract base class for anything that delivers spectral frames"""

    @abstractmethod
    def start(self):
        """Acquire the underlying device / generator"""
        pass

    @abstractmethod
    def stop(self):
        """Release everything acquired by start(); safe to call twice"""
        pass

    @abstractmethod
    def next_frame(self):
        """
        Deliver the next frame

        Returns:
            (magnitudes, sample_rate) where magnitudes is the lower half of
            the spectrum, or None if no frame is available right now
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> float:
        pass

    @property
    @abstractmethod
    def frame_size(self) -> int:
        pass


class SineWaveSource(AudioFrameSource):
    """Synthetic tone generator, used for tests and the no-microphone demo"""

    def __init__(self, frequency, sample_rate=RATE, frame_size=CHUNK,
                 amplitude=0.5, noise=0.0, seed=None, realtime=False):
        self.frequency = float(frequency)
        self.amplitude = amplitude
        self.noise = noise
        self._rate = sample_rate
        self._size = frame_size
        self._phase = 0.0
        self._rng = np.random.default_rng(seed)
        self.realtime = realtime
        self.running = False

    @property
    def name(self):
        return "sine"

    @property
    def sample_rate(self):
        return self._rate

    @property
    def frame_size(self):
        return self._size

    def start(self):
        self._phase = 0.0
        self.running = True

    def stop(self):
        self.running = False

    def samples(self):
        """Next block of time-domain samples; phase carries across blocks."""
        t = np.arange(self._size) / self._rate
        step = 2 * np.pi * self.frequency
        data = self.amplitude * np.sin(self._phase + step * t)
        self._phase = (self._phase + step * self._size / self._rate) % (2 * np.pi)
        if self.noise:
            data = data + self._rng.normal(0.0, self.noise, self._size)
        return data.astype(np.float32)

    def next_frame(self):
        if not self.running:
            return None
        if self.realtime:
            time.sleep(self._size / self._rate)    # buffer cadence of a real device
        return magnitude_spectrum(self.samples()), self._rate


class AudioSession:
    """
    Single owner of an AudioFrameSource

    open() starts the source and close() always releases it, also when
    open() itself fails half way. Usable as a context manager.
    """

    def __init__(self, source):
        self.source = source
        self._open = False
        self._lock = threading.Lock()

    @property
    def is_open(self):
        return self._open

    def open(self):
        with self._lock:
            if self._open:
                return self
            try:
                self.source.start()
            except Exception as e:
                try:
                    self.source.stop()
                except Exception as cleanup_err:
                    print(f"[Audio] Cleanup after failed open: {cleanup_err}")
                if isinstance(e, AudioSourceError):
                    raise
                raise AudioSourceError(f"Could not open {self.source.name}: {e}") from e
            self._open = True
            print(f"[Audio] Opened {self.source.name} @ {self.source.sample_rate} Hz")
            return self

    def close(self):
        with self._lock:
            if not self._open:
                return
            self._open = False
            self.source.stop()
            print(f"[Audio] Closed {self.source.name}")

    def next_frame(self):
        if not self._open:
            raise AudioSessionClosed(f"{self.source.name} session is not open")
        return self.source.next_frame()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def get_source(source_name, **kwargs):
    """
    Factory function to get an audio source by name

    Args:
        source_name: 'microphone' or 'sine'
        **kwargs: Passed to the source constructor

    Returns:
        AudioFrameSource instance

    Raises:
        ValueError: If source_name is unknown
        ImportError: If PyAudio is not installed (microphone only)
    """
    source_name = source_name.lower()

    if source_name == "microphone":
        from microphone import MicrophoneSource
        return MicrophoneSource(**kwargs)

    elif source_name == "sine":
        kwargs.setdefault("frequency", 240.0)
        return SineWaveSource(**kwargs)

    else:
        raise ValueError(
            f"Unknown audio source: {source_name}. "
            f"Supported: microphone, sine"
        )


def list_sources():
    """Map each source name to 'available' or the reason it is not."""
    sources = {}

    try:
        from microphone import MicrophoneSource  # noqa: F401
        sources['microphone'] = 'available'
    except ImportError as e:
        sources['microphone'] = f'unavailable: {e}'

    sources['sine'] = 'available'
    return sources


def default_source(preferred="microphone", fallback="sine"):
    """preferred if it can be opened here, otherwise fallback"""
    status = list_sources().get(preferred)
    if status == 'available':
        return preferred
    print(f"[Audio] {preferred} {status or 'unknown'}, using {fallback}")
    return fallback
