"""PyAudio microphone source"""

import numpy as np
import pyaudio

from audio_source import AudioFrameSource
from config import CHANNELS, CHUNK, RATE
from errors import AudioSourceError
from pitch_estimator import magnitude_spectrum


class MicrophoneSource(AudioFrameSource):
    """Default input device, mono float32, one CHUNK per frame"""

    FORMAT = pyaudio.paFloat32

    def __init__(self, sample_rate=RATE, frame_size=CHUNK, device_index=None):
        self._rate = sample_rate
        self._size = frame_size
        self.device_index = device_index
        self.p = None
        self.stream = None

    @property
    def name(self):
        return "microphone"

    @property
    def sample_rate(self):
        return self._rate

    @property
    def frame_size(self):
        return self._size

    def start(self):
        self.p = pyaudio.PyAudio()
        try:
            self.stream = self.p.open(format=self.FORMAT, channels=CHANNELS,
                                      rate=self._rate, input=True,
                                      input_device_index=self.device_index,
                                      frames_per_buffer=self._size)
        except Exception as e:
            raise AudioSourceError(f"Could not start audio input: {e}") from e

    def stop(self):
        try:
            if self.stream:
                self.stream.stop_stream()
                self.stream.close()
        finally:
            self.stream = None
            if self.p:
                self.p.terminate()
                self.p = None

    def next_frame(self):
        if self.stream is None:
            return None
        raw  = self.stream.read(self._size, exception_on_overflow=False)
        data = np.frombuffer(raw, dtype=np.float32)
        return magnitude_spectrum(data), self._rate
