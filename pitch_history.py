"""Bounded, time-ordered record of classified pitch samples."""

import threading
from collections import deque
from dataclasses import dataclass
from typing import Optional

from config import HISTORY_CAPACITY


@dataclass(frozen=True)
class PitchSample:
    """One processed tick: detected Hz and the swara it matched, if any"""
    frequency: float
    swara_name: Optional[str]
    timestamp: float
    delta: Optional[float] = None
    cents: Optional[float] = None

    @property
    def matched(self):
        return self.swara_name is not None


class PitchHistory:
    """
    FIFO buffer of the most recent PitchSamples

    One writer (the processing tick) and any number of readers. Readers only
    ever get a tuple copy from snapshot().
    """

    def __init__(self, capacity=HISTORY_CAPACITY):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValueError(f"History capacity must be a positive integer, got {capacity!r}")
        self._capacity = capacity
        self._samples = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self):
        return self._capacity

    def append(self, sample):
        with self._lock:
            self._samples.append(sample)     # maxlen evicts from the front

    def snapshot(self):
        with self._lock:
            return tuple(self._samples)

    def clear(self):
        with self._lock:
            self._samples.clear()

    def __len__(self):
        with self._lock:
            return len(self._samples)
