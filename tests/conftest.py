import numpy as np
import pytest

from swara_scale import generate_scale

SAMPLE_RATE = 44100
FRAME_SIZE = 4096


def spike_frame(freq_hz, sample_rate=SAMPLE_RATE, frame_size=FRAME_SIZE, magnitude=1.0):
    """Lower-half magnitude frame with a single non-zero bin nearest freq_hz"""
    mags = np.zeros(frame_size // 2)
    mags[int(round(freq_hz * frame_size / sample_rate))] = magnitude
    return mags


@pytest.fixture
def scale_240():
    return generate_scale(240)


@pytest.fixture(autouse=True)
def _seed_numpy_rng():
    """Ensure deterministic noise generation for reproducible tests."""
    np.random.seed(0)
