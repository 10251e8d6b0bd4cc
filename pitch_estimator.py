"""Dominant-frequency estimation from a spectral magnitude frame."""

import math

import numpy as np
from scipy.signal import get_window

from config import VOCAL_BAND_MIN, VOCAL_BAND_MAX


def bin_resolution(sample_rate, frame_size):
    """Width of one FFT bin in Hz."""
    return sample_rate / frame_size


def magnitude_spectrum(samples, window="hann"):
    """
    Windowed magnitude spectrum of one time-domain buffer

    Only the lower half of the transform is returned (len(samples) // 2 bins,
    Nyquist bin dropped) so that estimate_pitch can recover the transform size
    as 2 * len(magnitudes).
    """
    data = np.asarray(samples, dtype=np.float64)
    n = len(data)
    if n < 2:
        return np.zeros(0)
    windowed = data * get_window(window, n)
    return np.abs(np.fft.rfft(windowed))[: n // 2]


def estimate_pitch(magnitudes, sample_rate, band_min=VOCAL_BAND_MIN, band_max=VOCAL_BAND_MAX):
    """
    Pick the loudest bin inside the vocal band

    This is a plain amplitude-peak picker: it follows whichever harmonic or
    formant carries the most energy, not the true fundamental.

    Args:
        magnitudes: Non-negative magnitudes for the lower half of the spectrum
        sample_rate: Sample rate of the analysed buffer in Hz
        band_min: Lowest accepted frequency in Hz (inclusive)
        band_max: Highest accepted frequency in Hz (inclusive)

    Returns:
        Peak frequency in Hz, or None for silence / empty or degenerate frames
    """
    mags = np.asarray(magnitudes, dtype=np.float64).ravel()
    if mags.size == 0:
        return None
    try:
        rate = float(sample_rate)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(rate) or rate <= 0:
        return None

    frame_size = 2 * mags.size
    freqs = np.arange(mags.size) * rate / frame_size

    in_band = (freqs >= band_min) & (freqs <= band_max)
    in_band[0] = False                      # DC
    candidates = np.flatnonzero(in_band)
    if candidates.size == 0:
        return None

    band = np.nan_to_num(mags[candidates], nan=0.0)
    # argmax returns the first maximum, same as a strict '>' scan
    peak = int(np.argmax(band))
    if not band[peak] > 0:
        return None
    return float(freqs[candidates[peak]])
