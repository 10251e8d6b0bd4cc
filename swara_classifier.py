"""Nearest-swara matching with a tolerance band relative to Sa."""

import math
from dataclasses import dataclass

from config import TOLERANCE_RATIO
from errors import EmptyScale


@dataclass(frozen=True)
class SwaraMatch:
    swara: object
    delta: float       # Hz, detected - swara

    @property
    def name(self):
        return self.swara.name

    @property
    def cents(self):
        """Intonation offset from the swara in cents (+ sharp, - flat)"""
        return 1200 * math.log2((self.swara.frequency + self.delta) / self.swara.frequency)


def tolerance_for(base_frequency):
    return base_frequency * TOLERANCE_RATIO


def nearest_swara(frequency, scale):
    """
    Nearest swara to frequency, ignoring tolerance

    Scans in scale order and only replaces the best candidate on a strictly
    smaller difference, so the lowest swara wins exact ties.

    Returns:
        (Swara, signed delta in Hz)

    Raises:
        EmptyScale: If scale has no swaras
    """
    if len(scale) == 0:
        raise EmptyScale()
    best, best_diff = scale[0], abs(frequency - scale[0].frequency)
    for swara in scale[1:]:
        diff = abs(frequency - swara.frequency)
        if diff < best_diff:
            best, best_diff = swara, diff
    return best, frequency - best.frequency


def classify(frequency, scale, base_frequency):
    """Return a SwaraMatch only if the nearest swara is inside the tolerance band."""
    if not math.isfinite(frequency):
        return None
    swara, delta = nearest_swara(frequency, scale)
    if abs(delta) < tolerance_for(base_frequency):
        return SwaraMatch(swara=swara, delta=delta)
    return None
