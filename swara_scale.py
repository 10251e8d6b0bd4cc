"""Just-intonation sargam scale built from a base Sa frequency."""

import math
from dataclasses import dataclass
from fractions import Fraction

from errors import InvalidBaseFrequency

# ─────────────────────────────────────────────────────────────────────────────
#  Sargam ratio table — Sa..Ni, ascending
# ─────────────────────────────────────────────────────────────────────────────

SWARA_RATIOS = (
    ('Sa',   Fraction(1, 1)),
    ('Re♭',  Fraction(256, 243)),   # Komal Re
    ('Re',   Fraction(9, 8)),
    ('Ga♭',  Fraction(32, 27)),     # Komal Ga
    ('Ga',   Fraction(81, 64)),
    ('Ma',   Fraction(4, 3)),
    ('Ma♯',  Fraction(729, 512)),   # Tivra Ma
    ('Pa',   Fraction(3, 2)),
    ('Dha♭', Fraction(128, 81)),    # Komal Dha
    ('Dha',  Fraction(27, 16)),
    ('Ni♭',  Fraction(16, 9)),      # Komal Ni
    ('Ni',   Fraction(243, 128)),
)
SWARA_NAMES = tuple(name for name, _ in SWARA_RATIOS)

MAIN_SWARAS  = ('Sa', 'Re', 'Ga', 'Ma', 'Pa', 'Dha', 'Ni')
KOMAL_SWARAS = ('Re♭', 'Ga♭', 'Ma♯', 'Dha♭', 'Ni♭')


@dataclass(frozen=True)
class Swara:
    name: str
    ratio: Fraction
    frequency: float

    @property
    def is_main(self):
        return self.name in MAIN_SWARAS


@dataclass(frozen=True)
class Scale:
    """Twelve swaras for one base Sa. Replaced wholesale, never edited."""
    base_frequency: float
    swaras: tuple

    def __iter__(self):
        return iter(self.swaras)

    def __len__(self):
        return len(self.swaras)

    def __getitem__(self, index):
        return self.swaras[index]

    def __contains__(self, swara):
        return swara in self.swaras

    def get(self, name):
        return next((s for s in self.swaras if s.name == name), None)

    @property
    def names(self):
        return tuple(s.name for s in self.swaras)

    @property
    def frequencies(self):
        return tuple(s.frequency for s in self.swaras)


def validate_base_frequency(value):
    """Return value as float, or raise InvalidBaseFrequency."""
    if isinstance(value, bool):
        raise InvalidBaseFrequency(value)
    try:
        freq = float(value)
    except (TypeError, ValueError):
        raise InvalidBaseFrequency(value) from None
    if not math.isfinite(freq) or freq <= 0:
        raise InvalidBaseFrequency(value)
    return freq


def generate_scale(base_frequency):
    """
    Build the 12-swara just-intonation scale for a base Sa

    Args:
        base_frequency: Sa in Hz, finite and > 0

    Returns:
        Scale with frequencies base * ratio in ascending ratio order

    Raises:
        InvalidBaseFrequency: If base_frequency is not a finite positive number
    """
    base = validate_base_frequency(base_frequency)
    swaras = tuple(
        Swara(name=name, ratio=ratio, frequency=base * float(ratio))
        for name, ratio in SWARA_RATIOS
    )
    return Scale(base_frequency=base, swaras=swaras)
