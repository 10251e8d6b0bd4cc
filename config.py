import os
from dataclasses import dataclass

# ─────────────────────────────────────────────────────────────────────────────
#  Audio constants
# ─────────────────────────────────────────────────────────────────────────────

CHUNK    = int(os.environ.get("SWARA_CHUNK", 4096))
RATE     = int(os.environ.get("SWARA_SAMPLE_RATE", 44100))
CHANNELS = 1

# ─────────────────────────────────────────────────────────────────────────────
#  Detection
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_SA       = float(os.environ.get("SWARA_DEFAULT_SA", 240.0))
VOCAL_BAND_MIN   = 80.0
VOCAL_BAND_MAX   = 800.0
TOLERANCE_RATIO  = 0.08          # of base Sa, in Hz
HISTORY_CAPACITY = 60            # ~5 s at 12 updates per second
UI_UPDATE_MS     = 50

# Capture loop gives up after this many consecutive read failures
MAX_CAPTURE_ERRORS  = 5
CAPTURE_RETRY_DELAY = 0.05      # seconds

# Common Sa choices shown next to the base frequency entry
SA_REFERENCES = [
    ("Female Vocalists", "240 Hz"),
    ("Male Vocalists",   "130 Hz"),
    ("Harmonium",        "240 Hz"),
    ("Tanpura",          "110 Hz (Male) / 220 Hz (Female)"),
]


@dataclass(frozen=True)
class DetectorSettings:
    """Per-session detection parameters handed to the pipeline."""
    base_frequency: float = DEFAULT_SA
    band_min: float = VOCAL_BAND_MIN
    band_max: float = VOCAL_BAND_MAX
    history_capacity: int = HISTORY_CAPACITY
    record_unmatched: bool = True


DEFAULT_SETTINGS = DetectorSettings()
