"""Exceptions raised by the swara detection core and its audio plumbing."""


class SwaraError(Exception):
    """Base class for all detector errors"""


class InvalidBaseFrequency(SwaraError, ValueError):
    """Base Sa was not a finite number greater than zero"""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid base frequency: {value!r} (must be a finite number > 0)")


class EmptyScale(SwaraError):
    """Classification was attempted against a scale with no swaras"""

    def __init__(self):
        super().__init__("Cannot classify against an empty scale")


class AudioSourceError(SwaraError, RuntimeError):
    """An audio source failed to start or deliver a frame"""


class AudioSessionClosed(SwaraError):
    """A frame was requested from a session that is not open"""
