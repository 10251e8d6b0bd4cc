"""
Tests for the swara detector core

Test coverage:
- Just-intonation scale generation and base Sa validation
- Peak-picking pitch estimation on synthetic spectra
- Nearest-swara classification and the tolerance band
- Bounded pitch history and the recording state machine
- Audio session lifecycle with a synthetic sine source
"""
