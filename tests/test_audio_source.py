#!/usr/bin/env python3
"""Tests for audio sources and the scoped audio session"""

import pytest

import audio_source
from audio_source import (AudioFrameSource, AudioSession, SineWaveSource, default_source,
                          get_source, list_sources)
from errors import AudioSessionClosed, AudioSourceError
from pitch_estimator import bin_resolution, estimate_pitch


class FailingSource(AudioFrameSource):
    """Source whose start() blows up after partially acquiring resources"""

    def __init__(self, exc=OSError("no input device")):
        self.exc = exc
        self.acquired = False
        self.stop_calls = 0

    @property
    def name(self):
        return "failing"

    @property
    def sample_rate(self):
        return 44100

    @property
    def frame_size(self):
        return 4096

    def start(self):
        self.acquired = True
        raise self.exc

    def stop(self):
        self.stop_calls += 1
        self.acquired = False

    def next_frame(self):
        return None


class TestSineWaveSource:

    def test_no_frames_before_start(self):
        assert SineWaveSource(240.0).next_frame() is None

    def test_frame_shape(self):
        source = SineWaveSource(240.0, sample_rate=44100, frame_size=4096)
        source.start()
        mags, rate = source.next_frame()
        assert rate == 44100
        assert len(mags) == 2048

    @pytest.mark.parametrize("tone", [130.0, 240.0, 360.0])
    def test_estimated_pitch(self, tone):
        source = SineWaveSource(tone, seed=1, noise=0.01)
        source.start()
        for _ in range(3):
            mags, rate = source.next_frame()
            freq = estimate_pitch(mags, rate)
            assert abs(freq - tone) <= bin_resolution(rate, source.frame_size)

    def test_frequency_change_while_running(self):
        source = SineWaveSource(240.0)
        source.start()
        source.next_frame()
        source.frequency = 360.0
        mags, rate = source.next_frame()
        assert abs(estimate_pitch(mags, rate) - 360.0) <= bin_resolution(rate, 4096)

    def test_stop(self):
        source = SineWaveSource(240.0)
        source.start()
        source.stop()
        assert source.next_frame() is None


class TestAudioSession:

    def test_context_manager_opens_and_closes(self):
        source = SineWaveSource(240.0)
        with AudioSession(source) as session:
            assert session.is_open
            assert source.running
            assert session.next_frame() is not None
        assert not session.is_open
        assert not source.running

    def test_closed_on_exception(self):
        source = SineWaveSource(240.0)
        with pytest.raises(RuntimeError):
            with AudioSession(source):
                raise RuntimeError("boom")
        assert not source.running

    def test_failed_open_releases_source(self):
        source = FailingSource()
        session = AudioSession(source)
        with pytest.raises(AudioSourceError):
            session.open()
        assert source.stop_calls == 1
        assert not source.acquired
        assert not session.is_open

    def test_failed_open_keeps_source_error(self):
        err = AudioSourceError("device busy")
        with pytest.raises(AudioSourceError) as exc_info:
            AudioSession(FailingSource(err)).open()
        assert exc_info.value is err

    def test_next_frame_requires_open(self):
        session = AudioSession(SineWaveSource(240.0))
        with pytest.raises(AudioSessionClosed):
            session.next_frame()
        session.open()
        session.close()
        with pytest.raises(AudioSessionClosed):
            session.next_frame()

    def test_close_is_idempotent(self):
        session = AudioSession(SineWaveSource(240.0)).open()
        session.close()
        session.close()
        assert not session.is_open

    def test_open_twice_is_noop(self):
        session = AudioSession(SineWaveSource(240.0))
        assert session.open() is session.open()
        session.close()


class TestFactory:

    def test_sine(self):
        source = get_source("sine", frequency=300.0)
        assert isinstance(source, SineWaveSource)
        assert source.frequency == 300.0

    def test_name_is_case_insensitive(self):
        assert get_source("SINE").name == "sine"

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown audio source"):
            get_source("line-in")

    def test_list_sources(self):
        sources = list_sources()
        assert sources['sine'] == 'available'
        assert 'microphone' in sources

    def test_default_source_prefers_microphone(self, monkeypatch):
        monkeypatch.setattr(audio_source, "list_sources",
                            lambda: {'microphone': 'available', 'sine': 'available'})
        assert default_source() == "microphone"

    def test_default_source_falls_back_to_sine(self, monkeypatch, capsys):
        monkeypatch.setattr(audio_source, "list_sources",
                            lambda: {'microphone': "unavailable: No module named 'pyaudio'",
                                     'sine': 'available'})
        assert default_source() == "sine"
        assert "using sine" in capsys.readouterr().out

    def test_default_source_unknown_name(self):
        assert default_source("line-in") == "sine"

    def test_microphone_construction(self):
        pytest.importorskip("pyaudio")
        source = get_source("microphone")
        assert source.name == "microphone"
        assert source.next_frame() is None
