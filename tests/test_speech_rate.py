import numpy as np
import pytest

from pron_core.features import speech_rate
from pron_core.features.speech_rate import (
    count_peaks,
    estimate_speech_rate,
    select_hop_length,
    smooth_envelope,
)


@pytest.mark.parametrize("n", [0, 10, 320, 1000, 1119])
def test_short_audio_returns_default(n):
    assert estimate_speech_rate(np.zeros(n)) == 150


def test_silence_is_zero():
    assert estimate_speech_rate(np.zeros(16000)) == 0


def test_syllable_bursts_give_positive_rate():
    sr = 16000
    t = np.arange(2 * sr) / sr
    # 4 Hz amplitude modulation ~ 4 syllables per second
    audio = np.sin(2 * np.pi * 200 * t) * np.clip(np.sin(2 * np.pi * 4 * t), 0, None)
    wpm = estimate_speech_rate(audio)
    assert 0 < wpm < 400


@pytest.mark.parametrize("seed", range(3))
def test_random_input_finite_non_negative(seed):
    audio = np.random.default_rng(seed).normal(size=8000)
    wpm = estimate_speech_rate(audio)
    assert np.isfinite(wpm) and wpm >= 0


def test_count_peaks_threshold():
    envelope = np.array([0.0, 1.0, 0.0, 2.0, 0.0, 0.1, 0.0])
    assert count_peaks(envelope) == 2


def test_count_peaks_plateau_is_not_a_peak():
    assert count_peaks(np.array([0.0, 1.0, 1.0, 0.0])) == 0


def test_smooth_envelope_truncates_edges():
    out = smooth_envelope(np.array([1.0, 0.0, 0.0, 0.0]), radius=1)
    assert out == pytest.approx([0.5, 1 / 3, 0.0, 0.0])


@pytest.mark.parametrize("wpm,hop", [(300, 80), (241, 80), (240, 120), (181, 120), (180, 160), (0, 160)])
def test_select_hop_length_tiers(monkeypatch, wpm, hop):
    monkeypatch.setattr(speech_rate, "estimate_speech_rate", lambda audio: wpm)
    assert select_hop_length(np.zeros(10)) == hop
