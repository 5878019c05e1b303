import numpy as np
import pytest

from pron_core import audio
from pron_core.errors import AudioDecodeError


def test_load_resamples_to_mono_float32(monkeypatch):
    calls = {}

    def fake_load(source, sr, mono):
        calls.update(source=source, sr=sr, mono=mono)
        return np.zeros(8, dtype=np.float64), sr

    monkeypatch.setattr(audio.librosa, "load", fake_load)
    samples = audio.load_audio_16k_mono("attempt.wav")
    assert samples.dtype == np.float32
    assert calls == {"source": "attempt.wav", "sr": 16000, "mono": True}


def test_decode_failure_is_wrapped(monkeypatch):
    def broken(source, sr, mono):
        raise EOFError("truncated header")

    monkeypatch.setattr(audio.librosa, "load", broken)
    with pytest.raises(AudioDecodeError, match="truncated header"):
        audio.load_audio_16k_mono("attempt.wav")
