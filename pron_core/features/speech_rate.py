"""Speech rate estimation for adaptive mel hop length."""
from __future__ import annotations

import numpy as np

from pron_core.config import (
    DEFAULT_SPEECH_RATE_WPM,
    HOP_LENGTH,
    HOP_LENGTH_TIERS,
    MIN_SPEECH_RATE_FRAMES,
    SAMPLE_RATE,
    SPEECH_RATE_FRAME,
    SPEECH_RATE_HOP,
    SPEECH_RATE_PEAK_RATIO,
    SPEECH_RATE_SMOOTH,
    SYLLABLES_PER_WORD,
)
from pron_core.utils import round_half_up


def frame_rms(audio: np.ndarray, n_frames: int) -> np.ndarray:
    """RMS energy of ``n_frames`` 20ms frames (samples past the end count as 0)."""
    needed = (n_frames - 1) * SPEECH_RATE_HOP + SPEECH_RATE_FRAME
    padded = np.zeros(max(needed, len(audio)), dtype=np.float64)
    padded[:len(audio)] = audio
    starts = np.arange(n_frames) * SPEECH_RATE_HOP
    frames = padded[starts[:, None] + np.arange(SPEECH_RATE_FRAME)[None, :]]
    return np.sqrt(np.sum(frames * frames, axis=1) / SPEECH_RATE_FRAME)


def smooth_envelope(energy: np.ndarray, radius: int = SPEECH_RATE_SMOOTH) -> np.ndarray:
    """Centered moving average; windows are truncated at the edges."""
    cumsum = np.concatenate([[0.0], np.cumsum(energy)])
    idx = np.arange(len(energy))
    lo = np.maximum(0, idx - radius)
    hi = np.minimum(len(energy) - 1, idx + radius) + 1
    return (cumsum[hi] - cumsum[lo]) / (hi - lo)


def count_peaks(envelope: np.ndarray, ratio: float = SPEECH_RATE_PEAK_RATIO) -> int:
    """Count strict local maxima above ``ratio`` times the envelope maximum."""
    if len(envelope) < 3:
        return 0
    threshold = max(float(np.max(envelope)), 0.0) * ratio
    mid = envelope[1:-1]
    is_peak = (mid > envelope[:-2]) & (mid > envelope[2:]) & (mid > threshold)
    return int(np.count_nonzero(is_peak))


def estimate_speech_rate(audio: np.ndarray) -> int:
    """Estimate words per minute from the syllable rate of the energy envelope.

    Each envelope peak counts as one syllable; an English word averages 1.4
    syllables.

    Args:
        audio: 16kHz mono samples

    Returns:
        Estimated WPM; 150 for clips too short to measure
    """
    audio = np.asarray(audio, dtype=np.float64).ravel()
    n_frames = max(1, (len(audio) - SPEECH_RATE_FRAME) // SPEECH_RATE_HOP)
    if n_frames < MIN_SPEECH_RATE_FRAMES:
        return DEFAULT_SPEECH_RATE_WPM

    envelope = smooth_envelope(frame_rms(audio, n_frames))
    peaks = count_peaks(envelope)

    duration_sec = len(audio) / SAMPLE_RATE
    syllables_per_sec = peaks / duration_sec
    return round_half_up(syllables_per_sec / SYLLABLES_PER_WORD * 60)


def select_hop_length(audio: np.ndarray) -> int:
    """Pick the mel hop length from the speech rate: faster speech, finer hop."""
    wpm = estimate_speech_rate(audio)
    for min_wpm, hop in HOP_LENGTH_TIERS:
        if wpm > min_wpm:
            return hop
    return HOP_LENGTH
