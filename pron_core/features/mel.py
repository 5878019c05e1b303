"""80-band log-mel spectrogram matching the acoustic model's preprocessor.

Window 25ms, 512-point FFT, HTK mel scale, per-feature normalization.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import numpy as np

from pron_core.config import (
    DITHER,
    LOG_FLOOR,
    MEL_FMAX,
    MEL_FMIN,
    N_FFT,
    N_MELS,
    PRE_EMPHASIS,
    SAMPLE_RATE,
    WIN_LENGTH,
)
from .speech_rate import select_hop_length


@dataclass(frozen=True)
class MelSpectrogram:
    """Normalized log-mel features.

    Attributes:
        features: float32 array of shape ``(80, num_frames)``
        num_frames: Number of analysis frames
        hop_length: Hop (in samples) the frames were computed with
    """
    features: np.ndarray
    num_frames: int
    hop_length: int

    def as_model_input(self) -> np.ndarray:
        """``[1, 80, T]`` float32 batch for the acoustic model."""
        return self.features[np.newaxis, :, :].astype(np.float32, copy=False)


def hz_to_mel(hz):
    return 2595.0 * np.log10(1.0 + np.asarray(hz, dtype=np.float64) / 700.0)


def mel_to_hz(mel):
    return 700.0 * (np.power(10.0, np.asarray(mel, dtype=np.float64) / 2595.0) - 1.0)


@lru_cache(maxsize=1)
def hann_window(length: int = WIN_LENGTH) -> np.ndarray:
    i = np.arange(length, dtype=np.float64)
    return 0.5 * (1.0 - np.cos(2.0 * np.pi * i / length))


@lru_cache(maxsize=1)
def mel_filterbank(
    n_mels: int = N_MELS,
    n_fft: int = N_FFT,
    sample_rate: int = SAMPLE_RATE,
    fmin: float = MEL_FMIN,
    fmax: float = MEL_FMAX,
) -> np.ndarray:
    """Triangular filters on floored FFT bin points, shape ``(n_mels, n_fft//2 + 1)``."""
    n_freqs = n_fft // 2 + 1
    mel_points = np.linspace(hz_to_mel(fmin), hz_to_mel(fmax), n_mels + 2)
    bin_points = np.floor((n_fft + 1) * mel_to_hz(mel_points) / sample_rate)

    k = np.arange(n_freqs, dtype=np.float64)
    filters = np.zeros((n_mels, n_freqs), dtype=np.float64)
    for m in range(n_mels):
        start, center, end = bin_points[m], bin_points[m + 1], bin_points[m + 2]
        if center > start:
            rising = (k >= start) & (k <= center)
            filters[m, rising] = (k[rising] - start) / (center - start)
        if end > center:
            falling = (k > center) & (k <= end)
            filters[m, falling] = (end - k[falling]) / (end - center)
    return filters


def pre_emphasis(audio: np.ndarray, coef: float = PRE_EMPHASIS) -> np.ndarray:
    if len(audio) == 0:
        return audio.copy()
    out = np.empty_like(audio)
    out[0] = audio[0]
    out[1:] = audio[1:] - coef * audio[:-1]
    return out


def gaussian_dither(n: int, rng: np.random.Generator, scale: float = DITHER) -> np.ndarray:
    """Box-Muller gaussian noise scaled by ``scale``."""
    u1 = rng.random(n)
    u1[u1 == 0.0] = 1e-10
    u2 = rng.random(n)
    return scale * np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


def compute_mel_spectrogram(
    audio: np.ndarray,
    hop_length: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    dither: float = DITHER,
) -> MelSpectrogram:
    """Compute the normalized 80-channel log-mel spectrogram.

    Args:
        audio: 16kHz mono samples (any length, including empty)
        hop_length: Fixed hop in samples; chosen from the speech rate if None
        rng: Random generator for dither (a fresh one if None)
        dither: Dither standard deviation; 0 disables it

    Returns:
        MelSpectrogram with at least one frame
    """
    audio = np.asarray(audio, dtype=np.float64).ravel()
    if hop_length is None:
        hop_length = select_hop_length(audio)

    signal = pre_emphasis(audio)
    if dither > 0 and len(signal) > 0:
        if rng is None:
            rng = np.random.default_rng()
        signal = signal + gaussian_dither(len(signal), rng, dither)

    num_frames = max(1, 1 + (len(signal) - WIN_LENGTH) // hop_length)

    # Zero-pad so every frame has a full window
    padded_len = (num_frames - 1) * hop_length + WIN_LENGTH
    padded = np.zeros(max(padded_len, len(signal)), dtype=np.float64)
    padded[:len(signal)] = signal

    offsets = np.arange(num_frames) * hop_length
    frames = padded[offsets[:, None] + np.arange(WIN_LENGTH)[None, :]] * hann_window(WIN_LENGTH)

    spectrum = np.fft.rfft(frames, n=N_FFT, axis=1)
    power = spectrum.real ** 2 + spectrum.imag ** 2

    mel_energy = power @ mel_filterbank().T  # (T, 80)
    log_mel = np.log(np.maximum(mel_energy, LOG_FLOOR)).T  # (80, T)

    mean = log_mel.mean(axis=1, keepdims=True)
    std = log_mel.std(axis=1, keepdims=True)
    std[std == 0] = 1.0
    # Constant bands (e.g. silence at the log floor) normalize to exactly 0
    centered = np.where(np.ptp(log_mel, axis=1, keepdims=True) == 0, 0.0, log_mel - mean)
    features = (centered / std).astype(np.float32)

    return MelSpectrogram(features=features, num_frames=num_frames, hop_length=hop_length)
