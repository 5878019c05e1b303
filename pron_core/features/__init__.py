"""Audio front-end: log-mel features and speech rate."""
from .mel import MelSpectrogram, compute_mel_spectrogram
from .speech_rate import estimate_speech_rate, select_hop_length

__all__ = [
    "MelSpectrogram",
    "compute_mel_spectrogram",
    "estimate_speech_rate",
    "select_hop_length",
]
