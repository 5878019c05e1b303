"""Audio file loading."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Union

import librosa
import numpy as np

from .config import SAMPLE_RATE
from .errors import AudioDecodeError

logger = logging.getLogger(__name__)


def load_audio_16k_mono(source: Union[str, Path, BinaryIO]) -> np.ndarray:
    """Decode an audio file to float32 16kHz mono samples.

    Raises:
        AudioDecodeError: If librosa cannot read or decode the source
    """
    try:
        audio, _ = librosa.load(source, sr=SAMPLE_RATE, mono=True)
    except Exception as e:
        # soundfile, audioread and ffmpeg backends each raise their own types
        logger.warning("Could not decode audio %s: %s", source, e)
        raise AudioDecodeError(f"Could not decode audio: {e}") from e
    return np.asarray(audio, dtype=np.float32)
