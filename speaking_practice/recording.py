"""Capture-side helpers: chunk buffer, capture error messages, environment check."""
from __future__ import annotations

import importlib.util
import logging
from typing import BinaryIO, Iterable, Iterator, List, Optional

import numpy as np

from pron_core.config import CAPTURE_CHUNK_SAMPLES
from pron_core.errors import (
    AudioCaptureError,
    EnvironmentCompatibilityError,
    MicrophoneNotFoundError,
    MicrophonePermissionError,
    NoSpeechDetectedError,
)

logger = logging.getLogger(__name__)

NO_SPEECH_MESSAGE = "No speech detected. Please try again."
PERMISSION_DENIED_MESSAGE = "Microphone access denied. Please allow microphone access."
NO_DEVICE_MESSAGE = "No microphone found. Please check your device."
GENERIC_CAPTURE_MESSAGE = "Failed to access microphone."
RUNTIME_MISSING_MESSAGE = "ONNX Runtime is not available. Install the onnxruntime package."


class AudioBuffer:
    """Accumulates fixed-size float32 chunks from a capture callback.

    Chunks are copied on ``append`` since capture backends reuse their
    buffers; concatenation happens once in ``consume``.
    """

    def __init__(self):
        self._chunks: List[np.ndarray] = []

    def __len__(self) -> int:
        return sum(len(c) for c in self._chunks)

    def append(self, chunk) -> None:
        self._chunks.append(np.array(chunk, dtype=np.float32, copy=True).ravel())

    def consume(self) -> np.ndarray:
        """Concatenate and clear the captured audio.

        Raises:
            NoSpeechDetectedError: Nothing was captured
        """
        if not self._chunks:
            raise NoSpeechDetectedError(NO_SPEECH_MESSAGE)
        audio = np.concatenate(self._chunks)
        self._chunks = []
        logger.debug("Captured %d samples", len(audio))
        return audio

    def reset(self) -> None:
        self._chunks = []

    def record(self, chunks: Iterable) -> np.ndarray:
        """Run one capture from start to stop.

        Prior state is discarded, every chunk the producer yields is
        appended, and the audio is consumed once the producer is exhausted.

        Args:
            chunks: Producer of float32 sample chunks

        Returns:
            The concatenated recording

        Raises:
            AudioCaptureError: The producer failed (message per failure kind)
            NoSpeechDetectedError: The producer yielded nothing
        """
        self.reset()
        try:
            for chunk in chunks:
                self.append(chunk)
        except (AudioCaptureError, OSError) as e:
            self.reset()
            raise capture_error(e) from e
        return self.consume()


def acquisition_error_message(exc: BaseException) -> str:
    """User-facing message for a failure to open the microphone."""
    if isinstance(exc, (MicrophonePermissionError, PermissionError)):
        return PERMISSION_DENIED_MESSAGE
    if isinstance(exc, MicrophoneNotFoundError):
        return NO_DEVICE_MESSAGE
    if str(exc):
        return f"Audio error: {exc}"
    return GENERIC_CAPTURE_MESSAGE


def capture_error(exc: BaseException) -> AudioCaptureError:
    """Wrap a producer failure in the matching AudioCaptureError subclass."""
    message = acquisition_error_message(exc)
    if isinstance(exc, (MicrophonePermissionError, PermissionError)):
        return MicrophonePermissionError(message)
    if isinstance(exc, MicrophoneNotFoundError):
        return MicrophoneNotFoundError(message)
    return AudioCaptureError(message)


def read_chunks(stream: BinaryIO, chunk_samples: int = CAPTURE_CHUNK_SAMPLES) -> Iterator[np.ndarray]:
    """Yield float32 little-endian chunks from a raw PCM byte stream.

    Used for piped capture, e.g. ``arecord -f FLOAT_LE -r 16000 -c 1 -t raw``.
    A trailing partial sample is dropped.
    """
    chunk_bytes = chunk_samples * 4
    while True:
        data = stream.read(chunk_bytes)
        if not data:
            return
        usable = len(data) - len(data) % 4
        if usable:
            yield np.frombuffer(data[:usable], dtype="<f4")


def check_environment() -> Optional[str]:
    """Message describing a missing runtime capability, or None if all is well."""
    if importlib.util.find_spec("onnxruntime") is None:
        return RUNTIME_MISSING_MESSAGE
    return None


def ensure_environment() -> None:
    """Raise EnvironmentCompatibilityError when ``check_environment`` fails."""
    message = check_environment()
    if message:
        raise EnvironmentCompatibilityError(message)
