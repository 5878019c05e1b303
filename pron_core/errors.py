"""Exception hierarchy for the pronunciation scoring pipeline."""
from __future__ import annotations


class PronunciationError(Exception):
    """Base class for all scoring pipeline errors."""


class EnvironmentCompatibilityError(PronunciationError):
    """A required runtime capability is missing; raised before any stage runs."""


class AudioCaptureError(PronunciationError):
    """Generic failure while acquiring microphone audio."""


class MicrophonePermissionError(AudioCaptureError):
    """Microphone access was denied."""


class MicrophoneNotFoundError(AudioCaptureError):
    """No capture device is available."""


class NoSpeechDetectedError(PronunciationError):
    """Recording stopped before any audio was captured."""


class ModelError(PronunciationError):
    """Base class for acoustic model failures."""


class ModelLoadError(ModelError):
    """The acoustic model or its vocabulary could not be loaded."""


class ModelInferenceError(ModelError):
    """The acoustic model failed while running inference."""


class AudioDecodeError(PronunciationError):
    """An audio file could not be decoded."""
