"""Acoustic model runners and resource loading."""
from .acoustic_model import (
    AcousticModel,
    OnnxAcousticModel,
    TorchScriptAcousticModel,
    load_acoustic_model,
)
from .resources import fetch_text, fetch_to_file, resolve_tokens_location

__all__ = [
    "AcousticModel",
    "OnnxAcousticModel",
    "TorchScriptAcousticModel",
    "load_acoustic_model",
    "fetch_text",
    "fetch_to_file",
    "resolve_tokens_location",
]
