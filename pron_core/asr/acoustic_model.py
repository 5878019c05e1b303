"""Acoustic model runners: mel spectrogram in, ``[T, V]`` frame scores out.

The model itself is an opaque black box. ONNX Runtime is the default
backend; TorchScript exports are supported when torch is installed.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import onnxruntime as ort

from pron_core.config import ONNX_INPUT_NAMES, ONNX_PROVIDERS
from pron_core.ctc.decode import log_softmax
from pron_core.errors import ModelInferenceError, ModelLoadError
from pron_core.features.mel import MelSpectrogram

logger = logging.getLogger(__name__)

ModelSource = Union[str, Path, bytes]


class AcousticModel:
    """Base runner.

    Subclasses implement ``_forward(features, length)`` returning the raw
    ``[1, T, V]`` (or ``[T, V]``) output.

    Args:
        outputs_log_probs: Whether the model already emits log-probabilities;
            if False, log-softmax is applied to its logits
    """

    def __init__(self, outputs_log_probs: bool = True):
        self.outputs_log_probs = outputs_log_probs

    def _forward(self, features: np.ndarray, length: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def run(self, mel: MelSpectrogram) -> np.ndarray:
        """Run inference on one utterance.

        Raises:
            ModelInferenceError: If the backend fails or returns a bad shape
        """
        features = mel.as_model_input()
        length = np.array([mel.num_frames], dtype=np.int64)
        try:
            output = np.asarray(self._forward(features, length))
        except Exception as e:
            raise ModelInferenceError(str(e)) from e

        if output.ndim == 3:
            output = output[0]
        if output.ndim != 2:
            raise ModelInferenceError(f"Unexpected model output shape {output.shape}")

        if not self.outputs_log_probs:
            output = log_softmax(output, axis=-1)
        logger.debug("Acoustic model: %d mel frames -> %s", mel.num_frames, output.shape)
        return output

    async def arun(self, mel: MelSpectrogram) -> np.ndarray:
        """Async wrapper; inference runs in a worker thread."""
        return await asyncio.to_thread(self.run, mel)


class OnnxAcousticModel(AcousticModel):
    """ONNX Runtime session over a CTC export.

    Args:
        source: Model path or serialized model bytes
        providers: Execution providers (configured defaults if None)
        input_names: Names of the features and length inputs
        outputs_log_probs: See AcousticModel
    """

    def __init__(
        self,
        source: ModelSource,
        providers: Optional[Sequence[str]] = None,
        input_names: Tuple[str, str] = ONNX_INPUT_NAMES,
        outputs_log_probs: bool = True,
    ):
        super().__init__(outputs_log_probs=outputs_log_probs)
        self.input_names = input_names
        options = ort.SessionOptions()
        options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        model = str(source) if isinstance(source, Path) else source
        try:
            self.sess = ort.InferenceSession(model, sess_options=options, providers=list(providers or ONNX_PROVIDERS))
        except Exception as e:
            raise ModelLoadError(str(e)) from e
        self.output_name = self.sess.get_outputs()[0].name
        logger.info("Loaded ONNX acoustic model (output=%s)", self.output_name)

    def _forward(self, features: np.ndarray, length: np.ndarray) -> np.ndarray:
        features_name, length_name = self.input_names
        outputs = self.sess.run([self.output_name], {features_name: features, length_name: length})
        return outputs[0]


class TorchScriptAcousticModel(AcousticModel):
    """TorchScript export called as ``module(features, length)``. Needs the torch extra."""

    def __init__(self, source: Union[str, Path], device: str = "cpu", outputs_log_probs: bool = True):
        super().__init__(outputs_log_probs=outputs_log_probs)
        try:
            import torch
        except ImportError as e:
            raise ModelLoadError("TorchScript models need torch: pip install 'pron-scorer[torch]'") from e
        self._torch = torch
        self.device = device
        try:
            self.module = torch.jit.load(str(source), map_location=device)
        except Exception as e:
            raise ModelLoadError(str(e)) from e
        self.module.eval()
        logger.info("Loaded TorchScript acoustic model on %s", device)

    def _forward(self, features: np.ndarray, length: np.ndarray) -> np.ndarray:
        torch = self._torch
        with torch.inference_mode():
            out = self.module(
                torch.from_numpy(features).to(self.device),
                torch.from_numpy(length).to(self.device),
            )
        if isinstance(out, (tuple, list)):
            out = out[0]
        return out.detach().cpu().numpy()


def load_acoustic_model(source: ModelSource, **kwargs) -> AcousticModel:
    """Pick a runner from the model file suffix (``.pt``/``.ts`` -> TorchScript)."""
    if not isinstance(source, bytes) and Path(str(source)).suffix in (".pt", ".ts"):
        return TorchScriptAcousticModel(source, **kwargs)
    return OnnxAcousticModel(source, **kwargs)
