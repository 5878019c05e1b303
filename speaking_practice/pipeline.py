"""Pronunciation scoring pipeline.

audio -> log-mel -> acoustic model -> greedy decode + forced alignment
-> GOP scores -> optional L1 adjustment.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Optional

import numpy as np

from pron_core.alignment.aligner import compare_texts
from pron_core.asr.acoustic_model import AcousticModel, load_acoustic_model
from pron_core.asr.resources import fetch_text, fetch_to_file, resolve_tokens_location
from pron_core.ctc.decode import greedy_decode
from pron_core.ctc.tokenizer import tokenize_text
from pron_core.ctc.viterbi import viterbi_align
from pron_core.ctc.vocabulary import Vocabulary
from pron_core.errors import ModelLoadError
from pron_core.features.mel import MelSpectrogram, compute_mel_spectrogram
from pron_core.models.pronunciation import PronunciationResult
from pron_core.models.word_result import CompareResult
from pron_core.phonetics.accent_tolerance import apply_l1_scoring
from pron_core.phonetics.cmudict import CmuDict
from pron_core.scoring.gop import compute_gop_scores
from .recording import ensure_environment

logger = logging.getLogger(__name__)


def result_to_dict(result: Any) -> Dict[str, Any]:
    """JSON-ready dict for PronunciationResult / CompareResult."""
    return dataclasses.asdict(result)


class PronunciationScorer:
    """Holds the loaded vocabulary, dictionary and acoustic model.

    Constructed once and read-only afterwards, so a single instance can
    serve concurrent requests.

    Args:
        vocabulary: Model vocabulary
        model: Acoustic model runner (only needed for audio scoring)
        cmu_dict: Pre-loaded CMUdict (loaded lazily through NLTK if None)
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        model: Optional[AcousticModel] = None,
        cmu_dict: Optional[CmuDict] = None,
    ):
        self.vocabulary = vocabulary
        self.model = model
        self.cmu_dict = cmu_dict

    @classmethod
    def from_model_url(cls, model_url: str, cmu_dict: Optional[CmuDict] = None, **model_kwargs) -> "PronunciationScorer":
        """Load ``tokens.txt`` (sibling of the model) and then the model.

        Raises:
            EnvironmentCompatibilityError: If ONNX Runtime is unavailable
            ModelLoadError: If either resource cannot be loaded
        """
        ensure_environment()
        tokens_location = resolve_tokens_location(model_url)
        logger.info("Loading vocabulary from %s", tokens_location)
        vocabulary = Vocabulary.from_text(fetch_text(tokens_location))
        if len(vocabulary) == 0:
            raise ModelLoadError(f"No tokens found in {tokens_location}")

        logger.info("Loading acoustic model from %s", model_url)
        model = load_acoustic_model(fetch_to_file(model_url), **model_kwargs)
        return cls(vocabulary, model=model, cmu_dict=cmu_dict)

    def process_ctc_output(self, log_probs: np.ndarray, expected_text: str) -> PronunciationResult:
        """Score model output ``[T, V]`` against the expected text."""
        log_probs = np.asarray(log_probs)
        decoded = greedy_decode(log_probs, self.vocabulary)
        tokens = tokenize_text(expected_text, self.vocabulary)

        if not tokens:
            return PronunciationResult(
                words=(), overall_score=0, transcript=expected_text, decoded_transcript=decoded
            )

        alignment = viterbi_align(log_probs, tokens, self.vocabulary.blank_id)
        result = compute_gop_scores(alignment, tokens, expected_text, self.vocabulary, self.cmu_dict)
        logger.info("Scored %d words, overall=%d, heard=%r", len(result.words), result.overall_score, decoded)
        return dataclasses.replace(result, decoded_transcript=decoded)

    def _require_model(self) -> AcousticModel:
        if self.model is None:
            raise ModelLoadError("Model not loaded")
        return self.model

    def apply_l1(self, result: PronunciationResult, l1: Optional[str]) -> PronunciationResult:
        """L1 accent adjustment when a language tag is given."""
        if l1:
            result = apply_l1_scoring(result, l1, self.cmu_dict)
        return result

    def score(
        self,
        audio: np.ndarray,
        expected_text: str,
        l1: Optional[str] = None,
        mel: Optional[MelSpectrogram] = None,
    ) -> PronunciationResult:
        """Score one recording.

        Args:
            audio: 16kHz mono samples
            expected_text: Text the learner was asked to say
            l1: Native language tag for accent adjustment (None = none)
            mel: Precomputed features (computed from ``audio`` if None)

        Raises:
            ModelLoadError: No acoustic model is loaded
            ModelInferenceError: The model failed
        """
        model = self._require_model()
        if mel is None:
            mel = compute_mel_spectrogram(audio)
        log_probs = model.run(mel)
        return self.apply_l1(self.process_ctc_output(log_probs, expected_text), l1)

    async def ascore(
        self,
        audio: np.ndarray,
        expected_text: str,
        l1: Optional[str] = None,
        mel: Optional[MelSpectrogram] = None,
    ) -> PronunciationResult:
        """Async ``score``; only model inference leaves the event loop."""
        model = self._require_model()
        if mel is None:
            mel = compute_mel_spectrogram(audio)
        log_probs = await model.arun(mel)
        return self.apply_l1(self.process_ctc_output(log_probs, expected_text), l1)

    @staticmethod
    def compare(expected: str, spoken: str) -> CompareResult:
        """Word-level diff for a plain transcript (no acoustic model)."""
        return compare_texts(expected, spoken)
