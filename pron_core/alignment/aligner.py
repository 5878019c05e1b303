"""Word-level comparison of an expected text against a spoken transcript.

This is the fallback scorer used when no acoustic model output is available
(e.g. the transcript came from a grammar-free recognizer).
"""
from __future__ import annotations

from typing import List

from jiwer import wer

from pron_core.models.word_result import CompareResult, WordResult
from pron_core.utils import round_half_up
from .edit_distance import build_diff, compute_lcs
from .normalizer import split_words


def word_error_rate(original_words: List[str], spoken_words: List[str]) -> float:
    """WER of the spoken words against the expected words.

    Returns 0.0 when both are empty and 1.0 when only the expected side is.
    """
    if not original_words:
        return 1.0 if spoken_words else 0.0
    if not spoken_words:
        return 1.0
    return float(wer(" ".join(original_words), " ".join(spoken_words)))


def compare_texts(original: str, spoken: str) -> CompareResult:
    """Compare what the learner should have said with what was recognized.

    Example: compare_texts("the cat sat on the mat", "the cat on the mat")
    -> score 83, "sat" marked missing.

    Args:
        original: Expected text
        spoken: Recognized transcript

    Returns:
        CompareResult with per-word statuses and an integer score in [0, 100]
    """
    original_words = split_words(original)
    spoken_words = split_words(spoken)
    error_rate = word_error_rate(original_words, spoken_words)

    if not original_words:
        extra = tuple(WordResult(w, "extra") for w in spoken_words)
        return CompareResult(words=extra, score=0 if extra else 100, wer=error_rate)

    if not spoken_words:
        missing = tuple(WordResult(w, "missing") for w in original_words)
        return CompareResult(words=missing, score=0, wer=error_rate)

    dp = compute_lcs(original_words, spoken_words)
    words = build_diff(original_words, spoken_words, dp)

    correct = sum(1 for w in words if w.status == "correct")
    score = round_half_up(100 * correct / len(original_words))
    return CompareResult(words=tuple(words), score=score, wer=error_rate)
