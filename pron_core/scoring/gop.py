"""Goodness-of-pronunciation scoring from a CTC forced alignment."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from pron_core.alignment.normalizer import split_words
from pron_core.config import GOP_DEFAULT_LOG_PROB
from pron_core.ctc.tokenizer import word_token_ranges
from pron_core.ctc.viterbi import Alignment
from pron_core.ctc.vocabulary import Vocabulary
from pron_core.models.pronunciation import (
    PhonemeScore,
    PronunciationResult,
    WordPronunciationResult,
)
from pron_core.phonetics.cmudict import CmuDict, get_phonemes
from pron_core.phonetics.phone_mapper import phoneme_to_ipa
from pron_core.utils import gop_sigmoid, mean_score, round_half_up

logger = logging.getLogger(__name__)


def _find_token(tokens: Sequence[int], start_idx: int, target: int) -> int:
    """Index of ``target`` searching forward from ``start_idx``, then backward."""
    for i in range(start_idx, len(tokens)):
        if tokens[i] == target:
            return i
    for i in range(start_idx - 1, -1, -1):
        if tokens[i] == target:
            return i
    return -1


def attribute_frames_to_tokens(
    alignment: Alignment,
    tokens: Sequence[int],
    blank_id: int,
) -> List[List[float]]:
    """Collect per-frame log-probs for each expected token.

    Walks the alignment with a cursor on the expected tokens. A non-blank
    frame that does not match the cursor is attributed to the nearest
    matching token (forward first); the cursor only moves forward. Frames
    whose symbol is not in the token list are dropped.
    """
    token_scores: List[List[float]] = [[] for _ in tokens]
    n_tokens = len(tokens)
    symbols = [int(s) for s in alignment.tokens]
    scores = [float(s) for s in alignment.scores]

    token_idx = 0
    for t, symbol in enumerate(symbols):
        if symbol == blank_id or token_idx >= n_tokens:
            continue

        if symbol == tokens[token_idx]:
            token_scores[token_idx].append(scores[t])
        else:
            found = _find_token(tokens, token_idx, symbol)
            if found >= 0:
                token_scores[found].append(scores[t])
                if found >= token_idx:
                    token_idx = found

        if token_scores[token_idx] and token_idx < n_tokens - 1:
            # Move on when the next frame starts the next token
            if t + 1 < len(symbols) and symbols[t + 1] == tokens[token_idx + 1]:
                token_idx += 1

    return token_scores


def distribute_score_to_phonemes(phonemes: Sequence[str], frame_scores: Sequence[float]) -> List[PhonemeScore]:
    """Split a word's frames evenly across its phonemes and score each slice.

    Args:
        phonemes: ARPAbet phonemes of the word
        frame_scores: Log-probabilities of the frames attributed to the word

    Returns:
        One PhonemeScore per phoneme, in IPA
    """
    n_phonemes = len(phonemes)
    n_frames = len(frame_scores)

    results: List[PhonemeScore] = []
    for pi, ph in enumerate(phonemes):
        if n_frames == 0:
            avg_lp = GOP_DEFAULT_LOG_PROB
        else:
            start = (pi * n_frames) // n_phonemes
            end = max(start + 1, ((pi + 1) * n_frames) // n_phonemes)
            avg_lp = mean_score(frame_scores[start:min(end, n_frames)], default=GOP_DEFAULT_LOG_PROB)
        results.append(PhonemeScore(phoneme=phoneme_to_ipa(ph), score=gop_sigmoid(avg_lp), expected=True))
    return results


def compute_gop_scores(
    alignment: Alignment,
    tokens: Sequence[int],
    expected_text: str,
    vocabulary: Optional[Vocabulary],
    cmu_dict: Optional[CmuDict] = None,
) -> PronunciationResult:
    """Turn a forced alignment into word and phoneme scores.

    Word scores are the rounded mean of their phoneme scores (0-100); words
    missing from the pronunciation dictionary are scored as a single unit.
    The overall score is the rounded mean of word scores.

    Args:
        alignment: Viterbi path for ``tokens``
        tokens: Expected token ids
        expected_text: Expected text (as given by the caller)
        vocabulary: Loaded vocabulary, or None
        cmu_dict: Optional pre-loaded CMUdict

    Returns:
        PronunciationResult (empty with score 0 when there is nothing to score)
    """
    words = split_words(expected_text)
    if vocabulary is None or not words:
        return PronunciationResult(words=(), overall_score=0, transcript=expected_text)

    ranges = word_token_ranges(tokens, vocabulary)
    token_scores = attribute_frames_to_tokens(alignment, tokens, vocabulary.blank_id)

    word_results: List[WordPronunciationResult] = []
    for word, (start, end) in zip(words, ranges):
        frame_scores = [s for ti in range(start, end) for s in token_scores[ti]]

        phonemes = get_phonemes(word, cmu_dict)
        if phonemes:
            phoneme_scores = distribute_score_to_phonemes(phonemes, frame_scores)
        else:
            avg_lp = mean_score(frame_scores, default=GOP_DEFAULT_LOG_PROB)
            phoneme_scores = [PhonemeScore(phoneme=word, score=gop_sigmoid(avg_lp), expected=True)]

        word_score = round_half_up(mean_score(p.score for p in phoneme_scores) * 100)
        word_results.append(
            WordPronunciationResult(word=word, phonemes=tuple(phoneme_scores), score=word_score)
        )

    if len(ranges) != len(words):
        logger.debug("Token ranges (%d) and words (%d) differ", len(ranges), len(words))

    overall = round_half_up(mean_score(w.score for w in word_results)) if word_results else 0
    return PronunciationResult(words=tuple(word_results), overall_score=overall, transcript=expected_text)
