"""Data model for GOP-based pronunciation results."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class PhonemeScore:
    """Score for one expected phoneme.

    Attributes:
        phoneme: Phoneme in display notation (IPA), or the whole word when
            the word has no dictionary pronunciation
        score: Pronunciation score in [0, 1]
        expected: Whether the phoneme belongs to the expected pronunciation
        l1_feedback: Why the score was adjusted for the speaker's L1
        original_score: Score before the L1 adjustment
    """
    phoneme: str
    score: float
    expected: bool = True
    l1_feedback: Optional[str] = None
    original_score: Optional[float] = None


@dataclass(frozen=True)
class WordPronunciationResult:
    word: str
    phonemes: Tuple[PhonemeScore, ...]
    score: int  # 0-100
    original_score: Optional[int] = None


@dataclass(frozen=True)
class PronunciationResult:
    """Per-attempt pronunciation result.

    Immutable: L1 adjustment returns a new result.

    Attributes:
        words: Word results in expected-text order
        overall_score: Rounded mean of word scores (0 when there are no words)
        transcript: The expected text as given by the caller
        decoded_transcript: Greedy CTC decode (what the model actually heard)
        original_overall_score: Overall score before the L1 adjustment
    """
    words: Tuple[WordPronunciationResult, ...]
    overall_score: int
    transcript: str
    decoded_transcript: Optional[str] = None
    original_overall_score: Optional[int] = None
