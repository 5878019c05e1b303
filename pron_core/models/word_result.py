"""Data model for the word-level text diff scorer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

WordStatus = Literal["correct", "missing", "extra"]


@dataclass(frozen=True)
class WordResult:
    """A single word of an expected-vs-spoken comparison.

    Attributes:
        word: The word (from the expected text for "correct"/"missing",
            from the spoken text for "extra")
        status: "correct", "missing" or "extra"
    """
    word: str
    status: WordStatus


@dataclass(frozen=True)
class CompareResult:
    """Outcome of comparing an expected text against a spoken transcript.

    Attributes:
        words: Per-word statuses in original order
        score: Integer in [0, 100], share of expected words spoken correctly
        wer: Word error rate of the spoken text against the expected text
    """
    words: Tuple[WordResult, ...]
    score: int
    wer: float = 0.0
