"""Result data models."""
from .pronunciation import PhonemeScore, PronunciationResult, WordPronunciationResult
from .word_result import CompareResult, WordResult, WordStatus

__all__ = [
    "PhonemeScore",
    "WordPronunciationResult",
    "PronunciationResult",
    "WordResult",
    "CompareResult",
    "WordStatus",
]
