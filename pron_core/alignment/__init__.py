"""Text normalization and word-level diff scoring."""
from .aligner import compare_texts, word_error_rate
from .edit_distance import build_diff, compute_lcs
from .normalizer import normalize_text, split_words

__all__ = [
    "compare_texts",
    "word_error_rate",
    "build_diff",
    "compute_lcs",
    "normalize_text",
    "split_words",
]
