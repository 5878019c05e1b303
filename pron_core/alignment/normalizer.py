"""Text normalization shared by the tokenizer and the text diff scorer."""
from __future__ import annotations

import re
from typing import List

# ASCII word characters only; the subword vocabulary has no other letters
_DROP_CHARS = re.compile(r"[^A-Za-z0-9_\s']")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Canonicalize text for comparison and tokenization.

    Lowercases, turns hyphens into spaces, drops everything except word
    characters, whitespace and apostrophes, and collapses whitespace.

    Example: "Well-known, isn't it?" -> "well known isn't it"

    Args:
        text: Arbitrary input text

    Returns:
        Normalized text (empty string when nothing is left)
    """
    text = text.lower().replace("-", " ")
    text = _DROP_CHARS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def split_words(text: str) -> List[str]:
    """Normalize text and split it into words ([] for empty input)."""
    normalized = normalize_text(text)
    return normalized.split(" ") if normalized else []
