"""Greedy longest-match subword tokenizer (SentencePiece-compatible pieces)."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from pron_core.alignment.normalizer import split_words
from pron_core.config import MAX_PIECE_LENGTH, WORD_PREFIX
from .vocabulary import Vocabulary


def _tokenize_word(word: str, vocabulary: Vocabulary) -> List[int]:
    prefixed = WORD_PREFIX + word
    tokens: List[int] = []
    pos = 0

    while pos < len(prefixed):
        for length in range(min(len(prefixed) - pos, MAX_PIECE_LENGTH), 0, -1):
            idx = vocabulary.get_id(prefixed[pos:pos + length])
            if idx is not None:
                tokens.append(idx)
                pos += length
                break
        else:
            # Single character fallback
            idx = vocabulary.get_id(prefixed[pos])
            tokens.append(vocabulary.unk_id if idx is None else idx)
            pos += 1

    return tokens


def tokenize_text(text: str, vocabulary: Optional[Vocabulary]) -> List[int]:
    """Convert text to model token ids.

    The text is normalized and split on spaces; each word is prefixed with the
    word-boundary marker and consumed greedily with the longest vocabulary
    piece (up to 20 characters) at each position.

    Args:
        text: Expected text
        vocabulary: Loaded vocabulary, or None if not loaded yet

    Returns:
        Token ids; empty when the vocabulary is missing or the text is empty
    """
    if vocabulary is None:
        return []

    tokens: List[int] = []
    for word in split_words(text):
        tokens.extend(_tokenize_word(word, vocabulary))
    return tokens


def word_token_ranges(tokens: Sequence[int], vocabulary: Vocabulary) -> List[Tuple[int, int]]:
    """Group token indices into half-open ``[start, end)`` word ranges.

    A new word starts at every token (after the first) whose piece begins
    with the word-boundary marker.
    """
    ranges: List[Tuple[int, int]] = []
    current_start = 0

    for i, token in enumerate(tokens):
        if i > 0 and vocabulary.get_piece(token).startswith(WORD_PREFIX):
            ranges.append((current_start, i))
            current_start = i

    ranges.append((current_start, len(tokens)))
    return ranges
