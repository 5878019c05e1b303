"""Greedy CTC decoding."""
from __future__ import annotations

from typing import List, Optional

import numpy as np

from pron_core.config import WORD_PREFIX
from .vocabulary import Vocabulary


def log_softmax(logits: np.ndarray, axis: int = -1) -> np.ndarray:
    """Numerically stable log-softmax for models that emit raw logits."""
    logits = np.asarray(logits, dtype=np.float64)
    shifted = logits - np.max(logits, axis=axis, keepdims=True)
    return shifted - np.log(np.sum(np.exp(shifted), axis=axis, keepdims=True))


def ctc_collapse(ids: List[int], blank_id: int) -> List[int]:
    """Merge repeated ids and drop blanks."""
    out, prev = [], None
    for i in ids:
        if i != blank_id and i != prev:
            out.append(i)
        prev = i
    return out


def greedy_decode(log_probs: np.ndarray, vocabulary: Optional[Vocabulary]) -> str:
    """Best-path transcript of what the model heard.

    Args:
        log_probs: ``[T, V]`` frame scores (log-probabilities or logits)
        vocabulary: Loaded vocabulary, or None

    Returns:
        Decoded text with word-boundary markers turned into spaces; empty
        string when the vocabulary is not loaded or there are no frames
    """
    if vocabulary is None:
        return ""

    log_probs = np.asarray(log_probs)
    if log_probs.ndim != 2 or log_probs.shape[0] == 0:
        return ""

    best = np.argmax(log_probs, axis=1).tolist()
    decoded = ctc_collapse(best, vocabulary.blank_id)
    text = "".join(vocabulary.get_piece(idx).replace(WORD_PREFIX, " ", 1) for idx in decoded)
    return text.strip()
