"""Viterbi forced alignment of a known token sequence through CTC output."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from pron_core.config import NEG_INF


@dataclass(frozen=True)
class Alignment:
    """Best CTC path, one entry per frame.

    Attributes:
        tokens: Symbol (token id or blank) occupying each frame
        scores: Log-probability of that symbol at that frame
    """
    tokens: np.ndarray
    scores: np.ndarray

    def __len__(self) -> int:
        return len(self.tokens)


def build_ctc_targets(tokens: Sequence[int], blank_id: int) -> List[int]:
    """Interleave blanks: ``[blank, t0, blank, t1, ..., tN, blank]``."""
    out = [blank_id]
    for tok in tokens:
        out.extend([tok, blank_id])
    return out


def viterbi_align(log_probs: np.ndarray, tokens: Sequence[int], blank_id: int) -> Alignment:
    """Find the most likely CTC path that emits ``tokens``.

    The lattice has ``2L + 1`` states (tokens interleaved with blanks). At
    each frame a state can stay, advance from the previous state, or skip a
    blank from two states back, unless that would join two identical
    consecutive tokens. Ties prefer stay, then advance, then skip. The path
    ends in the final token or the trailing blank, whichever scores higher.

    Args:
        log_probs: ``[T, V]`` frame log-probabilities
        tokens: Expected token ids (no blanks)
        blank_id: Index of the blank symbol in ``V``

    Returns:
        Alignment with one symbol and log-probability per frame; empty when
        ``T == 0``. An empty token sequence yields an all-blank path.
    """
    log_probs = np.asarray(log_probs, dtype=np.float64)
    T = log_probs.shape[0] if log_probs.ndim == 2 else 0
    if T == 0:
        return Alignment(tokens=np.zeros(0, dtype=np.int64), scores=np.zeros(0, dtype=np.float64))

    target = np.asarray(build_ctc_targets(tokens, blank_id), dtype=np.int64)
    S = len(target)
    states = np.arange(S)

    # Skip s-2 -> s only onto a token that differs from the one two states back
    can_skip = np.zeros(S, dtype=bool)
    if S > 2:
        can_skip[2:] = (target[2:] != blank_id) & (target[2:] != target[:-2])

    prev = np.full(S, NEG_INF, dtype=np.float64)
    prev[0] = log_probs[0, target[0]]
    if S > 1:
        prev[1] = log_probs[0, target[1]]

    backp = np.zeros((T, S), dtype=np.int64)

    for t in range(1, T):
        best = prev.copy()
        bp = states.copy()

        adv = np.full(S, NEG_INF, dtype=np.float64)
        adv[1:] = prev[:-1]
        better = adv > best
        best = np.where(better, adv, best)
        bp = np.where(better, states - 1, bp)

        skip = np.full(S, NEG_INF, dtype=np.float64)
        skip[2:] = prev[:-2]
        better = can_skip & (skip > best)
        best = np.where(better, skip, best)
        bp = np.where(better, states - 2, bp)

        prev = best + log_probs[t, target]
        backp[t] = bp

    end = S - 1
    if S > 1 and prev[S - 2] > prev[S - 1]:
        end = S - 2

    path = np.empty(T, dtype=np.int64)
    path[T - 1] = end
    for t in range(T - 2, -1, -1):
        path[t] = backp[t + 1, path[t + 1]]

    symbols = target[path]
    return Alignment(tokens=symbols, scores=log_probs[np.arange(T), symbols])
