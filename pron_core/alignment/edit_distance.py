"""Longest-common-subsequence alignment for word sequences."""
from __future__ import annotations

from typing import List, Sequence

from pron_core.models.word_result import WordResult


def compute_lcs(a: Sequence[str], b: Sequence[str]) -> List[List[int]]:
    """Build the LCS dynamic programming table.

    dp[i][j] is the LCS length of a[:i] and b[:j], so dp[len(a)][len(b)]
    is the LCS length of the full sequences.

    Args:
        a: Expected words (rows)
        b: Spoken words (columns)

    Returns:
        (len(a) + 1) x (len(b) + 1) table; [[0]] for two empty inputs
    """
    m, n = len(a), len(b)
    dp = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])
    return dp


def build_diff(
    original: Sequence[str], spoken: Sequence[str], dp: List[List[int]]
) -> List[WordResult]:
    """Backtrack an LCS table into per-word statuses.

    Matching words are "correct"; otherwise the walk moves along the spoken
    axis ("extra") when that cell is at least as good as the expected-axis
    cell, else along the expected axis ("missing").

    Args:
        original: Expected words
        spoken: Spoken words
        dp: Table from compute_lcs(original, spoken)

    Returns:
        WordResult list in original order
    """
    results: List[WordResult] = []
    i, j = len(original), len(spoken)

    while i > 0 or j > 0:
        if i > 0 and j > 0 and original[i - 1] == spoken[j - 1]:
            results.append(WordResult(original[i - 1], "correct"))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            results.append(WordResult(spoken[j - 1], "extra"))
            j -= 1
        else:
            results.append(WordResult(original[i - 1], "missing"))
            i -= 1

    results.reverse()
    return results
