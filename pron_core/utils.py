"""Small numeric helpers shared by the scorers."""
from __future__ import annotations

import math
from typing import Iterable

from .config import GOP_CENTER, GOP_TEMPERATURE


def round_half_up(x: float) -> int:
    """Round to the nearest integer, halves away from -inf (0.5 -> 1, 2.5 -> 3)."""
    return int(math.floor(x + 0.5))


def mean_score(values: Iterable[float], default: float = 0.0) -> float:
    values = list(values)
    if not values:
        return default
    return sum(values) / len(values)


def gop_sigmoid(avg_log_prob: float) -> float:
    """Squash an average log-probability into a [0, 1] pronunciation score."""
    z = -(avg_log_prob - GOP_CENTER) / GOP_TEMPERATURE
    # math.exp overflows past ~709
    if z > 700.0:
        return 0.0
    return 1.0 / (1.0 + math.exp(z))
