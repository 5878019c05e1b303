"""CMU Pronouncing Dictionary integration via NLTK."""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

import nltk
from nltk.corpus import cmudict as nltk_cmudict

logger = logging.getLogger(__name__)

CmuDict = Dict[str, List[List[str]]]

# Global cache for loaded CMUdict
_CMUDICT_CACHE: Optional[CmuDict] = None

_STRESS = re.compile(r"[0-9]")


def load_cmudict() -> CmuDict:
    """Load CMU Pronouncing Dictionary via NLTK.

    Caches the dictionary after first load.

    Returns:
        Dict mapping lowercase words to lists of pronunciations.
        Example: {"cat": [["K", "AE1", "T"]]}

    Raises:
        LookupError: If CMUdict is not downloaded (with instructions)
    """
    global _CMUDICT_CACHE

    if _CMUDICT_CACHE is not None:
        return _CMUDICT_CACHE

    try:
        _CMUDICT_CACHE = nltk_cmudict.dict()
    except LookupError:
        raise LookupError(
            "CMUdict is not downloaded. Run:\n"
            "  python -c \"import nltk; nltk.download('cmudict')\""
        )
    logger.info("Loaded CMUdict with %d entries", len(_CMUDICT_CACHE))
    return _CMUDICT_CACHE


def download_cmudict(quiet: bool = True) -> bool:
    """Fetch the NLTK cmudict corpus; returns True on success."""
    return bool(nltk.download("cmudict", quiet=quiet))


def strip_stress(phone: str) -> str:
    """Remove stress digits from an ARPAbet symbol ("AE1" -> "AE")."""
    return _STRESS.sub("", phone)


def get_phonemes(word: str, cmu_dict: Optional[CmuDict] = None) -> List[str]:
    """Canonical phoneme sequence for a word.

    Uses the first pronunciation listed in the dictionary.

    Args:
        word: Word to look up (case-insensitive)
        cmu_dict: Optional pre-loaded CMUdict (loads if None)

    Returns:
        ARPAbet symbols without stress markers, e.g. ["K", "AE", "T"];
        empty list if the word (or the dictionary) is unavailable
    """
    if cmu_dict is None:
        try:
            cmu_dict = load_cmudict()
        except LookupError:
            logger.warning("CMUdict unavailable; no phonemes for %r", word)
            return []

    pronunciations = cmu_dict.get(word.lower(), [])
    if not pronunciations:
        return []
    return [strip_stress(p) for p in pronunciations[0]]
