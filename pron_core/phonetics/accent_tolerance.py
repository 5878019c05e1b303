"""L1-aware score adjustment for Brazilian Portuguese speakers.

Brazilian Portuguese speakers show systematic GOP penalties on English
phonemes that do not exist in Portuguese, on vowel contrasts Portuguese
merges, and on phonemes that exist but behave differently in context.
Low-scoring phonemes are partially forgiven according to a tiered confusion
table, with an extra boost when the greedy decode shows the learner actually
produced the expected substitution.
"""
from __future__ import annotations

import dataclasses
import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from pron_core.alignment.normalizer import split_words
from pron_core.config import (
    L1_CAP,
    L1_CONFIRMED_MULTIPLIER,
    L1_PROSODY_BOOST,
    L1_PROSODY_FEEDBACK,
    L1_THRESHOLD,
    L1_TIER_BOOST,
)
from pron_core.models.pronunciation import (
    PhonemeScore,
    PronunciationResult,
    WordPronunciationResult,
)
from pron_core.utils import mean_score, round_half_up
from .cmudict import CmuDict, get_phonemes
from .phone_mapper import ARPABET_VOWELS

logger = logging.getLogger(__name__)

SUPPORTED_L1 = "pt-BR"


class PhonemeContext(enum.Enum):
    """Where in the word a tier-3 confusion is expected to happen."""
    ANY = "any"
    CODA = "coda"
    BEFORE_HIGH_FRONT_VOWEL = "before_high_front_vowel"


@dataclass(frozen=True)
class ConfusionEntry:
    """Known L1 transfer substitution for one expected phoneme.

    Attributes:
        subs: ARPAbet phonemes learners typically produce instead
        feedback: Human-readable description of the substitution
        tier: 1 = articulatory gap, 2 = perceptual (vowel) gap, 3 = contextual
        context: Position in which the substitution applies
    """
    subs: Tuple[str, ...]
    feedback: str
    tier: int
    context: PhonemeContext = PhonemeContext.ANY


BR_CONFUSION: Dict[str, ConfusionEntry] = {
    # Tier 1: phonemes absent from Portuguese
    "TH": ConfusionEntry(("T", "F"), "θ → t/f", 1),
    "DH": ConfusionEntry(("D", "V"), "ð → d/v", 1),
    "R": ConfusionEntry(("HH",), "ɹ → h", 1),
    "NG": ConfusionEntry(("N",), "ŋ → n", 1),
    "ZH": ConfusionEntry(("Z", "SH"), "ʒ → z/ʃ", 1),
    # Tier 2: vowel distinctions Portuguese merges
    "AE": ConfusionEntry(("EH", "AA"), "æ → ɛ/ɑ", 2),
    "IH": ConfusionEntry(("IY",), "ɪ → i", 2),
    "AH": ConfusionEntry(("AA", "AO"), "ʌ → ɑ/ɔ", 2),
    "UH": ConfusionEntry(("UW",), "ʊ → u", 2),
    "EY": ConfusionEntry(("EH",), "eɪ → ɛ", 2),
    "OW": ConfusionEntry(("AO",), "oʊ → ɔ", 2),
    "ER": ConfusionEntry(("EH", "R"), "ɝ → ɛɹ", 2),
    "AY": ConfusionEntry(("AA", "AH"), "aɪ → a", 2),
    "AW": ConfusionEntry(("AA", "AO"), "aʊ → a/ɔ", 2),
    "OY": ConfusionEntry(("OW",), "ɔɪ → ɔ", 2),
    # Tier 3: phonemes that exist but behave differently in context
    "HH": ConfusionEntry((), "h silent", 3),
    "L": ConfusionEntry(("W",), "ɫ → w", 3, PhonemeContext.CODA),
    "T": ConfusionEntry(("CH",), "t → tʃ before /i/", 3, PhonemeContext.BEFORE_HIGH_FRONT_VOWEL),
    "D": ConfusionEntry(("JH",), "d → dʒ before /i/", 3, PhonemeContext.BEFORE_HIGH_FRONT_VOWEL),
    "S": ConfusionEntry(("SH",), "s → ʃ (coda)", 3, PhonemeContext.CODA),
    "Z": ConfusionEntry(("S",), "z → s (devoicing)", 3, PhonemeContext.CODA),
}

_HIGH_FRONT_VOWELS = {"IH", "IY"}
_EPENTHETIC_VOWELS = ("i", "e")


def is_coda(phonemes: Sequence[str], idx: int) -> bool:
    """True if the phoneme is word-final or followed by a consonant."""
    if idx >= len(phonemes) - 1:
        return True
    return phonemes[idx + 1] not in ARPABET_VOWELS


def is_before_high_front_vowel(phonemes: Sequence[str], idx: int) -> bool:
    if idx >= len(phonemes) - 1:
        return False
    return phonemes[idx + 1] in _HIGH_FRONT_VOWELS


def context_applies(context: PhonemeContext, phonemes: Sequence[str], idx: int) -> bool:
    if context is PhonemeContext.CODA:
        return is_coda(phonemes, idx)
    if context is PhonemeContext.BEFORE_HIGH_FRONT_VOWEL:
        return is_before_high_front_vowel(phonemes, idx)
    return True


def is_substitution_confirmed(expected_word: str, decoded_words: Sequence[str]) -> bool:
    """Check whether the decoded text shows a typical BR substitution.

    Looks for th -> t/d/f spellings and for epenthetic vowels before
    ("street" -> "istreet") or after ("big" -> "bigi") the word. A decoded
    word identical to the expected one means no substitution happened.

    Args:
        expected_word: Word from the expected text
        decoded_words: Decoded words near the expected word's position

    Returns:
        True if the mismatch matches a known L1 error
    """
    expected = expected_word.lower()

    for dw in decoded_words:
        decoded = dw.lower()
        if decoded == expected:
            return False

        if "th" in expected and any(c in decoded for c in ("t", "d", "f")):
            if decoded in {expected.replace("th", sub) for sub in ("t", "d", "f")}:
                return True

        if len(decoded) > len(expected) and any(
            decoded.startswith(v + expected) for v in _EPENTHETIC_VOWELS
        ):
            return True

        if (
            len(decoded) == len(expected) + 1
            and decoded.startswith(expected)
            and decoded.endswith(_EPENTHETIC_VOWELS)
        ):
            return True

    return False


def _boosted(ph: PhonemeScore, factor: float, feedback: str, confirmed: bool) -> PhonemeScore:
    boost = (L1_CAP - ph.score) * factor
    if confirmed:
        boost *= L1_CONFIRMED_MULTIPLIER
    adjusted = min(L1_CAP, ph.score + boost)
    if adjusted == ph.score:
        return ph
    return dataclasses.replace(ph, score=adjusted, original_score=ph.score, l1_feedback=feedback)


def adjust_phoneme(
    ph: PhonemeScore,
    arpabet: Optional[str],
    phonemes: Sequence[str],
    idx: int,
    confirmed: bool,
) -> PhonemeScore:
    """Apply the BR confusion model to a single phoneme score.

    Args:
        ph: Score to adjust
        arpabet: Canonical symbol for the phoneme (None for a whole-word unit)
        phonemes: Canonical phoneme sequence of the word
        idx: Position of the phoneme in the word
        confirmed: Whether the decoded text confirmed an L1 substitution

    Returns:
        The same object when untouched, otherwise an adjusted copy
    """
    if arpabet is None or ph.score >= L1_THRESHOLD:
        return ph

    confusion = BR_CONFUSION.get(arpabet)
    if confusion is None:
        return _boosted(ph, L1_PROSODY_BOOST, L1_PROSODY_FEEDBACK, confirmed)

    if not context_applies(confusion.context, phonemes, idx):
        # Context doesn't match (e.g. T not before /i/): generic prosody only
        return _boosted(ph, L1_PROSODY_BOOST, L1_PROSODY_FEEDBACK, False)

    return _boosted(ph, L1_TIER_BOOST[confusion.tier], confusion.feedback, confirmed)


def apply_l1_scoring(
    result: PronunciationResult,
    l1: str,
    cmu_dict: Optional[CmuDict] = None,
) -> PronunciationResult:
    """Adjust a pronunciation result for the speaker's native language.

    Only "pt-BR" is supported; any other tag returns ``result`` unchanged.
    Phonemes below 0.45 get a tiered boost (capped at 0.85), word scores are
    recomputed from their phonemes and the overall score from the words.
    Pre-adjustment scores are kept in the ``original_*`` fields.

    Args:
        result: Raw result from the GOP aggregator
        l1: L1 language tag
        cmu_dict: Optional pre-loaded CMUdict

    Returns:
        A new, adjusted PronunciationResult
    """
    if l1 != SUPPORTED_L1:
        return result

    decoded_words = split_words(result.decoded_transcript or "")

    adjusted_words: List[WordPronunciationResult] = []
    for word_idx, word_result in enumerate(result.words):
        phonemes = get_phonemes(word_result.word, cmu_dict)
        nearby = decoded_words[max(0, word_idx - 1):word_idx + 2]
        confirmed = is_substitution_confirmed(word_result.word, nearby)

        adjusted_phonemes = tuple(
            adjust_phoneme(
                ph,
                phonemes[idx] if idx < len(phonemes) else None,
                phonemes,
                idx,
                confirmed,
            )
            for idx, ph in enumerate(word_result.phonemes)
        )
        avg = mean_score(p.score for p in adjusted_phonemes)
        adjusted_words.append(
            dataclasses.replace(
                word_result,
                phonemes=adjusted_phonemes,
                original_score=word_result.score,
                score=round_half_up(avg * 100),
            )
        )

    overall = round_half_up(mean_score(w.score for w in adjusted_words)) if adjusted_words else 0
    logger.debug("L1 %s adjustment: %d -> %d", l1, result.overall_score, overall)

    return dataclasses.replace(
        result,
        words=tuple(adjusted_words),
        original_overall_score=result.overall_score,
        overall_score=overall,
    )
