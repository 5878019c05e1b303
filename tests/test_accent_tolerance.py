import numpy as np
import pytest

from pron_core.config import L1_CAP, L1_PROSODY_FEEDBACK
from pron_core.models import PhonemeScore, PronunciationResult, WordPronunciationResult
from pron_core.phonetics.accent_tolerance import (
    BR_CONFUSION,
    PhonemeContext,
    adjust_phoneme,
    apply_l1_scoring,
    context_applies,
    is_coda,
    is_substitution_confirmed,
)


def _word(word, scores, score=None):
    phonemes = tuple(PhonemeScore(phoneme=f"p{i}", score=s) for i, s in enumerate(scores))
    if score is None:
        score = round(100 * sum(scores) / len(scores))
    return WordPronunciationResult(word=word, phonemes=phonemes, score=score)


def _result(*words, decoded=""):
    overall = round(sum(w.score for w in words) / len(words)) if words else 0
    return PronunciationResult(words=tuple(words), overall_score=overall, transcript=" ".join(w.word for w in words),
                               decoded_transcript=decoded)


def test_other_languages_are_untouched(cmu_dict):
    result = _result(_word("think", [0.1, 0.2, 0.3, 0.4]))
    assert apply_l1_scoring(result, "es-ES", cmu_dict) is result
    assert apply_l1_scoring(result, "", cmu_dict) is result


def test_tiered_boosts(cmu_dict):
    # think = TH IH NG K
    result = _result(_word("think", [0.1, 0.5, 0.2, 0.3], score=28))
    adjusted = apply_l1_scoring(result, "pt-BR", cmu_dict)
    th, ih, ng, k = adjusted.words[0].phonemes

    assert th.score == pytest.approx(0.1 + 0.75 * 0.5)
    assert th.l1_feedback == "θ → t/f"
    assert th.original_score == 0.1

    assert ih.score == 0.5
    assert ih.l1_feedback is None and ih.original_score is None

    assert ng.score == pytest.approx(0.2 + 0.65 * 0.5)
    assert ng.l1_feedback == "ŋ → n"

    assert k.score == pytest.approx(0.3 + 0.55 * 0.1)
    assert k.l1_feedback == L1_PROSODY_FEEDBACK

    word = adjusted.words[0]
    assert word.original_score == 28
    assert word.score == 46
    assert adjusted.overall_score == 46
    assert adjusted.original_overall_score == result.overall_score


def test_confirmed_substitution_gets_extra_boost(cmu_dict):
    result = _result(_word("think", [0.1, 0.5, 0.5, 0.5]), decoded="i tink so")
    th = apply_l1_scoring(result, "pt-BR", cmu_dict).words[0].phonemes[0]
    assert th.score == pytest.approx(0.1 + 0.75 * 0.5 * 1.5)


def test_context_mismatch_gets_prosody_only(cmu_dict):
    # T is word-final in "cat", not before /i/
    result = _result(_word("cat", [0.5, 0.5, 0.2]))
    t = apply_l1_scoring(result, "pt-BR", cmu_dict).words[0].phonemes[2]
    assert t.score == pytest.approx(0.2 + 0.65 * 0.1)
    assert t.l1_feedback == L1_PROSODY_FEEDBACK


def test_context_match_uses_table_entry(cmu_dict):
    tea = apply_l1_scoring(_result(_word("tea", [0.2, 0.9])), "pt-BR", cmu_dict).words[0].phonemes[0]
    assert tea.l1_feedback == "t → tʃ before /i/"
    assert tea.score == pytest.approx(0.2 + 0.65 * 0.25)

    ball = apply_l1_scoring(_result(_word("ball", [0.9, 0.9, 0.1])), "pt-BR", cmu_dict).words[0].phonemes[2]
    assert ball.l1_feedback == "ɫ → w"


def test_word_without_pronunciation_is_untouched(cmu_dict):
    result = _result(_word("zzyzx", [0.2]))
    word = apply_l1_scoring(result, "pt-BR", cmu_dict).words[0]
    unit = word.phonemes[0]
    assert unit.score == 0.2
    assert unit.l1_feedback is None and unit.original_score is None
    assert word.score == 20


def test_phoneme_outside_confusion_table_gets_prosody_boost():
    ph = PhonemeScore(phoneme="k", score=0.2)
    adjusted = adjust_phoneme(ph, "K", ["K", "AE", "T"], 0, False)
    assert adjusted.score == pytest.approx(0.2 + 0.65 * 0.1)
    assert adjusted.l1_feedback == L1_PROSODY_FEEDBACK


@pytest.mark.parametrize("confirmed", [False, True])
def test_scores_never_exceed_cap(confirmed):
    phonemes = ["T", "IY"]
    for arpabet in list(BR_CONFUSION) + [None, "K"]:
        for score in np.linspace(0.0, 1.0, 41):
            ph = PhonemeScore(phoneme="x", score=float(score))
            adjusted = adjust_phoneme(ph, arpabet, phonemes, 0, confirmed)
            assert adjusted.score <= max(L1_CAP, float(score))


def test_acceptable_phonemes_are_never_touched():
    for score in (0.45, 0.6, 0.99):
        ph = PhonemeScore(phoneme="θ", score=score)
        assert adjust_phoneme(ph, "TH", ["TH"], 0, True) is ph


def test_empty_result_stays_empty(cmu_dict):
    result = PronunciationResult(words=(), overall_score=0, transcript="")
    adjusted = apply_l1_scoring(result, "pt-BR", cmu_dict)
    assert adjusted.words == ()
    assert adjusted.overall_score == 0
    assert adjusted.original_overall_score == 0


@pytest.mark.parametrize("expected,decoded,confirmed", [
    ("think", ["tink"], True),
    ("think", ["fink"], True),
    ("street", ["istreet"], True),
    ("school", ["eschool"], True),
    ("big", ["bigi"], True),
    ("big", ["bige"], True),
    ("big", ["big"], False),
    ("big", ["big", "bigi"], False),
    ("big", ["bog"], False),
    ("think", [], False),
])
def test_substitution_confirmation(expected, decoded, confirmed):
    assert is_substitution_confirmed(expected, decoded) is confirmed


def test_context_predicates():
    assert is_coda(["K", "AE", "T"], 2)
    assert not is_coda(["K", "AE", "T"], 0)
    assert is_coda(["B", "AO", "L", "Z"], 2)
    assert context_applies(PhonemeContext.BEFORE_HIGH_FRONT_VOWEL, ["T", "IH"], 0)
    assert not context_applies(PhonemeContext.BEFORE_HIGH_FRONT_VOWEL, ["T", "AA"], 0)
    assert not context_applies(PhonemeContext.BEFORE_HIGH_FRONT_VOWEL, ["T"], 0)
    assert context_applies(PhonemeContext.ANY, ["HH"], 0)


def test_confusion_table_tiers():
    assert {BR_CONFUSION[p].tier for p in ("TH", "DH", "R", "NG", "ZH")} == {1}
    assert BR_CONFUSION["HH"].context is PhonemeContext.ANY
    assert BR_CONFUSION["S"].context is PhonemeContext.CODA
