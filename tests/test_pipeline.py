import asyncio

import numpy as np
import pytest

from pron_core.errors import EnvironmentCompatibilityError, ModelInferenceError, ModelLoadError
from speaking_practice import pipeline, recording
from speaking_practice.pipeline import PronunciationScorer, result_to_dict

from conftest import BLANK, TOKENS_TXT


@pytest.fixture()
def scorer(vocab, fake_model, cmu_dict):
    return PronunciationScorer(vocab, model=fake_model, cmu_dict=cmu_dict)


def test_process_ctc_output(scorer, make_log_probs):
    result = scorer.process_ctc_output(make_log_probs([BLANK, 1, 1, BLANK, 2, 2, BLANK]), "The cat")
    assert [w.word for w in result.words] == ["the", "cat"]
    assert result.decoded_transcript == "the cat"
    assert result.transcript == "The cat"
    assert 0 <= result.overall_score <= 100


def test_nothing_to_align_keeps_decoded_text(scorer, make_log_probs):
    result = scorer.process_ctc_output(make_log_probs([1, 1]), "?!")
    assert result.words == ()
    assert result.overall_score == 0
    assert result.decoded_transcript == "the"


def test_score_runs_model_once(scorer, fake_model):
    result = scorer.score(np.zeros(16000, dtype=np.float32), "the cat")
    assert fake_model.calls == 1
    assert [w.word for w in result.words] == ["the", "cat"]
    assert result.original_overall_score is None


def test_score_with_l1(scorer):
    result = scorer.score(np.zeros(16000, dtype=np.float32), "the cat", l1="pt-BR")
    assert result.original_overall_score is not None
    assert result.overall_score >= result.original_overall_score


def test_ascore_matches_score(scorer):
    audio = np.zeros(16000, dtype=np.float32)
    sync = scorer.score(audio, "the cat")
    async_result = asyncio.run(scorer.ascore(audio, "the cat"))
    assert async_result == sync


def test_score_without_model(vocab):
    with pytest.raises(ModelLoadError):
        PronunciationScorer(vocab).score(np.zeros(100), "the")


def test_model_failure_surfaces(vocab, fake_model_cls):
    model = fake_model_cls(np.zeros((3, 11)), fail_with=RuntimeError("boom"))
    with pytest.raises(ModelInferenceError, match="boom"):
        PronunciationScorer(vocab, model=model).score(np.zeros(1600), "the")


def test_compare_fallback():
    result = PronunciationScorer.compare("the cat sat on the mat", "the cat on the mat")
    assert result.score == 83


def test_result_to_dict(scorer, make_log_probs):
    result = scorer.process_ctc_output(make_log_probs([BLANK, 1, BLANK]), "the")
    data = result_to_dict(result)
    assert data["words"][0]["word"] == "the"
    assert set(data["words"][0]["phonemes"][0]) == {"phoneme", "score", "expected", "l1_feedback", "original_score"}


def test_from_model_url(monkeypatch, fake_model):
    seen = {}

    def fake_fetch_text(location):
        seen["tokens"] = location
        return TOKENS_TXT

    monkeypatch.setattr(pipeline, "fetch_text", fake_fetch_text)
    monkeypatch.setattr(pipeline, "fetch_to_file", lambda location: "/tmp/model.onnx")
    monkeypatch.setattr(pipeline, "load_acoustic_model", lambda path, **kw: fake_model)

    scorer = PronunciationScorer.from_model_url("https://example.com/models/stt.onnx")

    assert seen["tokens"] == "https://example.com/models/tokens.txt"
    assert scorer.vocabulary.blank_id == BLANK
    assert scorer.model is fake_model


def test_from_model_url_rejects_empty_tokens(monkeypatch):
    monkeypatch.setattr(pipeline, "fetch_text", lambda location: "garbage\n")
    with pytest.raises(ModelLoadError):
        PronunciationScorer.from_model_url("models/stt.onnx")


def test_from_model_url_checks_environment_first(monkeypatch):
    fetched = []
    monkeypatch.setattr(recording, "check_environment", lambda: recording.RUNTIME_MISSING_MESSAGE)
    monkeypatch.setattr(pipeline, "fetch_text", lambda location: fetched.append(location) or TOKENS_TXT)
    with pytest.raises(EnvironmentCompatibilityError, match="ONNX Runtime"):
        PronunciationScorer.from_model_url("models/stt.onnx")
    assert fetched == []
