# tests/conftest.py
import numpy as np
import pytest

from pron_core.asr.acoustic_model import AcousticModel
from pron_core.ctc.vocabulary import Vocabulary

TOKENS_TXT = "\n".join([
    "<unk> 0",
    "▁the 1",
    "▁cat 2",
    "▁c 3",
    "at 4",
    "▁ 5",
    "a 6",
    "t 7",
    "▁think 8",
    "s 9",
    "<blk> 10",
])

BLANK = 10
VOCAB_SIZE = 11


class FakeAcousticModel(AcousticModel):
    """Returns a fixed ``[1, T, V]`` output regardless of the features."""

    def __init__(self, output, outputs_log_probs=True, fail_with=None):
        super().__init__(outputs_log_probs=outputs_log_probs)
        self.output = np.asarray(output, dtype=np.float32)
        self.fail_with = fail_with
        self.calls = 0

    def _forward(self, features, length):
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return self.output[np.newaxis, :, :]


def frames_for(symbols, vocab_size=VOCAB_SIZE, hit=0.9):
    """Log-prob matrix whose argmax at frame t is ``symbols[t]``."""
    rest = (1.0 - hit) / (vocab_size - 1)
    probs = np.full((len(symbols), vocab_size), rest, dtype=np.float64)
    for t, s in enumerate(symbols):
        probs[t, s] = hit
    return np.log(probs)


@pytest.fixture()
def vocab():
    return Vocabulary.from_text(TOKENS_TXT)


@pytest.fixture()
def cmu_dict():
    return {
        "the": [["DH", "AH0"], ["DH", "IY0"]],
        "cat": [["K", "AE1", "T"]],
        "cats": [["K", "AE1", "T", "S"]],
        "think": [["TH", "IH1", "NG", "K"]],
        "tea": [["T", "IY1"]],
        "ball": [["B", "AO1", "L"]],
    }


@pytest.fixture()
def make_log_probs():
    return frames_for


@pytest.fixture()
def fake_model():
    # "▁the ▁cat" with blanks between
    return FakeAcousticModel(frames_for([BLANK, 1, 1, BLANK, 2, 2, BLANK]))


@pytest.fixture()
def fake_model_cls():
    return FakeAcousticModel
