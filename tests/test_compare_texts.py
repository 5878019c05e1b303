import pytest

from pron_core.alignment import build_diff, compare_texts, compute_lcs, word_error_rate


def test_lcs_empty_table():
    assert compute_lcs([], []) == [[0]]


def test_lcs_length_in_last_cell():
    a = ["a", "b", "c", "d"]
    b = ["a", "c", "d", "e"]
    dp = compute_lcs(a, b)
    assert len(dp) == 5 and len(dp[0]) == 5
    assert dp[4][4] == 3


def test_identical_texts_score_100():
    result = compare_texts("the quick brown fox", "The quick, brown fox!")
    assert result.score == 100
    assert all(w.status == "correct" for w in result.words)
    assert result.wer == 0.0


def test_missing_word_example():
    result = compare_texts("the cat sat on the mat", "the cat on the mat")
    assert result.score == 83
    assert [w.word for w in result.words if w.status == "missing"] == ["sat"]
    assert result.wer == pytest.approx(1 / 6)


def test_second_missing_word_example():
    result = compare_texts("I love programming", "I programming")
    assert result.score == 67
    assert [(w.word, w.status) for w in result.words] == [
        ("i", "correct"), ("love", "missing"), ("programming", "correct"),
    ]


def test_both_empty():
    result = compare_texts("", "  ")
    assert result.words == ()
    assert result.score == 100
    assert result.wer == 0.0


def test_empty_expected_all_extra():
    result = compare_texts("", "hello there")
    assert result.score == 0
    assert [w.status for w in result.words] == ["extra", "extra"]
    assert result.wer == 1.0


def test_empty_spoken_all_missing():
    result = compare_texts("hello there", "")
    assert result.score == 0
    assert [w.status for w in result.words] == ["missing", "missing"]
    assert result.wer == 1.0


def test_tie_prefers_extra_move():
    original, spoken = ["a", "b"], ["b", "a"]
    words = build_diff(original, spoken, compute_lcs(original, spoken))
    assert [(w.word, w.status) for w in words] == [
        ("a", "missing"), ("b", "correct"), ("a", "extra"),
    ]
    assert compare_texts("a b", "b a").score == 50


@pytest.mark.parametrize("original,spoken", [
    ("one two three", "four five"),
    ("a a a", "a"),
    ("a", "a a a a"),
    ("x y z", "z y x"),
])
def test_score_is_integer_in_range(original, spoken):
    result = compare_texts(original, spoken)
    assert isinstance(result.score, int)
    assert 0 <= result.score <= 100


def test_word_error_rate_edges():
    assert word_error_rate([], []) == 0.0
    assert word_error_rate([], ["x"]) == 1.0
    assert word_error_rate(["x"], []) == 1.0
    assert word_error_rate(["a", "b"], ["a", "c"]) == pytest.approx(0.5)
