"""CTC utilities: vocabulary, tokenizer, forced alignment and greedy decode."""
from .decode import greedy_decode, log_softmax
from .tokenizer import tokenize_text, word_token_ranges
from .viterbi import Alignment, viterbi_align
from .vocabulary import Vocabulary

__all__ = [
    "Vocabulary",
    "tokenize_text",
    "word_token_ranges",
    "Alignment",
    "viterbi_align",
    "greedy_decode",
    "log_softmax",
]
