"""Core library for CTC-based pronunciation scoring.

Text normalization, phoneme lookup, subword tokenization, log-mel features,
Viterbi forced alignment, GOP scoring, L1 accent adjustment and the
word-level text diff scorer.
"""
__version__ = "0.1.0"
