"""Pronunciation scoring from CTC alignments."""
from .gop import attribute_frames_to_tokens, compute_gop_scores, distribute_score_to_phonemes

__all__ = ["compute_gop_scores", "distribute_score_to_phonemes", "attribute_frames_to_tokens"]
