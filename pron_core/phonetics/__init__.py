"""Phonetics package for pronunciation dictionaries, phone mapping and L1 tolerance."""
from .accent_tolerance import BR_CONFUSION, SUPPORTED_L1, apply_l1_scoring
from .cmudict import download_cmudict, get_phonemes, load_cmudict, strip_stress
from .phone_mapper import ARPABET_VOWELS, ipa_to_arpabet, phoneme_to_ipa

__all__ = [
    "apply_l1_scoring",
    "BR_CONFUSION",
    "SUPPORTED_L1",
    "load_cmudict",
    "download_cmudict",
    "get_phonemes",
    "strip_stress",
    "phoneme_to_ipa",
    "ipa_to_arpabet",
    "ARPABET_VOWELS",
]
