"""ARPAbet <-> IPA phone mapping for display."""
from __future__ import annotations

from typing import Dict, List

# Stressless ARPAbet (CMUdict inventory) to IPA
ARPABET_TO_IPA: Dict[str, str] = {
    # Vowels
    "AA": "ɑ",
    "AE": "æ",
    "AH": "ʌ",
    "AO": "ɔ",
    "AW": "aʊ",
    "AY": "aɪ",
    "EH": "ɛ",
    "ER": "ɝ",
    "EY": "eɪ",
    "IH": "ɪ",
    "IY": "i",
    "OW": "oʊ",
    "OY": "ɔɪ",
    "UH": "ʊ",
    "UW": "u",
    # Consonants
    "B": "b",
    "CH": "tʃ",
    "D": "d",
    "DH": "ð",
    "F": "f",
    "G": "ɡ",
    "HH": "h",
    "JH": "dʒ",
    "K": "k",
    "L": "l",
    "M": "m",
    "N": "n",
    "NG": "ŋ",
    "P": "p",
    "R": "ɹ",
    "S": "s",
    "SH": "ʃ",
    "T": "t",
    "TH": "θ",
    "V": "v",
    "W": "w",
    "Y": "j",
    "Z": "z",
    "ZH": "ʒ",
}

IPA_TO_ARPABET: Dict[str, str] = {ipa: arpa for arpa, ipa in ARPABET_TO_IPA.items()}

ARPABET_VOWELS = frozenset(
    {"AA", "AE", "AH", "AO", "AW", "AY", "EH", "ER", "EY", "IH", "IY", "OW", "OY", "UH", "UW"}
)


def phoneme_to_ipa(arpabet: str) -> str:
    """Convert an ARPAbet symbol to IPA; unknown symbols are lowercased."""
    return ARPABET_TO_IPA.get(arpabet, arpabet.lower())


def ipa_to_arpabet(ipa: str) -> str:
    """Convert an IPA symbol back to ARPAbet; unknown symbols are uppercased."""
    return IPA_TO_ARPABET.get(ipa, ipa.upper())


def convert_phone_sequence(arpabet_phones: List[str]) -> List[str]:
    return [phoneme_to_ipa(p) for p in arpabet_phones]
