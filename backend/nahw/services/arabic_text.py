"""Arabic text helpers and closed lexicons used by the construction detectors.

Segments arrive with diacritics (tashkeel) as they appear in the source
text. Lexicon lookups are done on both the raw text and a bare form with
diacritics stripped and alef variants normalized, so that "إِلَى" and "الى"
resolve to the same preposition.
"""

import re

ARABIC_DIACRITICS = re.compile(
    "[\u0610-\u061A\u064B-\u065F\u0670\u06D6-\u06DC"
    "\u06DF-\u06E4\u06E7\u06E8\u06EA-\u06ED]"
)

TANWIN_MARKS = ("\u064B", "\u064C", "\u064D")

# Separate-token prepositions, with and without diacritics.
PREPOSITIONS: set[str] = {
    # Single-letter prepositions
    "بِ", "لِ", "كِ", "تِ", "وِ",
    "ب", "ل", "ك", "ت", "و",
    # Two-letter prepositions
    "مِن", "إِلَى", "عَن", "فِي", "عَلَى",
    "من", "إلى", "عن", "في", "على",
    # Three+ letter prepositions
    "عند", "لدى", "حتى", "أمام", "خلف", "فوق", "تحت",
    "بين", "حول", "دون", "منذ", "مذ",
}

# Prepositions that may sit between a mudaf and its mudaf ilayh without
# breaking the possessive reading.
WEAK_PREPOSITIONS: set[str] = {"ل", "لِ", "بِ", "فِي"}

# Prepositions that attach to the following noun as a one-letter prefix.
ATTACHED_PREPOSITIONS: tuple[str, ...] = ("بِ", "لِ", "كِ", "ب", "ل", "ك")

# Inna and her sisters plus the subordinating an.
ACCUSATIVE_PARTICLES: set[str] = {"أن", "إن", "كأن", "لكن", "ليت", "لعل"}

DEFINITE_ARTICLE_PREFIXES: tuple[str, ...] = ("ال", "ٱل")


def strip_diacritics(text: str) -> str:
    """Remove Arabic diacritical marks (tashkeel) from text."""
    return ARABIC_DIACRITICS.sub("", text)


def strip_tatweel(text: str) -> str:
    """Remove tatweel (kashida) character."""
    return text.replace("\u0640", "")


def normalize_alef(text: str) -> str:
    """Normalize alef variants to bare alef."""
    text = text.replace("أ", "ا")
    text = text.replace("إ", "ا")
    text = text.replace("آ", "ا")
    text = text.replace("ٱ", "ا")
    return text


def normalize_arabic(text: str) -> str:
    """Full normalization: strip diacritics, tatweel, normalize alef."""
    text = strip_diacritics(text)
    text = strip_tatweel(text)
    text = normalize_alef(text)
    return text


def _normalized_lexicon(words: set[str]) -> frozenset[str]:
    return frozenset(normalize_arabic(w) for w in words)


_PREPOSITIONS_NORMALIZED = _normalized_lexicon(PREPOSITIONS)


def is_preposition_text(text: str) -> bool:
    """Check whether a token is a standalone preposition from the lexicon."""
    if text in PREPOSITIONS:
        return True
    return normalize_arabic(text) in _PREPOSITIONS_NORMALIZED


def is_weak_preposition_text(text: str) -> bool:
    return text in WEAK_PREPOSITIONS


def is_accusative_particle_text(text: str) -> bool:
    """Check whether a token is one of inna's sisters (or an).

    Hamza is kept: with alef normalized, the verb كان would read as كأن.
    """
    return strip_tatweel(strip_diacritics(text)) in ACCUSATIVE_PARTICLES


def has_definite_article_prefix(text: str) -> bool:
    """True for tokens written with ال (or wasla ٱل) at the start."""
    bare = strip_tatweel(strip_diacritics(text))
    return bare.startswith(DEFINITE_ARTICLE_PREFIXES)


def has_tanwin(text: str) -> bool:
    return any(mark in text for mark in TANWIN_MARKS)


def split_attached_preposition(text: str) -> tuple[str, str] | None:
    """Split a leading one-letter preposition off a token.

    Returns (prefix, remainder) for the first prefix that matches with a
    remainder of at least two characters, or None.
    """
    for prefix in ATTACHED_PREPOSITIONS:
        if text.startswith(prefix) and len(text) > len(prefix):
            remainder = text[len(prefix):]
            if len(remainder) >= 2:
                return prefix, remainder
    return None
