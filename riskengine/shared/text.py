"""
Token normalization shared by taxonomy expansion and term matching.
"""

import re


_WHITESPACE = re.compile(r"\s+")
_WRAPPING_PUNCTUATION = re.compile(r"^['\"(\[{]+|['\")\]}]+$")
_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)


def normalize_token(s: str) -> str:
    """
    Lowercase, trim, collapse internal whitespace, strip surrounding
    quotes and brackets.
    """
    t = (s or "").lower().strip()
    t = _WHITESPACE.sub(" ", t)
    t = _WRAPPING_PUNCTUATION.sub("", t).strip()
    return t


def strip_punctuation(s: str) -> str:
    """Replace every remaining punctuation char with a space."""
    return _NON_WORD.sub(" ", s)


def singularize(s: str) -> str:
    """Naive singular: almonds -> almond, nuts -> nut. Single 's' is kept."""
    trimmed = (s or "").lower().strip()
    if trimmed.endswith("s") and len(trimmed) > 1:
        return trimmed[:-1]
    return trimmed


def naive_counterpart(term: str) -> str:
    """Toggle a trailing 's': cat <-> cats."""
    if term.endswith("s"):
        return term[:-1]
    return term + "s"
