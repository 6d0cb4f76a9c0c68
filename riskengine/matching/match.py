"""
Term Matcher Core Logic

Phrase-safe matching of free-form text against candidate terms:
1. Normalize text (case, whitespace, wrapping quotes/brackets, punctuation)
2. Order candidates longest-first so "peanut butter" out-ranks "peanut"
3. Word-boundary match, tolerant of the naive singular/plural ("cat" <-> "cats")
4. Report the first hit only

Does NOT match partial words: "nutritional" never matches "nut".

Version: term_matcher_v1
"""

import re
from typing import Iterable, List, Pattern

from riskengine.shared.text import naive_counterpart, normalize_token, strip_punctuation

from .models import TermMatch


def normalize_text(text: str) -> str:
    """Normalized, punctuation-free text ready for boundary matching."""
    return strip_punctuation(normalize_token(text))


def order_candidates(candidates: Iterable[str]) -> List[str]:
    """
    Longest-first; equal lengths alphabetical so the order never depends
    on set iteration order.
    """
    unique = {c for c in candidates if c}
    return sorted(unique, key=lambda term: (-len(term), term))


def build_term_pattern(term: str) -> Pattern:
    """
    Word-boundary pattern for a term and its naive counterpart.
    Matches both "almond" and "almonds", "brazil nut" and "brazil nuts".
    """
    variants = [re.escape(term)]
    counterpart = naive_counterpart(term)
    if counterpart:
        variants.append(re.escape(counterpart))
    return re.compile(rf"\b({'|'.join(variants)})\b", re.IGNORECASE | re.ASCII)


def match_term(text: str, candidates: Iterable[str]) -> TermMatch:
    """
    Test text against candidate terms, longest first.

    Args:
        text: Free-form text e.g. a meal description
        candidates: Unordered candidate terms

    Returns:
        TermMatch with the first matching term, or matched=False
    """
    normalized = normalize_text(text)
    if not normalized.strip():
        return TermMatch(matched=False)

    for term in order_candidates(candidates):
        if build_term_pattern(term).search(normalized):
            return TermMatch(matched=True, matched_term=term)

    return TermMatch(matched=False)
