"""
Term Matching Layer

Answers ONE question: "Does this text mention any of these terms, and
which is the most specific one?"

- Case- and whitespace-insensitive
- Singular/plural tolerant
- Longest term wins
- Deterministic: same input -> same output

Version: term_matcher_v1
"""

from .models import TermMatch
from .match import (
    match_term,
    normalize_text,
    order_candidates,
    build_term_pattern,
)

__all__ = [
    "TermMatch",
    "match_term",
    "normalize_text",
    "order_candidates",
    "build_term_pattern",
]

__version__ = "term_matcher_v1"
