"""
Verdict Explainability Module

Design Principle:
    The engine decides. The explanation explains. Never the reverse.

This module does NOT:
- Re-run any rule
- Read the free-text reasoning string
- Add or drop matches

This module ONLY:
- Projects each RuleMatch into a typed entry
- Ranks entries deterministically

Version: explainability_v1
"""

from .models import (
    ExplanationRuleType,
    ExplanationEvidence,
    ExplanationEntry,
    StructuredExplanation,
)
from .explain import build_explanation, build_entry

__all__ = [
    # Models
    "ExplanationRuleType",
    "ExplanationEvidence",
    "ExplanationEntry",
    "StructuredExplanation",
    # Functions
    "build_explanation",
    "build_entry",
]

__version__ = "explainability_v1"
