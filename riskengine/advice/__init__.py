"""
Actionable Advice Layer

Closed registry of curated guidance plus a deterministic resolver.
Term advice overrides parent advice. No generated text.

Version: advice_registry_14a.1
"""

from .models import AdviceEntry, MatchedForAdvice
from .registry import (
    ADVICE_REGISTRY,
    ADVICE_REGISTRY_VERSION,
    GENERAL_SAFETY_FALLBACK,
)
from .resolve import resolve_advice, validate_no_orphan_advice

__all__ = [
    # Models
    "AdviceEntry",
    "MatchedForAdvice",
    # Registry
    "ADVICE_REGISTRY",
    "ADVICE_REGISTRY_VERSION",
    "GENERAL_SAFETY_FALLBACK",
    # Functions
    "resolve_advice",
    "validate_no_orphan_advice",
]

__version__ = "advice_registry_14a.1"
