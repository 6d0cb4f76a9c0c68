"""
Advice Models

Version: advice_registry_14a.1
"""

from typing import List, Literal, Optional

from pydantic import Field

from riskengine.shared.models import WireModel


class AdviceEntry(WireModel):
    """
    One curated guidance record.

    id is the registry key: "term:<term>" or "parent:<category>".
    """
    id: str
    level: Literal["term", "parent"]
    target: str = Field(description="'mango' for term-level, 'tree_nut' for parent-level")
    title: str
    symptoms_to_watch: List[str] = Field(default_factory=list)
    immediate_actions: List[str] = Field(default_factory=list)
    education: List[str] = Field(default_factory=list)
    disclaimers: List[str] = Field(default_factory=list)


class MatchedForAdvice(WireModel):
    """A matched term and, when known, its category."""
    matched_term: str
    matched_category: Optional[str] = None
