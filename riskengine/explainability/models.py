"""
Explainability Models

Structured, ranked explanation of a Verdict's matches.

CRITICAL CONSTRAINTS:
- Pure projection of Verdict.matched; no rule logic is re-run
- Summaries are rebuilt from match details, never copied from reasoning

Version: explainability_v1
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from riskengine.risk.models import RiskLevel
from riskengine.shared.models import WireModel


class ExplanationRuleType(str, Enum):
    """Entry type; declaration order is display order."""
    DIRECT_MATCH = "directMatch"
    CROSS_REACTIVE = "crossReactive"
    INTERACTION = "interaction"


RULE_TYPE_ORDER = {
    ExplanationRuleType.DIRECT_MATCH: 0,
    ExplanationRuleType.CROSS_REACTIVE: 1,
    ExplanationRuleType.INTERACTION: 2,
}


class ExplanationEvidence(WireModel):
    risk_rate: float = Field(description="Match severity / 100")


class ExplanationEntry(WireModel):
    """One human-auditable explanation line."""

    summary: str
    rule_type: ExplanationRuleType
    rule_code: Optional[str] = None
    parent_category: Optional[str] = None
    matched_term: str
    taxonomy_version: str
    evidence: Optional[ExplanationEvidence] = None


class StructuredExplanation(WireModel):
    risk_level: RiskLevel
    taxonomy_version: str
    entries: List[ExplanationEntry] = Field(default_factory=list)
