"""
Risk Rule Engine Layer

evaluate(profile, events, snapshot) -> Verdict

Design Principles:
- PURE: explicit inputs only, no ambient state
- MONOTONIC: none -> medium -> high, never downgraded within a run
- ORDERED: matches recorded in event order
- DETERMINISTIC: same input -> byte-identical Verdict

The HTTP router lives in riskengine.risk.admin and is wired by main.py.

Version: risk_engine_v1
"""

from .models import (
    RISK_ORDER,
    RiskLevel,
    Medication,
    Profile,
    Event,
    AllergyMatchDetails,
    CrossReactiveDetails,
    MedicationInteractionDetails,
    AllergyMatch,
    CrossReactiveMatch,
    MedicationInteractionMatch,
    RuleMatch,
    VerdictMeta,
    Verdict,
)
from .engine import (
    NO_RISK_REASONING,
    evaluate,
    verdict_hash,
    build_reasoning,
    find_cross_reactive_match,
)
from .interactions import INTERACTION_MAP, find_interaction
from .rule_codes import (
    RULE_ALLERGEN_MATCH,
    RULE_CROSS_REACTIVE,
    RULE_MED_INTERACTION,
    rule_code_for,
)

__all__ = [
    # Models
    "RISK_ORDER",
    "RiskLevel",
    "Medication",
    "Profile",
    "Event",
    "AllergyMatchDetails",
    "CrossReactiveDetails",
    "MedicationInteractionDetails",
    "AllergyMatch",
    "CrossReactiveMatch",
    "MedicationInteractionMatch",
    "RuleMatch",
    "VerdictMeta",
    "Verdict",
    # Functions
    "NO_RISK_REASONING",
    "evaluate",
    "verdict_hash",
    "build_reasoning",
    "find_cross_reactive_match",
    "INTERACTION_MAP",
    "find_interaction",
    # Rule codes
    "RULE_ALLERGEN_MATCH",
    "RULE_CROSS_REACTIVE",
    "RULE_MED_INTERACTION",
    "rule_code_for",
]

__version__ = "risk_engine_v1"
