"""
Deterministic Rule Codes

Stable identifiers for every inference rule. They appear in verdict
matches and explanation entries for auditability; never renumber one.
"""

from typing import Optional


RULE_ALLERGEN_MATCH = "AA-RULE-AL-001"
RULE_CROSS_REACTIVE = "AA-RULE-CR-001"
RULE_MED_INTERACTION = "AA-RULE-MI-001"

_RULE_CODES = {
    "allergy_match": RULE_ALLERGEN_MATCH,
    "cross_reactive": RULE_CROSS_REACTIVE,
    "medication_interaction": RULE_MED_INTERACTION,
}


def rule_code_for(rule: str) -> Optional[str]:
    return _RULE_CODES.get(rule)
