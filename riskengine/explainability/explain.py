"""
Explainability Core Logic

Transforms a Verdict's raw matches into typed, ranked explanation
entries. Does NOT modify decisions - only explains them.

Ordering: directMatch < crossReactive < interaction, then alphabetical
by matched term.

Version: explainability_v1
"""

from typing import List, Optional

from riskengine.risk.models import (
    AllergyMatch,
    CrossReactiveMatch,
    MedicationInteractionMatch,
    RuleMatch,
    Verdict,
)
from riskengine.risk.rule_codes import rule_code_for

from .models import (
    RULE_TYPE_ORDER,
    ExplanationEntry,
    ExplanationEvidence,
    ExplanationRuleType,
    StructuredExplanation,
)


def _evidence(severity: Optional[float]) -> Optional[ExplanationEvidence]:
    if severity is None:
        return None
    return ExplanationEvidence(risk_rate=severity / 100)


def build_entry(match: RuleMatch, taxonomy_version: str) -> Optional[ExplanationEntry]:
    """Explanation entry for one match; None for an unrecognized rule."""
    details = match.details
    rule_code = match.rule_code or rule_code_for(match.rule)

    if isinstance(match, AllergyMatch):
        return ExplanationEntry(
            summary=f'"{details.allergen}" matches allergen category {details.matched_category}',
            rule_type=ExplanationRuleType.DIRECT_MATCH,
            rule_code=rule_code,
            parent_category=details.matched_category or None,
            matched_term=details.allergen,
            taxonomy_version=taxonomy_version,
            evidence=_evidence(details.severity),
        )

    if isinstance(match, CrossReactiveMatch):
        return ExplanationEntry(
            summary=f'"{details.matched_term}" is cross-reactive with {details.source}',
            rule_type=ExplanationRuleType.CROSS_REACTIVE,
            rule_code=rule_code,
            parent_category=details.source or None,
            matched_term=details.matched_term,
            taxonomy_version=taxonomy_version,
            evidence=_evidence(details.severity),
        )

    if isinstance(match, MedicationInteractionMatch):
        # Canonical pair: same summary whichever drug was extracted.
        pair = sorted(d for d in (details.extracted, details.conflicts_with) if d)
        second = pair[1] if len(pair) > 1 else "unknown"
        return ExplanationEntry(
            summary=f"{pair[0]} may interact with {second}",
            rule_type=ExplanationRuleType.INTERACTION,
            rule_code=rule_code,
            matched_term=", ".join(pair),
            taxonomy_version=taxonomy_version,
        )

    return None


def build_explanation(
    verdict: Verdict,
    taxonomy_version: Optional[str] = None
) -> StructuredExplanation:
    """
    Build the structured explanation for one verdict.

    Args:
        verdict: Engine output
        taxonomy_version: Fallback when the verdict carries none

    Returns:
        StructuredExplanation with sorted entries
    """
    version = verdict.meta.taxonomy_version or taxonomy_version or "unknown"
    entries: List[ExplanationEntry] = []

    for match in verdict.matched:
        entry = build_entry(match, version)
        if entry is not None:
            entries.append(entry)

    entries.sort(key=lambda e: (RULE_TYPE_ORDER[e.rule_type], e.matched_term))

    return StructuredExplanation(
        risk_level=verdict.risk_level,
        taxonomy_version=version,
        entries=entries,
    )
