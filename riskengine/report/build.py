"""
Check Report Builder

Pure apart from the generatedAt default. Matched entries are normalized
and sorted (kind, matchedTerm, matchedCategory); the advice block is
ranked from the registry, capped, with the general safety fallback when
matches exist but the registry has nothing.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from riskengine.advice import (
    ADVICE_REGISTRY_VERSION,
    GENERAL_SAFETY_FALLBACK,
    MatchedForAdvice,
    resolve_advice,
)
from riskengine.config import ADVICE_CAP
from riskengine.explainability import build_explanation
from riskengine.risk.engine import verdict_hash
from riskengine.risk.models import RuleMatch, Verdict
from riskengine.risk.rule_codes import rule_code_for
from riskengine.taxonomy import TaxonomySnapshot, default_snapshot, parent_for_term

from .models import (
    AdviceBlock,
    CheckReport,
    ReportEvent,
    ReportInput,
    ReportMatchedEntry,
    ReportMeta,
    ReportOutput,
    ReportVerdict,
    ReportVerdictMeta,
)


# Wire keys already surfaced as top-level entry fields
_SURFACED_DETAIL_KEYS = {
    "allergen", "matchedTerm", "matchedCategory", "source", "extracted", "conflictsWith",
}

_ADVICE_KINDS = {"allergy_match", "cross_reactive"}


def report_filename(profile_id: str, check_id: str, taxonomy_version: Optional[str]) -> str:
    return f"AA_SafetyReport_{profile_id}_{check_id}_{taxonomy_version or 'unknown'}.json"


def _matched_term(match: RuleMatch) -> str:
    if match.rule == "allergy_match":
        return match.details.allergen
    if match.rule == "cross_reactive":
        return match.details.matched_term
    pair = sorted(t for t in (match.details.extracted, match.details.conflicts_with) if t)
    return ", ".join(pair)


def _matched_category(match: RuleMatch) -> Optional[str]:
    if match.rule == "allergy_match":
        return match.details.matched_category or None
    if match.rule == "cross_reactive":
        return match.details.source or None
    return None


def normalize_matched(matched: Sequence[RuleMatch]) -> List[ReportMatchedEntry]:
    entries = []
    for match in matched:
        details = {
            k: v for k, v in match.details.to_wire().items()
            if k not in _SURFACED_DETAIL_KEYS
        }
        entries.append(ReportMatchedEntry(
            kind=match.rule,
            rule_code=match.rule_code or rule_code_for(match.rule),
            matched_term=_matched_term(match),
            matched_category=_matched_category(match),
            cross_reactive=True if match.rule == "cross_reactive" else None,
            details=details or None,
        ))

    # Missing category sorts last
    return sorted(entries, key=lambda e: (e.kind, e.matched_term, e.matched_category or "\uffff"))


def build_advice_block(
    matched: Sequence[ReportMatchedEntry],
    snapshot: TaxonomySnapshot
) -> Optional[AdviceBlock]:
    relevant = [m for m in matched if m.kind in _ADVICE_KINDS]
    if not relevant:
        return None

    items = resolve_advice(
        [MatchedForAdvice(matched_term=m.matched_term, matched_category=m.matched_category) for m in relevant],
        parent_lookup=lambda term: parent_for_term(term, snapshot),
    )
    items = items[:ADVICE_CAP] if items else [GENERAL_SAFETY_FALLBACK]

    return AdviceBlock(
        version=ADVICE_REGISTRY_VERSION,
        items=items,
        top_target=items[0].target,
    )


def build_check_report(
    check_id: str,
    profile_id: str,
    verdict: Verdict,
    events: Sequence[Union[ReportEvent, Dict[str, Any]]] = (),
    generated_at: Optional[str] = None,
    snapshot: Optional[TaxonomySnapshot] = None
) -> CheckReport:
    """
    Build the safety report for a stored check.

    Args:
        check_id: Stored check id, first half of the traceId
        profile_id: Owner of the check
        verdict: The stored Verdict, reported as-is
        events: Events the check was evaluated on; sorted by (createdAt, id)
        generated_at: ISO timestamp; defaults to now (UTC)
        snapshot: Taxonomy used for parent lookup during advice ranking

    Returns:
        CheckReport with verdict summary, explanation and optional advice
    """
    snapshot = snapshot or default_snapshot()
    taxonomy_version = verdict.meta.taxonomy_version or None
    trace_id = f"{check_id}:{taxonomy_version or 'unknown'}"

    report_events = [e if isinstance(e, ReportEvent) else ReportEvent.model_validate(e) for e in events]
    report_events.sort(key=lambda e: (e.created_at or "", e.id))

    matched = normalize_matched(verdict.matched)

    return CheckReport(
        meta=ReportMeta(
            generated_at=generated_at or datetime.now(timezone.utc).isoformat(),
            check_id=check_id,
            profile_id=profile_id,
            taxonomy_version=taxonomy_version,
            trace_id=trace_id,
            verdict_hash=verdict_hash(verdict),
        ),
        input=ReportInput(events=report_events),
        output=ReportOutput(
            verdict=ReportVerdict(
                risk_level=verdict.risk_level,
                reasoning=verdict.reasoning,
                meta=ReportVerdictMeta(
                    severity=verdict.meta.severity,
                    taxonomy_version=taxonomy_version,
                    trace_id=trace_id,
                ),
                matched=matched,
            ),
            explanation=build_explanation(verdict, taxonomy_version),
            advice=build_advice_block(matched, snapshot),
        ),
    )
