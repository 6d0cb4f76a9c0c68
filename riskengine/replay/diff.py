"""
Replay Diff

Normalize -> Diff -> Aggregate. Pure and deterministic: sorted lists,
no I/O, no clock.

Version: replay_gate_v1
"""

from typing import Iterable, List, Optional

from riskengine.risk.models import RISK_ORDER, Verdict
from riskengine.shared.hashing import canonicalize_and_hash

from .models import (
    ReplayChanges,
    ReplayDiff,
    ReplayMeta,
    ReplayReport,
    ReplaySummary,
    ReplayVerdict,
)


def normalize_set(values: Iterable[str]) -> List[str]:
    """Deduplicate and sort for order-insensitive comparison."""
    return sorted(set(values))


def normalize_verdict(
    verdict: Verdict,
    taxonomy_version: Optional[str] = None,
    registry_version: Optional[str] = None
) -> ReplayVerdict:
    """
    Project a Verdict onto the comparable replay shape.

    Allergy matches contribute their allergen and category; cross-reactive
    matches contribute their matched term and source. Medication
    interactions are not part of the projection.
    """
    terms: List[str] = []
    categories: List[str] = []
    cross_reactive = False

    for match in verdict.matched:
        if match.rule == "allergy_match":
            if match.details.allergen:
                terms.append(match.details.allergen)
            if match.details.matched_category:
                categories.append(match.details.matched_category)
        elif match.rule == "cross_reactive":
            cross_reactive = True
            if match.details.matched_term:
                terms.append(match.details.matched_term)
            if match.details.source:
                categories.append(match.details.source)

    return ReplayVerdict(
        risk_level=verdict.risk_level,
        severity=verdict.meta.severity,
        matched_terms=normalize_set(terms),
        matched_categories=normalize_set(categories),
        cross_reactive=cross_reactive,
        taxonomy_version=taxonomy_version,
        registry_version=registry_version,
    )


def _direction(baseline: ReplayVerdict, candidate: ReplayVerdict) -> str:
    return "up" if RISK_ORDER[candidate.risk_level] > RISK_ORDER[baseline.risk_level] else "down"


def compute_replay_diff(
    scenario_id: str,
    baseline: ReplayVerdict,
    candidate: ReplayVerdict
) -> ReplayDiff:
    """
    Diff two projections of the same scenario.

    addedMatches/removedMatches are set differences over matched terms,
    sorted. notes is set only when the risk level changed.
    """
    baseline_terms = set(baseline.matched_terms)
    candidate_terms = set(candidate.matched_terms)
    risk_level_changed = baseline.risk_level != candidate.risk_level

    notes = None
    if risk_level_changed:
        notes = (
            f"riskLevel {baseline.risk_level} → {candidate.risk_level} "
            f"({_direction(baseline, candidate)})"
        )

    return ReplayDiff(
        scenario_id=scenario_id,
        baseline_verdict=baseline,
        candidate_verdict=candidate,
        changes=ReplayChanges(
            risk_level_changed=risk_level_changed,
            severity_changed=baseline.severity != candidate.severity,
            added_matches=sorted(candidate_terms - baseline_terms),
            removed_matches=sorted(baseline_terms - candidate_terms),
            notes=notes,
        ),
    )


def build_replay_report(
    diffs: List[ReplayDiff],
    baseline_version: Optional[str] = None,
    candidate_version: Optional[str] = None
) -> ReplayReport:
    """Fold scenario diffs into a report with dashboard counts."""
    up = down = added = removed = 0
    for diff in diffs:
        if diff.changes.risk_level_changed:
            if _direction(diff.baseline_verdict, diff.candidate_verdict) == "up":
                up += 1
            else:
                down += 1
        added += len(diff.changes.added_matches)
        removed += len(diff.changes.removed_matches)

    return ReplayReport(
        meta=ReplayMeta(
            baseline_taxonomy_version=baseline_version,
            candidate_taxonomy_version=candidate_version,
        ),
        scenarios=list(diffs),
        summary=ReplaySummary(
            total_scenarios=len(diffs),
            risk_level_changes_up=up,
            risk_level_changes_down=down,
            total_added_matches=added,
            total_removed_matches=removed,
        ),
    )


def report_hash(report: ReplayReport) -> str:
    """Stable "sha256:<hex>" stamp over the report wire shape."""
    return canonicalize_and_hash(report)
