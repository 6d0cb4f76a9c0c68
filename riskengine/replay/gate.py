"""
Replay Gate

Evaluates a ReplayReport against an allowlist in one of two modes:

- legacy: any unexplained risk INCREASE fails. Strict also fails any
  change (up or down) for a scenario not in the allowed set.
- fingerprinted: every risk-level change needs a fingerprint whose
  expected riskLevelFrom/riskLevelTo/addedMatches/removedMatches (and
  candidateTaxonomyVersion, when given) match exactly.

Every scenario is evaluated; the failure list is the full audit trail.
Failure strings are a stable contract for CI consumers.

Version: replay_gate_v1
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from pydantic import ValidationError

from riskengine.risk.models import RISK_ORDER

from .diff import normalize_set
from .models import (
    AllowlistFingerprint,
    FingerprintExpectation,
    GateResult,
    ParsedAllowlist,
    ReplayDiff,
    ReplayReport,
)


logger = logging.getLogger(__name__)


# ============================================================
# ALLOWLIST PARSING
# ============================================================

def legacy_allowlist(ids: Iterable[str]) -> ParsedAllowlist:
    return ParsedAllowlist(mode="legacy", legacy_ids=frozenset(ids))


def _parse_fingerprint(entry: Any) -> Optional[AllowlistFingerprint]:
    if not isinstance(entry, dict):
        return None
    scenario_id = entry.get("scenarioId")
    expected = entry.get("expected")
    if not isinstance(scenario_id, str) or not scenario_id or not isinstance(expected, dict):
        return None

    added = expected.get("addedMatches")
    removed = expected.get("removedMatches")
    version = expected.get("candidateTaxonomyVersion")
    try:
        return AllowlistFingerprint(
            scenario_id=scenario_id,
            expected=FingerprintExpectation(
                risk_level_from=expected.get("riskLevelFrom") or "",
                risk_level_to=expected.get("riskLevelTo") or "",
                added_matches=added if isinstance(added, list) else [],
                removed_matches=removed if isinstance(removed, list) else [],
                candidate_taxonomy_version=version if isinstance(version, str) else None,
            ),
        )
    except ValidationError as e:
        logger.warning(f"Skipping malformed fingerprint for {scenario_id}: {e}")
        return None


def parse_allowlist(raw: Any) -> ParsedAllowlist:
    """
    Auto-detect the allowlist format.

    A `fingerprints` array selects fingerprinted mode; otherwise
    `allowedRiskLevelChanges` is read as legacy ids. Anything malformed
    degrades to an empty legacy allowlist, so nothing is pre-approved.
    """
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning(f"Allowlist is not an object ({type(raw).__name__}); nothing is pre-approved")
        return legacy_allowlist([])

    if isinstance(raw.get("fingerprints"), list):
        fingerprints: Dict[str, AllowlistFingerprint] = {}
        for entry in raw["fingerprints"]:
            fp = _parse_fingerprint(entry)
            if fp is not None:
                fingerprints[fp.scenario_id] = fp
        return ParsedAllowlist(mode="fingerprinted", fingerprints=fingerprints)

    ids = raw.get("allowedRiskLevelChanges")
    if not isinstance(ids, list):
        return legacy_allowlist([])
    return legacy_allowlist(i for i in ids if isinstance(i, str))


def load_allowlist(path: Union[str, Path]) -> ParsedAllowlist:
    """Read and parse an allowlist file. Unreadable or invalid JSON degrades to empty."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Allowlist {path} unusable, nothing is pre-approved: {e}")
        return legacy_allowlist([])
    return parse_allowlist(raw)


# ============================================================
# GATE
# ============================================================

def _transition(d: ReplayDiff) -> str:
    return f"{d.baseline_verdict.risk_level} → {d.candidate_verdict.risk_level}"


def _is_increase(d: ReplayDiff) -> bool:
    return RISK_ORDER[d.candidate_verdict.risk_level] > RISK_ORDER[d.baseline_verdict.risk_level]


def _evaluate_legacy(report: ReplayReport, allowed: Set[str], strict: bool) -> List[str]:
    failures: List[str] = []
    reported: Set[str] = set()

    for d in report.scenarios:
        if not d.changes.risk_level_changed or d.scenario_id in allowed:
            continue
        if _is_increase(d):
            failures.append(
                f"Scenario {d.scenario_id}: riskLevel increased {_transition(d)} (not in allowlist)"
            )
            reported.add(d.scenario_id)

    if strict:
        for d in report.scenarios:
            if not d.changes.risk_level_changed or d.scenario_id in allowed:
                continue
            if d.scenario_id not in reported:
                failures.append(
                    f"Strict mode: {d.scenario_id} has riskLevel change ({_transition(d)})"
                )
                reported.add(d.scenario_id)

    return failures


def _quoted_mismatch(scenario_id: str, field: str, expected: Any, actual: Any) -> str:
    return f'Scenario {scenario_id}: {field} mismatch — expected "{expected}", got "{actual}"'


def _set_mismatch(scenario_id: str, field: str, expected: List[str], actual: List[str]) -> str:
    return (
        f"Scenario {scenario_id}: {field} mismatch — "
        f"expected [{', '.join(normalize_set(expected))}], got [{', '.join(normalize_set(actual))}]"
    )


def _evaluate_fingerprinted(report: ReplayReport, allowlist: ParsedAllowlist) -> List[str]:
    # A change without a fingerprint fails in every mode, so strict adds nothing here.
    failures: List[str] = []

    for d in report.scenarios:
        if not d.changes.risk_level_changed:
            continue

        sid = d.scenario_id
        fp = allowlist.fingerprints.get(sid)
        if fp is None:
            failures.append(
                f"Scenario {sid}: riskLevel changed {_transition(d)} (no fingerprint in allowlist)"
            )
            continue

        expected = fp.expected
        if d.baseline_verdict.risk_level != expected.risk_level_from:
            failures.append(_quoted_mismatch(
                sid, "riskLevelFrom", expected.risk_level_from, d.baseline_verdict.risk_level
            ))
        if d.candidate_verdict.risk_level != expected.risk_level_to:
            failures.append(_quoted_mismatch(
                sid, "riskLevelTo", expected.risk_level_to, d.candidate_verdict.risk_level
            ))
        if normalize_set(d.changes.added_matches) != normalize_set(expected.added_matches):
            failures.append(_set_mismatch(
                sid, "addedMatches", expected.added_matches, d.changes.added_matches
            ))
        if normalize_set(d.changes.removed_matches) != normalize_set(expected.removed_matches):
            failures.append(_set_mismatch(
                sid, "removedMatches", expected.removed_matches, d.changes.removed_matches
            ))
        if expected.candidate_taxonomy_version is not None:
            actual_version = report.meta.candidate_taxonomy_version
            if actual_version != expected.candidate_taxonomy_version:
                failures.append(_quoted_mismatch(
                    sid, "candidateTaxonomyVersion", expected.candidate_taxonomy_version, actual_version
                ))

    return failures


def evaluate_gate(
    report: ReplayReport,
    allowlist: ParsedAllowlist,
    strict: bool = False
) -> GateResult:
    """
    Gate a replay report. Never short-circuits and never auto-approves a
    risk increase.

    Returns:
        GateResult with passed=True only when failures is empty
    """
    if allowlist.mode == "fingerprinted":
        failures = _evaluate_fingerprinted(report, allowlist)
    else:
        failures = _evaluate_legacy(report, set(allowlist.legacy_ids), strict)

    for failure in failures:
        logger.warning(f"Gate failure: {failure}")
    return GateResult(passed=not failures, failures=failures)
