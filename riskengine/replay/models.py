"""
Replay Models

Normalized, sorted projections used for stable byte-for-byte comparison
across runs. None of these reference a live Verdict object.

Version: replay_gate_v1
"""

from typing import Any, Dict, FrozenSet, List, Literal, Optional

from pydantic import Field

from riskengine.risk.models import RiskLevel
from riskengine.shared.models import Severity, WireModel


# ============================================================
# VERDICT PROJECTION & DIFF
# ============================================================

class ReplayVerdict(WireModel):
    risk_level: RiskLevel
    severity: Severity = 0
    matched_terms: List[str] = Field(default_factory=list, description="Sorted, deduplicated")
    matched_categories: List[str] = Field(default_factory=list, description="Sorted, deduplicated")
    cross_reactive: bool = False
    taxonomy_version: Optional[str] = None
    registry_version: Optional[str] = None


class ReplayChanges(WireModel):
    risk_level_changed: bool
    severity_changed: bool
    added_matches: List[str] = Field(default_factory=list)
    removed_matches: List[str] = Field(default_factory=list)
    notes: Optional[str] = Field(
        default=None,
        description="Only when riskLevel changed e.g. 'riskLevel none → medium (up)'"
    )


class ReplayDiff(WireModel):
    scenario_id: str
    baseline_verdict: ReplayVerdict
    candidate_verdict: ReplayVerdict
    changes: ReplayChanges


# ============================================================
# REPORT
# ============================================================

class AdviceValidation(WireModel):
    mode: Literal["present"] = "present"
    top_targets: Dict[str, str] = Field(
        default_factory=dict,
        description="scenarioId -> top advice target, keys sorted"
    )


class ReplayMeta(WireModel):
    baseline_taxonomy_version: Optional[str] = None
    candidate_taxonomy_version: Optional[str] = None
    advice_validation: Optional[AdviceValidation] = None


class ReplaySummary(WireModel):
    """Dashboard counts. Not used for gating decisions."""
    total_scenarios: int = 0
    risk_level_changes_up: int = 0
    risk_level_changes_down: int = 0
    total_added_matches: int = 0
    total_removed_matches: int = 0


class ReplayReport(WireModel):
    meta: ReplayMeta = Field(default_factory=ReplayMeta)
    scenarios: List[ReplayDiff] = Field(default_factory=list)
    summary: ReplaySummary = Field(default_factory=ReplaySummary)


# ============================================================
# ALLOWLIST & GATE
# ============================================================

class FingerprintExpectation(WireModel):
    risk_level_from: str = ""
    risk_level_to: str = ""
    added_matches: List[str] = Field(default_factory=list)
    removed_matches: List[str] = Field(default_factory=list)
    candidate_taxonomy_version: Optional[str] = None


class AllowlistFingerprint(WireModel):
    """Pre-approval of one specific, known diff for one scenario."""
    scenario_id: str
    expected: FingerprintExpectation


class ParsedAllowlist(WireModel):
    """
    Legacy (flat scenario ids) or fingerprinted (scenarioId -> expected
    diff). The two modes are mutually exclusive per document.
    """
    mode: Literal["legacy", "fingerprinted"] = "legacy"
    legacy_ids: FrozenSet[str] = Field(default_factory=frozenset)
    fingerprints: Dict[str, AllowlistFingerprint] = Field(default_factory=dict)


class GateResult(WireModel):
    """
    CI exit contract. Each failure is a complete sentence naming the
    scenario and the exact mismatch.
    """
    passed: bool
    failures: List[str] = Field(default_factory=list)


# ============================================================
# SCENARIO CORPUS
# ============================================================

class ScenarioProfile(WireModel):
    profile_id: Optional[str] = None
    known_allergies: Optional[List[str]] = None
    allergens: Optional[List[str]] = None
    current_medications: List[Any] = Field(default_factory=list)


class Scenario(WireModel):
    """One historical, replayable check."""
    scenario_id: str
    profile: ScenarioProfile = Field(default_factory=ScenarioProfile)
    events: List[Dict[str, Any]] = Field(default_factory=list)
