"""
Replay Diff & Gate Layer

Regression harness for rule-data promotions:

    Idle -> Normalized -> Diffed -> Gated

Historical scenarios are re-run under a baseline and a candidate taxonomy;
every risk-level change must be explained by the allowlist or CI fails.
The gate never auto-approves a risk increase.

Every function is a pure transform; nothing persists between calls.

Version: replay_gate_v1
"""

from .models import (
    ReplayVerdict,
    ReplayChanges,
    ReplayDiff,
    AdviceValidation,
    ReplayMeta,
    ReplaySummary,
    ReplayReport,
    FingerprintExpectation,
    AllowlistFingerprint,
    ParsedAllowlist,
    GateResult,
    ScenarioProfile,
    Scenario,
)
from .diff import (
    normalize_set,
    normalize_verdict,
    compute_replay_diff,
    build_replay_report,
    report_hash,
)
from .gate import (
    legacy_allowlist,
    parse_allowlist,
    load_allowlist,
    evaluate_gate,
)
from .runner import (
    ScenarioLoadError,
    load_scenarios,
    replay_scenarios,
    scenario_events,
    scenario_profile,
)

__all__ = [
    # Models
    "ReplayVerdict",
    "ReplayChanges",
    "ReplayDiff",
    "AdviceValidation",
    "ReplayMeta",
    "ReplaySummary",
    "ReplayReport",
    "FingerprintExpectation",
    "AllowlistFingerprint",
    "ParsedAllowlist",
    "GateResult",
    "ScenarioProfile",
    "Scenario",
    # Diff
    "normalize_set",
    "normalize_verdict",
    "compute_replay_diff",
    "build_replay_report",
    "report_hash",
    # Gate
    "legacy_allowlist",
    "parse_allowlist",
    "load_allowlist",
    "evaluate_gate",
    # Runner
    "ScenarioLoadError",
    "load_scenarios",
    "replay_scenarios",
    "scenario_events",
    "scenario_profile",
]

__version__ = "replay_gate_v1"
