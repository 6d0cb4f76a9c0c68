"""
Replay Runner

Runs every historical scenario under a baseline and a candidate taxonomy
and folds the diffs into one ReplayReport. Scenarios are independent and
run sequentially; order only affects report order.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from pydantic import ValidationError

from riskengine.report import build_check_report
from riskengine.risk import Profile, evaluate
from riskengine.taxonomy import TaxonomySnapshot

from .diff import build_replay_report, compute_replay_diff, normalize_verdict
from .models import AdviceValidation, ReplayDiff, ReplayReport, Scenario


logger = logging.getLogger(__name__)

REPLAYED_EVENT_TYPES = {"meal", "medication"}

# Fixed so advice validation output is byte-stable across runs
REPLAY_GENERATED_AT = "2025-01-15T12:00:00.000Z"
DEFAULT_REPLAY_PROFILE_ID = "00000000-0000-0000-0000-000000000001"


class ScenarioLoadError(ValueError):
    """The scenario corpus could not be read or is not a JSON array of scenarios."""


def load_scenarios(path: Union[str, Path]) -> List[Scenario]:
    """
    Raises:
        ScenarioLoadError: unreadable file, invalid JSON, not an array, or
            an entry without a scenarioId
    """
    abs_path = Path(path).expanduser().resolve()
    try:
        parsed = json.loads(abs_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ScenarioLoadError(f"load_scenarios: cannot read {abs_path}: {e}") from e

    if not isinstance(parsed, list):
        raise ScenarioLoadError(f"Scenarios must be array: {abs_path}")

    try:
        scenarios = [Scenario.model_validate(s) for s in parsed]
    except ValidationError as e:
        raise ScenarioLoadError(f"load_scenarios: malformed scenario in {abs_path}: {e}") from e

    logger.info(f"Loaded {len(scenarios)} replay scenarios from {abs_path}")
    return scenarios


def scenario_profile(scenario: Scenario) -> Profile:
    """known_allergies wins over allergens; both absent means no allergies."""
    p = scenario.profile
    allergies = p.known_allergies if p.known_allergies is not None else (p.allergens or [])
    return Profile(known_allergies=allergies, current_medications=p.current_medications)


def scenario_events(scenario: Scenario) -> List[Dict[str, Any]]:
    """Meal and medication events only, with event_data/fields unified."""
    events = []
    for e in scenario.events:
        if e.get("type") not in REPLAYED_EVENT_TYPES:
            continue
        fields = e.get("event_data") or e.get("fields") or {}
        events.append({"type": e["type"], "fields": fields})
    return events


def replay_scenarios(
    scenarios: Sequence[Scenario],
    baseline: TaxonomySnapshot,
    candidate: TaxonomySnapshot
) -> ReplayReport:
    """
    Evaluate each scenario twice and diff the projections.

    Scenarios whose candidate verdict has allergy or cross-reactive
    matches also record the top advice target their report would show
    (meta.adviceValidation.topTargets, keys sorted).
    """
    diffs: List[ReplayDiff] = []
    top_targets: Dict[str, str] = {}

    for scenario in scenarios:
        profile = scenario_profile(scenario)
        events = scenario_events(scenario)

        baseline_verdict = evaluate(profile, events, baseline)
        candidate_verdict = evaluate(profile, events, candidate)

        diffs.append(compute_replay_diff(
            scenario.scenario_id,
            normalize_verdict(baseline_verdict, baseline.version),
            normalize_verdict(candidate_verdict, candidate.version),
        ))

        if any(m.rule in ("allergy_match", "cross_reactive") for m in candidate_verdict.matched):
            report = build_check_report(
                check_id=f"replay-{scenario.scenario_id}",
                profile_id=scenario.profile.profile_id or DEFAULT_REPLAY_PROFILE_ID,
                verdict=candidate_verdict,
                generated_at=REPLAY_GENERATED_AT,
                snapshot=candidate,
            )
            advice = report.output.advice
            if advice is not None and advice.top_target is not None:
                top_targets[scenario.scenario_id] = advice.top_target

    report = build_replay_report(diffs, baseline.version, candidate.version)
    if top_targets:
        advice_validation = AdviceValidation(top_targets=dict(sorted(top_targets.items())))
        report = report.model_copy(
            update={"meta": report.meta.model_copy(update={"advice_validation": advice_validation})}
        )

    logger.info(
        f"Replayed {report.summary.total_scenarios} scenarios "
        f"({baseline.version} -> {candidate.version}): "
        f"{report.summary.risk_level_changes_up} up, {report.summary.risk_level_changes_down} down"
    )
    return report
