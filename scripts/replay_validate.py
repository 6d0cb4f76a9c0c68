#!/usr/bin/env python3
"""
Replay Validator
================
Deterministic regression gate for taxonomy promotions. Replays the
scenario corpus under the baseline and candidate taxonomies, writes
replay-diff.json, and gates the result against the allowlist.

Usage:
    python scripts/replay_validate.py
    python scripts/replay_validate.py --candidate-taxonomy path/to/candidate.json --strict

When paths are omitted, fixtures under data/replay/ (or REPLAY_FIXTURES_DIR)
are used.

Exit codes: 0 gate passed, 1 orphan advice or gate failed, 2 unusable input.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from riskengine.advice import validate_no_orphan_advice
from riskengine.config import log_level, replay_fixtures_dir, replay_out_dir, replay_strict_default
from riskengine.replay import (
    ScenarioLoadError,
    evaluate_gate,
    load_allowlist,
    load_scenarios,
    replay_scenarios,
    report_hash,
)
from riskengine.shared import verify_hash
from riskengine.taxonomy import TaxonomyLoadError, load_taxonomy

logging.basicConfig(
    level=log_level(),
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

TOP_DIFFS = 5


def _bool_arg(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def parse_args(argv=None) -> argparse.Namespace:
    fixtures = replay_fixtures_dir()

    parser = argparse.ArgumentParser(description='Replay scenarios under baseline and candidate taxonomies and gate the diff')
    parser.add_argument('--baseline-taxonomy', type=Path, default=fixtures / "knowledge" / "baseline-taxonomy.json")
    parser.add_argument('--candidate-taxonomy', type=Path, default=fixtures / "knowledge" / "candidate-taxonomy.json")
    parser.add_argument('--scenarios', type=Path, default=fixtures / "scenarios.json")
    parser.add_argument('--allowlist', type=Path, default=fixtures / "allowlist.json")
    parser.add_argument('--out', type=Path, default=replay_out_dir(), help='Directory for replay-diff.json')
    parser.add_argument(
        '--strict', type=_bool_arg, nargs='?', const=True, default=None,
        help='Fail on any riskLevel change not in the allowlist (default: REPLAY_STRICT)'
    )
    args = parser.parse_args(argv)
    if args.strict is None:
        args.strict = replay_strict_default()
    return args


def log_top_diffs(report) -> None:
    changed = [
        d for d in report.scenarios
        if d.changes.risk_level_changed or d.changes.added_matches or d.changes.removed_matches
    ]
    if not changed:
        return

    logger.info("--- Top diffs ---")
    for d in changed[:TOP_DIFFS]:
        logger.info(f"{d.scenario_id}:")
        if d.changes.risk_level_changed:
            logger.info(f"  riskLevel: {d.baseline_verdict.risk_level} → {d.candidate_verdict.risk_level}")
        if d.changes.added_matches:
            logger.info(f"  added: {', '.join(d.changes.added_matches)}")
        if d.changes.removed_matches:
            logger.info(f"  removed: {', '.join(d.changes.removed_matches)}")


def write_report(report, out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / "replay-diff.json"
    out_file.write_text(json.dumps(report.to_wire(), indent=2, ensure_ascii=False), encoding="utf-8")
    return out_file


def run(args: argparse.Namespace) -> int:
    try:
        baseline = load_taxonomy(args.baseline_taxonomy)
        candidate = load_taxonomy(args.candidate_taxonomy)
        scenarios = load_scenarios(args.scenarios)
    except (TaxonomyLoadError, ScenarioLoadError) as e:
        logger.error(str(e))
        return 2

    allowlist = load_allowlist(args.allowlist)
    report = replay_scenarios(scenarios, baseline, candidate)

    orphans = validate_no_orphan_advice(candidate)
    if orphans:
        logger.error("--- Orphan Advice FAILED ---")
        logger.error(f"Advice targets not in taxonomy: {', '.join(orphans)}")
        return 1

    gate = evaluate_gate(report, allowlist, args.strict)

    digest = report_hash(report)
    out_file = write_report(report, args.out)
    if not verify_hash(json.loads(out_file.read_text(encoding="utf-8")), digest):
        logger.error(f"Written report {out_file} does not match report hash {digest}")
        return 1

    summary = report.summary
    logger.info("=== Replay Validation Report ===")
    logger.info(f"Allowlist mode: {allowlist.mode}")
    logger.info(f"Total scenarios: {summary.total_scenarios}")
    logger.info(f"RiskLevel changes (up): {summary.risk_level_changes_up}")
    logger.info(f"RiskLevel changes (down): {summary.risk_level_changes_down}")
    logger.info(f"Added matches: {summary.total_added_matches}")
    logger.info(f"Removed matches: {summary.total_removed_matches}")
    logger.info(f"Report hash: {digest}")
    logger.info(f"Output: {out_file}")

    log_top_diffs(report)

    if not gate.passed:
        logger.error("--- Gate FAILED ---")
        for failure in gate.failures:
            logger.error(f"  {failure}")
        return 1

    logger.info("--- Gate PASSED ---")
    return 0


def main(argv=None):
    """CLI entry point."""
    sys.exit(run(parse_args(argv)))


if __name__ == '__main__':
    main()
