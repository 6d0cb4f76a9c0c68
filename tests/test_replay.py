"""
Replay Diff & Gate Tests

- Normalization: sorted, deduplicated projections
- Diff idempotence and notes direction
- Aggregate counts
- Legacy gate (strict and non-strict), fingerprinted gate
- Allowlist auto-detection and degradation
- End-to-end replay over the in-repo fixtures

Version: replay_gate_v1
"""

import json
from pathlib import Path
import pytest

from riskengine.replay import (
    ReplayVerdict,
    ScenarioLoadError,
    build_replay_report,
    compute_replay_diff,
    evaluate_gate,
    legacy_allowlist,
    load_allowlist,
    load_scenarios,
    normalize_verdict,
    parse_allowlist,
    replay_scenarios,
    report_hash,
)
from riskengine.risk import Profile, evaluate
from riskengine.shared import verify_hash
from riskengine.taxonomy import default_snapshot, load_taxonomy


FIXTURES = Path(__file__).resolve().parents[1] / "data" / "replay"


# ============================================================================
# TEST FIXTURES
# ============================================================================

def rv(level: str, terms=(), severity: int = 0) -> ReplayVerdict:
    return ReplayVerdict(risk_level=level, severity=severity, matched_terms=sorted(terms))


def report_of(*diffs, candidate_version="10i.2"):
    return build_replay_report(list(diffs), "10i.1", candidate_version)


@pytest.fixture
def mixed_verdict():
    profile = Profile(known_allergies=["tree_nut"], current_medications=["aspirin"])
    events = [
        {"type": "meal", "fields": {"meal": "mango salad"}},
        {"type": "meal", "fields": {"meal": "walnut bread"}},
        {"type": "meal", "fields": {"meal": "almond croissant"}},
        {"type": "meal", "fields": {"meal": "walnuts"}},
        {"type": "medication", "fields": {"medication": "ibuprofen"}},
    ]
    return evaluate(profile, events, default_snapshot())


@pytest.fixture
def fixture_snapshots():
    return (
        load_taxonomy(FIXTURES / "knowledge" / "baseline-taxonomy.json"),
        load_taxonomy(FIXTURES / "knowledge" / "candidate-taxonomy.json"),
    )


# ============================================================================
# NORMALIZE & DIFF
# ============================================================================

class TestNormalizeVerdict:

    def test_sorted_deduplicated_terms(self, mixed_verdict):
        norm = normalize_verdict(mixed_verdict, "10i.1")

        assert norm.matched_terms == ["almond", "mango", "walnut"]
        assert norm.matched_categories == ["tree_nut"]
        assert norm.cross_reactive is True
        assert norm.risk_level == "high"
        # mango: tree_nut 90 + riskModifier 10 outranks the direct matches
        assert norm.severity == 100
        assert norm.taxonomy_version == "10i.1"
        assert norm.registry_version is None

    def test_medication_only_projection(self):
        verdict = evaluate(
            Profile(current_medications=["aspirin"]),
            [{"type": "medication", "fields": {"medication": "ibuprofen"}}],
            default_snapshot(),
        )
        norm = normalize_verdict(verdict)

        assert norm.risk_level == "medium"
        assert norm.matched_terms == []
        assert norm.cross_reactive is False


class TestComputeReplayDiff:

    def test_identical_verdicts_idempotent(self, mixed_verdict):
        norm = normalize_verdict(mixed_verdict)
        diff = compute_replay_diff("s1", norm, normalize_verdict(mixed_verdict))

        assert diff.changes.risk_level_changed is False
        assert diff.changes.severity_changed is False
        assert diff.changes.added_matches == []
        assert diff.changes.removed_matches == []
        assert diff.changes.notes is None

    def test_upward_change(self):
        diff = compute_replay_diff("s1", rv("none"), rv("high", ["clam"], 95))

        assert diff.changes.risk_level_changed is True
        assert diff.changes.severity_changed is True
        assert diff.changes.added_matches == ["clam"]
        assert diff.changes.notes == "riskLevel none → high (up)"

    def test_downward_change(self):
        diff = compute_replay_diff("s1", rv("high", ["almond", "walnut"]), rv("medium", ["mango", "walnut"]))

        assert diff.changes.notes == "riskLevel high → medium (down)"
        assert diff.changes.added_matches == ["mango"]
        assert diff.changes.removed_matches == ["almond"]


class TestBuildReplayReport:

    def test_summary_counts(self):
        report = report_of(
            compute_replay_diff("a", rv("none"), rv("high", ["clam"])),
            compute_replay_diff("b", rv("high", ["almond"]), rv("none")),
            compute_replay_diff("c", rv("medium", ["mango"]), rv("medium", ["kiwi", "mango"])),
        )
        summary = report.summary

        assert summary.total_scenarios == 3
        assert summary.risk_level_changes_up == 1
        assert summary.risk_level_changes_down == 1
        assert summary.total_added_matches == 2
        assert summary.total_removed_matches == 1
        assert report.meta.baseline_taxonomy_version == "10i.1"
        assert report.meta.candidate_taxonomy_version == "10i.2"

    def test_report_hash_stable(self):
        make = lambda: report_of(compute_replay_diff("a", rv("none"), rv("high", ["clam"])))
        assert report_hash(make()) == report_hash(make())


# ============================================================================
# LEGACY GATE
# ============================================================================

class TestLegacyGate:

    def test_strict_unlisted_increase_single_failure(self):
        report = report_of(compute_replay_diff("s1", rv("none"), rv("medium", ["mango"])))
        result = evaluate_gate(report, legacy_allowlist([]), strict=True)

        assert result.passed is False
        assert result.failures == ["Scenario s1: riskLevel increased none → medium (not in allowlist)"]

    def test_non_strict_ignores_decrease(self):
        report = report_of(compute_replay_diff("s1", rv("high"), rv("none")))
        assert evaluate_gate(report, legacy_allowlist([]), strict=False).passed is True

    def test_strict_reports_decrease(self):
        report = report_of(compute_replay_diff("s1", rv("high"), rv("none")))
        result = evaluate_gate(report, legacy_allowlist([]), strict=True)

        assert result.failures == ["Strict mode: s1 has riskLevel change (high → none)"]

    def test_allowlisted_change_passes(self):
        report = report_of(compute_replay_diff("s1", rv("none"), rv("high")))
        assert evaluate_gate(report, legacy_allowlist(["s1"]), strict=True).passed is True

    def test_prefix_ids_reported_separately(self):
        report = report_of(
            compute_replay_diff("s1", rv("none"), rv("high")),
            compute_replay_diff("s10", rv("high"), rv("medium")),
        )
        result = evaluate_gate(report, legacy_allowlist([]), strict=True)

        assert result.failures == [
            "Scenario s1: riskLevel increased none → high (not in allowlist)",
            "Strict mode: s10 has riskLevel change (high → medium)",
        ]

    def test_all_scenarios_evaluated(self):
        report = report_of(
            compute_replay_diff("a", rv("none"), rv("high")),
            compute_replay_diff("b", rv("medium"), rv("medium")),
            compute_replay_diff("c", rv("none"), rv("medium")),
        )
        result = evaluate_gate(report, legacy_allowlist([]))
        assert len(result.failures) == 2


# ============================================================================
# FINGERPRINTED GATE
# ============================================================================

class TestFingerprintedGate:

    @pytest.fixture
    def clam_report(self):
        return report_of(compute_replay_diff("s-clam", rv("none"), rv("high", ["clam", "oyster"])))

    def allowlist_for(self, **expected):
        base = {"riskLevelFrom": "none", "riskLevelTo": "high", "addedMatches": ["oyster", "clam"], "removedMatches": []}
        base.update(expected)
        return parse_allowlist({"fingerprints": [{"scenarioId": "s-clam", "expected": base}]})

    def test_matching_fingerprint_passes(self, clam_report):
        result = evaluate_gate(clam_report, self.allowlist_for(candidateTaxonomyVersion="10i.2"), strict=True)
        assert result.passed is True
        assert result.failures == []

    def test_each_field_mismatch_reported(self, clam_report):
        allowlist = self.allowlist_for(
            riskLevelTo="medium",
            addedMatches=["clam"],
            removedMatches=["shrimp"],
            candidateTaxonomyVersion="10i.3",
        )
        result = evaluate_gate(clam_report, allowlist)

        assert result.passed is False
        assert result.failures == [
            'Scenario s-clam: riskLevelTo mismatch — expected "medium", got "high"',
            "Scenario s-clam: addedMatches mismatch — expected [clam], got [clam, oyster]",
            "Scenario s-clam: removedMatches mismatch — expected [shrimp], got []",
            'Scenario s-clam: candidateTaxonomyVersion mismatch — expected "10i.3", got "10i.2"',
        ]

    def test_missing_fingerprint_fails_without_strict(self):
        report = report_of(compute_replay_diff("s2", rv("high"), rv("none")))
        result = evaluate_gate(report, self.allowlist_for(), strict=False)

        assert result.failures == [
            "Scenario s2: riskLevel changed high → none (no fingerprint in allowlist)"
        ]

    def test_missing_fingerprint_reported_once_in_strict(self):
        report = report_of(compute_replay_diff("s2", rv("none"), rv("medium")))
        assert len(evaluate_gate(report, self.allowlist_for(), strict=True).failures) == 1

    def test_unchanged_scenarios_ignored(self):
        report = report_of(compute_replay_diff("s3", rv("high", ["almond"]), rv("high", ["walnut"])))
        assert evaluate_gate(report, self.allowlist_for(), strict=True).passed is True


# ============================================================================
# ALLOWLIST PARSING
# ============================================================================

class TestParseAllowlist:

    def test_legacy_document(self):
        parsed = parse_allowlist({"allowedRiskLevelChanges": ["a", "b", 3]})
        assert parsed.mode == "legacy"
        assert parsed.legacy_ids == frozenset({"a", "b"})

    @pytest.mark.parametrize("raw", [None, [], "allow-all", {"allowedRiskLevelChanges": "a"}, {}])
    def test_malformed_degrades_to_empty_legacy(self, raw):
        parsed = parse_allowlist(raw)
        assert parsed.mode == "legacy"
        assert parsed.legacy_ids == frozenset()
        assert parsed.fingerprints == {}

    def test_fingerprints_detected(self):
        parsed = parse_allowlist({
            "allowedRiskLevelChanges": ["ignored"],
            "fingerprints": [
                {"scenarioId": "s1", "expected": {"riskLevelFrom": "none", "riskLevelTo": "high"}},
                {"scenarioId": "", "expected": {}},
                {"scenarioId": "s2"},
                "junk",
            ],
        })

        assert parsed.mode == "fingerprinted"
        assert list(parsed.fingerprints) == ["s1"]
        expected = parsed.fingerprints["s1"].expected
        assert expected.added_matches == []
        assert expected.candidate_taxonomy_version is None
        assert parsed.legacy_ids == frozenset()

    def test_unreadable_file_degrades(self, tmp_path):
        assert load_allowlist(tmp_path / "missing.json").legacy_ids == frozenset()

        broken = tmp_path / "broken.json"
        broken.write_text("{", encoding="utf-8")
        assert load_allowlist(broken).mode == "legacy"


# ============================================================================
# END-TO-END REPLAY
# ============================================================================

class TestReplayScenarios:

    def test_fixture_corpus(self, fixture_snapshots):
        baseline, candidate = fixture_snapshots
        report = replay_scenarios(load_scenarios(FIXTURES / "scenarios.json"), baseline, candidate)

        assert report.summary.total_scenarios == 6
        assert report.summary.risk_level_changes_up == 1
        assert report.summary.risk_level_changes_down == 0
        assert report.summary.total_added_matches == 1

        clam = next(d for d in report.scenarios if d.scenario_id == "s-clam-chowder")
        assert clam.changes.notes == "riskLevel none → high (up)"
        assert clam.changes.added_matches == ["clam"]

    def test_advice_top_targets(self, fixture_snapshots):
        baseline, candidate = fixture_snapshots
        report = replay_scenarios(load_scenarios(FIXTURES / "scenarios.json"), baseline, candidate)

        top_targets = report.meta.advice_validation.top_targets
        assert top_targets == {
            "s-almond-croissant": "almond",
            "s-clam-chowder": "shellfish",
            "s-mango-salad": "mango",
            "s-peanuts-plural": "peanut",
        }
        assert list(top_targets) == sorted(top_targets)

    def test_fixture_allowlist_passes_strict(self, fixture_snapshots):
        baseline, candidate = fixture_snapshots
        report = replay_scenarios(load_scenarios(FIXTURES / "scenarios.json"), baseline, candidate)
        allowlist = load_allowlist(FIXTURES / "allowlist.json")

        assert allowlist.mode == "fingerprinted"
        assert evaluate_gate(report, allowlist, strict=True).passed is True

    def test_replay_is_deterministic(self, fixture_snapshots):
        baseline, candidate = fixture_snapshots
        scenarios = load_scenarios(FIXTURES / "scenarios.json")

        first = replay_scenarios(scenarios, baseline, candidate)
        second = replay_scenarios(scenarios, baseline, candidate)
        assert report_hash(first) == report_hash(second)

    def test_same_taxonomy_no_changes(self, fixture_snapshots):
        baseline, _ = fixture_snapshots
        report = replay_scenarios(load_scenarios(FIXTURES / "scenarios.json"), baseline, baseline)

        assert report.summary.risk_level_changes_up == 0
        assert all(not d.changes.added_matches for d in report.scenarios)

    def test_scenarios_must_be_array(self, tmp_path):
        path = tmp_path / "scenarios.json"
        path.write_text(json.dumps({"scenarioId": "s1"}), encoding="utf-8")
        with pytest.raises(ScenarioLoadError):
            load_scenarios(path)

    def test_scenario_without_id_rejected(self, tmp_path):
        path = tmp_path / "scenarios.json"
        path.write_text(json.dumps([{"profile": {}}]), encoding="utf-8")
        with pytest.raises(ScenarioLoadError):
            load_scenarios(path)


# ============================================================================
# CLI
# ============================================================================

class TestReplayValidateCli:

    def test_fixture_run_passes_and_writes_report(self, tmp_path):
        from scripts.replay_validate import parse_args, run

        exit_code = run(parse_args(["--out", str(tmp_path), "--strict"]))

        assert exit_code == 0
        written = json.loads((tmp_path / "replay-diff.json").read_text(encoding="utf-8"))
        assert written["summary"]["riskLevelChangesUp"] == 1
        assert written["meta"]["candidateTaxonomyVersion"] == "10i.2"

    def test_written_report_matches_report_hash(self, tmp_path, fixture_snapshots):
        from scripts.replay_validate import parse_args, run

        assert run(parse_args(["--out", str(tmp_path)])) == 0

        baseline, candidate = fixture_snapshots
        report = replay_scenarios(load_scenarios(FIXTURES / "scenarios.json"), baseline, candidate)
        written = json.loads((tmp_path / "replay-diff.json").read_text(encoding="utf-8"))
        assert verify_hash(written, report_hash(report))

    def test_corrupted_write_fails(self, tmp_path, monkeypatch):
        import scripts.replay_validate as cli

        def write_stale_report(report, out_dir):
            out_file = out_dir / "replay-diff.json"
            wire = report.to_wire()
            wire["summary"]["totalScenarios"] += 1
            out_file.write_text(json.dumps(wire), encoding="utf-8")
            return out_file

        monkeypatch.setattr(cli, "write_report", write_stale_report)

        assert cli.run(cli.parse_args(["--out", str(tmp_path)])) == 1

    def test_empty_allowlist_fails_gate(self, tmp_path):
        from scripts.replay_validate import parse_args, run

        allowlist = tmp_path / "allowlist.json"
        allowlist.write_text(json.dumps({"allowedRiskLevelChanges": []}), encoding="utf-8")

        exit_code = run(parse_args(["--out", str(tmp_path), "--allowlist", str(allowlist)]))
        assert exit_code == 1

    def test_missing_taxonomy_is_input_error(self, tmp_path):
        from scripts.replay_validate import parse_args, run

        args = parse_args(["--out", str(tmp_path), "--candidate-taxonomy", str(tmp_path / "nope.json")])
        assert run(args) == 2
