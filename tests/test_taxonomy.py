"""
Taxonomy Layer Tests

- Expansion of parent keys into children, literal fallback for misses
- Category and severity resolution (default severity for unknown)
- First-parent-wins for shared children
- Loader: default snapshot, JSON documents, degrade and error paths
- Guardrails: severity bounds, empty parents, overlaps

Version: taxonomy_v1
"""

import json

import pytest

from riskengine.config import DEFAULT_CATEGORY_SEVERITY
from riskengine.taxonomy import (
    DEFAULT_TAXONOMY_VERSION,
    TaxonomyLoadError,
    TaxonomySnapshot,
    default_snapshot,
    expand_allergies,
    find_taxonomy_issues,
    load_taxonomy,
    parent_for_term,
    resolve_category,
    severity_for,
    snapshot_from_document,
)


# ============================================================================
# TEST FIXTURES
# ============================================================================

@pytest.fixture
def snapshot() -> TaxonomySnapshot:
    return default_snapshot()


@pytest.fixture
def taxonomy_doc() -> dict:
    return {
        "version": "10i.9",
        "taxonomy": {
            "tree_nut": {"label": "Tree Nut", "children": ["almond", "walnut"]},
            "shellfish": {"children": ["shrimp"]},
        },
        "severity": {"tree_nut": 90, "shellfish": 95},
        "crossReactive": [{"source": "latex", "related": ["banana"], "riskModifier": 15}],
    }


# ============================================================================
# EXPANSION
# ============================================================================

class TestExpandAllergies:

    def test_parent_key_expands_to_children(self, snapshot):
        expanded = expand_allergies(["tree_nut"], snapshot)
        assert "almond" in expanded
        assert "brazil nut" in expanded
        assert "tree_nut" not in expanded

    def test_unknown_key_falls_back_to_singular_literal(self, snapshot):
        assert expand_allergies(["Peanuts"], snapshot) == {"peanut"}

    def test_key_is_normalized_before_lookup(self, snapshot):
        expanded = expand_allergies(['  "Shellfish" '], snapshot)
        assert "shrimp" in expanded

    def test_empty_entries_ignored(self, snapshot):
        assert expand_allergies(["", "   "], snapshot) == set()

    def test_multiple_allergies_union(self, snapshot):
        expanded = expand_allergies(["sesame", "kiwis"], snapshot)
        assert expanded == {"sesame", "tahini", "kiwi"}


# ============================================================================
# CATEGORY & SEVERITY
# ============================================================================

class TestCategoryResolution:

    def test_child_resolves_to_parent(self, snapshot):
        assert resolve_category("pistachio", snapshot) == "tree_nut"
        assert severity_for("tree_nut", snapshot) == 90

    def test_explicit_severity_entry_wins_over_parent(self, snapshot):
        # peanut is a legume child but carries its own severity
        assert resolve_category("peanut", snapshot) == "peanut"
        assert severity_for("peanut", snapshot) == 95

    def test_unknown_term_is_its_own_category(self, snapshot):
        assert resolve_category("Kiwi", snapshot) == "kiwi"

    def test_unknown_category_gets_default_severity(self, snapshot):
        assert severity_for("kiwi", snapshot) == DEFAULT_CATEGORY_SEVERITY == 50

    def test_shared_child_first_parent_wins(self, snapshot):
        # soy appears under legume (first) and soy
        assert parent_for_term("soy", snapshot) == "legume"

    def test_parent_lookup_is_normalized(self, snapshot):
        assert parent_for_term("  ALMOND ", snapshot) == "tree_nut"
        assert parent_for_term("banana", snapshot) is None


# ============================================================================
# LOADER
# ============================================================================

class TestLoader:

    def test_no_path_returns_default(self, monkeypatch):
        monkeypatch.delenv("ALLERGEN_TAXONOMY_PATH", raising=False)
        assert load_taxonomy().version == DEFAULT_TAXONOMY_VERSION

    def test_loads_document_from_path(self, tmp_path, taxonomy_doc):
        path = tmp_path / "taxonomy.json"
        path.write_text(json.dumps(taxonomy_doc), encoding="utf-8")

        loaded = load_taxonomy(path)

        assert loaded.version == "10i.9"
        assert loaded.taxonomy["tree_nut"].children == ["almond", "walnut"]
        assert loaded.cross_reactive[0].risk_modifier == 15

    def test_env_path_used_when_no_argument(self, tmp_path, taxonomy_doc, monkeypatch):
        path = tmp_path / "env-taxonomy.json"
        path.write_text(json.dumps(taxonomy_doc), encoding="utf-8")
        monkeypatch.setenv("ALLERGEN_TAXONOMY_PATH", str(path))

        assert load_taxonomy().version == "10i.9"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(TaxonomyLoadError):
            load_taxonomy(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(TaxonomyLoadError):
            load_taxonomy(path)

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(TaxonomyLoadError):
            load_taxonomy(path)

    def test_missing_sections_degrade(self):
        loaded = snapshot_from_document({"taxonomy": "nope", "severity": {"egg": "high", "fish": 90}})

        assert loaded.version == "unknown"
        assert loaded.taxonomy == {}
        assert loaded.severity == {"fish": 90}
        assert loaded.cross_reactive == []

    def test_fractional_values_accepted(self, tmp_path, taxonomy_doc):
        taxonomy_doc["severity"]["tree_nut"] = 92.5
        taxonomy_doc["crossReactive"][0]["riskModifier"] = 2.5
        path = tmp_path / "fractional.json"
        path.write_text(json.dumps(taxonomy_doc), encoding="utf-8")

        loaded = load_taxonomy(path)

        assert loaded.severity["tree_nut"] == 92.5
        assert loaded.severity["shellfish"] == 95
        assert loaded.cross_reactive[0].risk_modifier == 2.5
        assert severity_for("tree_nut", loaded) == 92.5


# ============================================================================
# GUARDRAILS
# ============================================================================

class TestGuardrails:

    def test_default_snapshot_is_clean(self, snapshot):
        assert find_taxonomy_issues(snapshot) == []

    def test_severity_out_of_range_reported(self):
        snap = TaxonomySnapshot(
            taxonomy={"egg": {"children": ["egg"]}},
            severity={"egg": 120, "fish": -1},
        )
        issues = find_taxonomy_issues(snap)
        assert len(issues) == 2
        assert any("egg is 120" in i for i in issues)

    def test_empty_parent_reported(self):
        snap = TaxonomySnapshot(taxonomy={"egg": {"children": []}})
        assert find_taxonomy_issues(snap) == ["Taxonomy parent egg has no children"]

    def test_disallowed_overlap_reported(self):
        snap = TaxonomySnapshot(taxonomy={
            "dairy": {"children": ["butter"]},
            "legume": {"children": ["peanut", "butter"]},
        })
        issues = find_taxonomy_issues(snap)
        assert issues == ['Child "butter" is shared by dairy, legume (not an allowed overlap)']

    def test_allowed_overlap_accepted_in_either_order(self):
        snap = TaxonomySnapshot(taxonomy={
            "soy": {"children": ["soy"]},
            "legume": {"children": ["soy"]},
        })
        assert find_taxonomy_issues(snap, allowed_overlaps=[("legume", "soy")]) == []
