"""
Allergy & Interaction Risk Engine

Deterministic, rule-based risk classification for logged meal and
medication events, plus the replay gate that guards rule-data changes.

Layers (leaves first):
- taxonomy        allergen tree, severity table, cross-reactivity registry
- matching        longest-first, word-boundary, plural-tolerant term matcher
- risk            evaluate(profile, events, snapshot) -> Verdict
- advice          closed advice registry, term overrides parent
- explainability  ranked, typed projection of a Verdict
- report          check report assembly (verdict + explanation + advice)
- replay          normalize / diff / aggregate / gate

Zero LLM. Zero embeddings. Same inputs, same outputs.
"""

__version__ = "1.0.0"
