"""
Advice Resolver

Maps matched terms/categories to registry entries:
1) Term has advice   -> term advice (parent lookup skipped entirely)
2) Else category has advice (given, or via parent_lookup) -> parent advice
3) Else              -> nothing for that match

Deduplicated by id across the whole input. Ordered term-level first,
then alphabetically by target. Never invents an entry.
"""

from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from riskengine.taxonomy import TaxonomySnapshot

from .models import AdviceEntry, MatchedForAdvice
from .registry import ADVICE_REGISTRY


ParentLookup = Callable[[str], Optional[str]]

_SPECIAL_TARGETS = {"general"}


def _normalize(s: str) -> str:
    return (s or "").lower().strip()


def resolve_advice(
    matched: Iterable[Union[MatchedForAdvice, dict]],
    parent_lookup: Optional[ParentLookup] = None,
    registry: Optional[Mapping[str, AdviceEntry]] = None
) -> List[AdviceEntry]:
    """
    Resolve advice for matched items. Deterministic.

    Args:
        matched: Items with matchedTerm and optional matchedCategory
        parent_lookup: Resolves a term's category when none is given
        registry: Override for tests; defaults to ADVICE_REGISTRY

    Returns:
        Unique entries, term-level before parent-level, then by target
    """
    entries = ADVICE_REGISTRY if registry is None else registry
    selected: Dict[str, AdviceEntry] = {}

    for item in matched:
        if not isinstance(item, MatchedForAdvice):
            item = MatchedForAdvice.model_validate(item)

        term = _normalize(item.matched_term)
        term_entry = entries.get(f"term:{term}") if term else None
        if term_entry is not None:
            selected.setdefault(term_entry.id, term_entry)
            continue

        category = item.matched_category
        if category is None and parent_lookup is not None:
            category = parent_lookup(term)
        parent_entry = entries.get(f"parent:{category}") if category else None
        if parent_entry is not None:
            selected.setdefault(parent_entry.id, parent_entry)

    return sorted(
        selected.values(),
        key=lambda e: (0 if e.level == "term" else 1, e.target),
    )


def validate_no_orphan_advice(
    snapshot: TaxonomySnapshot,
    registry: Optional[Mapping[str, AdviceEntry]] = None
) -> List[str]:
    """
    Registry targets that map to no taxonomy node (parent, child, or
    cross-reactive term). Empty list means every entry is reachable.
    """
    entries = ADVICE_REGISTRY if registry is None else registry

    parents = {_normalize(k) for k in snapshot.taxonomy}
    children = {
        _normalize(child)
        for node in snapshot.taxonomy.values()
        for child in node.children
    }
    cross_terms = {
        _normalize(term)
        for relation in snapshot.cross_reactive
        for term in relation.related
    }
    known = parents | children | cross_terms | _SPECIAL_TARGETS

    orphans = [e.target for e in entries.values() if _normalize(e.target) not in known]
    return sorted(orphans)
