"""
Taxonomy Expansion

Expands declared allergies into matchable terms and resolves the
category/severity of a matched term. Pure functions over an explicit
TaxonomySnapshot; nothing is cached across snapshots.
"""

from typing import Iterable, Optional, Set

from riskengine.config import DEFAULT_CATEGORY_SEVERITY
from riskengine.shared.models import Severity
from riskengine.shared.text import normalize_token, singularize

from .models import TaxonomySnapshot


def expand_allergies(
    allergies: Iterable[str],
    snapshot: TaxonomySnapshot
) -> Set[str]:
    """
    Expand profile allergies into a flat set of matchable terms.

    - Parent key in the taxonomy (e.g. "tree_nut") -> all its children
    - Anything else -> singular form of the key itself, so a taxonomy miss
      still matches the literal term instead of matching nothing

    The returned set has no order; callers sort before matching.
    """
    expanded: Set[str] = set()

    for allergy in allergies:
        key = normalize_token(allergy)
        if not key:
            continue
        node = snapshot.taxonomy.get(key)
        if node is not None:
            expanded.update(node.children)
        else:
            expanded.add(singularize(key))

    return expanded


def parent_for_term(term: str, snapshot: TaxonomySnapshot) -> Optional[str]:
    """Parent taxonomy key for a child term, if it belongs to one."""
    return snapshot.parent_of(term)


def resolve_category(term: str, snapshot: TaxonomySnapshot) -> str:
    """
    Category key used for severity lookup.

    Prefers an explicit severity entry (peanut), else the taxonomy parent
    (tree_nut for pistachio), else the term itself.
    """
    normalized = normalize_token(term)
    if normalized in snapshot.severity:
        return normalized
    parent = snapshot.parent_of(term)
    if parent:
        return parent
    return normalized


def severity_for(category: str, snapshot: TaxonomySnapshot) -> Severity:
    """Severity for a category key; DEFAULT_CATEGORY_SEVERITY when unknown."""
    key = (category or "").lower().strip()
    return snapshot.severity.get(key, DEFAULT_CATEGORY_SEVERITY)
