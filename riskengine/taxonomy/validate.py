"""
Taxonomy Guardrails

Maintenance checks run before a snapshot is promoted:
- every severity in [0, 100]
- no parent with an empty child list
- no child shared by two parents unless the pair is an allowed overlap

Findings are returned, never raised, so a CI run sees all of them.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from riskengine.shared.text import normalize_token

from .defaults import ALLOWED_OVERLAPS
from .models import TaxonomySnapshot


def find_taxonomy_issues(
    snapshot: TaxonomySnapshot,
    allowed_overlaps: Optional[Iterable[Tuple[str, str]]] = None
) -> List[str]:
    """
    Return one human-readable line per guardrail violation, sorted.
    Empty list means the snapshot is clean.
    """
    allowed = {
        tuple(sorted(pair))
        for pair in (ALLOWED_OVERLAPS if allowed_overlaps is None else allowed_overlaps)
    }
    issues: List[str] = []

    for category, severity in snapshot.severity.items():
        if severity < 0 or severity > 100:
            issues.append(f"Severity for {category} is {severity}, outside [0, 100]")

    for parent, node in snapshot.taxonomy.items():
        if not node.children:
            issues.append(f"Taxonomy parent {parent} has no children")

    child_parents: Dict[str, List[str]] = {}
    for parent, node in snapshot.taxonomy.items():
        for child in node.children:
            parents = child_parents.setdefault(normalize_token(child), [])
            if parent not in parents:
                parents.append(parent)

    for child, parents in child_parents.items():
        if len(parents) <= 1:
            continue
        if len(parents) == 2 and tuple(sorted(parents)) in allowed:
            continue
        issues.append(
            f"Child \"{child}\" is shared by {', '.join(sorted(parents))} (not an allowed overlap)"
        )

    return sorted(issues)
