"""
Allergen Taxonomy Layer

Versioned rule data and the deterministic operations over it:
- expand declared allergies into matchable child terms
- resolve a matched term's category and severity
- load a snapshot from the in-repo default or a JSON document
- guardrail checks before a snapshot is promoted

A snapshot is read-only for the duration of an evaluation run.

Version: taxonomy_v1
"""

from .models import (
    TaxonomyNode,
    CrossReactiveRelation,
    TaxonomySnapshot,
)
from .defaults import (
    DEFAULT_TAXONOMY_VERSION,
    ALLOWED_OVERLAPS,
    default_snapshot,
)
from .expand import (
    expand_allergies,
    parent_for_term,
    resolve_category,
    severity_for,
)
from .loader import (
    TaxonomyLoadError,
    load_taxonomy,
    snapshot_from_document,
)
from .validate import find_taxonomy_issues

__all__ = [
    # Models
    "TaxonomyNode",
    "CrossReactiveRelation",
    "TaxonomySnapshot",
    # Defaults
    "DEFAULT_TAXONOMY_VERSION",
    "ALLOWED_OVERLAPS",
    "default_snapshot",
    # Functions
    "expand_allergies",
    "parent_for_term",
    "resolve_category",
    "severity_for",
    "load_taxonomy",
    "snapshot_from_document",
    "find_taxonomy_issues",
    # Errors
    "TaxonomyLoadError",
]

__version__ = "taxonomy_v1"
