"""
Taxonomy Models

One immutable TaxonomySnapshot per evaluation run: the allergen tree,
the category severity table, and the cross-reactivity registry, stamped
with a version string. A new snapshot is a full replacement, never a
partial patch.
"""

from typing import Dict, List, Optional

from pydantic import Field, PrivateAttr

from riskengine.shared.models import Severity, WireModel
from riskengine.shared.text import normalize_token


class TaxonomyNode(WireModel):
    """A parent allergen category and the specific terms it expands to."""
    label: Optional[str] = None
    children: List[str] = Field(
        default_factory=list,
        description="Matchable child terms e.g. ['almond', 'walnut']"
    )


class CrossReactiveRelation(WireModel):
    """
    A declared allergy (source) clinically associated with other terms.

    riskModifier is added to the source's base severity and may push the
    result outside [0, 100].
    """
    source: str
    related: List[str] = Field(default_factory=list)
    risk_modifier: Severity = 0


class TaxonomySnapshot(WireModel):
    """
    Versioned, read-only rule data.

    The child -> parent index is built once at construction. First parent
    in taxonomy order wins when a child is shared (e.g. soy under legume
    and soy).
    """
    version: str = "unknown"
    taxonomy: Dict[str, TaxonomyNode] = Field(default_factory=dict)
    severity: Dict[str, Severity] = Field(default_factory=dict)
    cross_reactive: List[CrossReactiveRelation] = Field(default_factory=list)

    _parent_index: Dict[str, str] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        index: Dict[str, str] = {}
        for parent, node in self.taxonomy.items():
            for child in node.children:
                index.setdefault(normalize_token(child), parent)
        self._parent_index = index

    def parent_of(self, term: str) -> Optional[str]:
        return self._parent_index.get(normalize_token(term))
