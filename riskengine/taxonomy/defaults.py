"""
In-repo default taxonomy (v10i.1).

Bump DEFAULT_TAXONOMY_VERSION whenever any table below changes; the
replay gate compares snapshots by version.
"""

from typing import Dict, List, Tuple

from .models import CrossReactiveRelation, TaxonomyNode, TaxonomySnapshot


DEFAULT_TAXONOMY_VERSION = "10i.1"

DEFAULT_TAXONOMY: Dict[str, Dict] = {
    "tree_nut": {
        "label": "Tree Nut",
        "children": [
            "almond", "walnut", "cashew", "pistachio", "pecan",
            "hazelnut", "brazil nut", "pine nut", "macadamia",
        ],
    },
    "shellfish": {
        "label": "Shellfish",
        "children": ["shrimp", "crab", "lobster", "scallop", "oyster", "mussel"],
    },
    "legume": {
        "label": "Legume",
        "children": ["peanut", "soy", "lentil", "chickpea", "pea"],
    },
    "fish": {
        "label": "Fish",
        "children": ["salmon", "tuna", "cod", "tilapia", "haddock", "anchovy", "sardine"],
    },
    "sesame": {
        "label": "Sesame",
        "children": ["sesame", "tahini"],
    },
    "egg": {
        "label": "Egg",
        "children": ["egg", "eggs", "egg white", "egg yolk"],
    },
    "dairy": {
        "label": "Dairy",
        "children": ["milk", "cheese", "butter", "yogurt", "whey", "casein"],
    },
    "wheat": {
        "label": "Wheat",
        "children": ["wheat", "flour", "bread", "pasta", "gluten"],
    },
    "soy": {
        "label": "Soy",
        "children": ["soy", "soya", "soybean", "tofu", "edamame", "tempeh", "soy sauce"],
    },
}

DEFAULT_SEVERITY: Dict[str, int] = {
    "tree_nut": 90,
    "peanut": 95,
    "shellfish": 95,
    "fish": 90,
    "egg": 85,
    "dairy": 80,
    "legume": 60,
    "sesame": 85,
    "wheat": 70,
    "soy": 65,
}

DEFAULT_CROSS_REACTIVE: List[Dict] = [
    {"source": "tree_nut", "related": ["mango", "pink peppercorn", "coconut"], "riskModifier": 10},
    {"source": "latex", "related": ["banana", "avocado", "kiwi"], "riskModifier": 15},
    {"source": "birch_pollen", "related": ["apple", "carrot"], "riskModifier": 10},
]

# Parent pairs allowed to share a child token.
ALLOWED_OVERLAPS: List[Tuple[str, str]] = [
    ("legume", "soy"),
]


def default_snapshot() -> TaxonomySnapshot:
    """Fresh snapshot of the in-repo tables."""
    return TaxonomySnapshot(
        version=DEFAULT_TAXONOMY_VERSION,
        taxonomy={k: TaxonomyNode(**v) for k, v in DEFAULT_TAXONOMY.items()},
        severity=dict(DEFAULT_SEVERITY),
        cross_reactive=[CrossReactiveRelation(**r) for r in DEFAULT_CROSS_REACTIVE],
    )
