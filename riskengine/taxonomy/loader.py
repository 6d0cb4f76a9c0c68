"""
Taxonomy Loader

Loads a TaxonomySnapshot wholesale from a versioned JSON document:

    {
      "version": "10i.2",
      "taxonomy": {"tree_nut": {"label": "Tree Nut", "children": ["almond", ...]}},
      "severity": {"tree_nut": 90, ...},
      "crossReactive": [{"source": "latex", "related": ["banana"], "riskModifier": 15}]
    }

Production uses the in-repo default. Replay and ops can override via an
explicit path or ALLERGEN_TAXONOMY_PATH. No partial reload, no network.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from riskengine.config import taxonomy_path_from_env

from .defaults import default_snapshot
from .models import CrossReactiveRelation, TaxonomyNode, TaxonomySnapshot


logger = logging.getLogger(__name__)


class TaxonomyLoadError(ValueError):
    """An explicitly requested taxonomy document could not be used."""


def snapshot_from_document(doc: Dict[str, Any]) -> TaxonomySnapshot:
    """
    Build a snapshot from a parsed document.

    Missing or wrongly-typed sections degrade to empty; a missing version
    becomes "unknown".
    """
    version = doc.get("version") if isinstance(doc.get("version"), str) else "unknown"

    raw_taxonomy = doc.get("taxonomy") if isinstance(doc.get("taxonomy"), dict) else {}
    taxonomy: Dict[str, TaxonomyNode] = {}
    for key, node in raw_taxonomy.items():
        if isinstance(node, dict):
            taxonomy[key] = TaxonomyNode(**node)

    raw_severity = doc.get("severity") if isinstance(doc.get("severity"), dict) else {}
    severity = {
        key: value for key, value in raw_severity.items()
        if isinstance(value, (int, float)) and not isinstance(value, bool)
    }

    raw_cross = doc.get("crossReactive") if isinstance(doc.get("crossReactive"), list) else []
    cross_reactive = [
        CrossReactiveRelation(**rel) for rel in raw_cross if isinstance(rel, dict)
    ]

    return TaxonomySnapshot(
        version=version,
        taxonomy=taxonomy,
        severity=severity,
        cross_reactive=cross_reactive,
    )


def load_taxonomy(path: Optional[Union[str, Path]] = None) -> TaxonomySnapshot:
    """
    Load taxonomy from path or env. When neither is set, returns the
    in-repo default.

    Raises:
        TaxonomyLoadError: the file cannot be read, is not JSON, or is not
            a JSON object, or its sections fail validation
    """
    path_to_use = path if path is not None else taxonomy_path_from_env()
    if not path_to_use:
        return default_snapshot()

    abs_path = Path(path_to_use).expanduser().resolve()
    try:
        raw = abs_path.read_text(encoding="utf-8")
    except OSError as e:
        raise TaxonomyLoadError(f"load_taxonomy: failed to read {abs_path}: {e}") from e

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise TaxonomyLoadError(f"load_taxonomy: invalid JSON in {abs_path}: {e}") from e

    if not isinstance(parsed, dict):
        raise TaxonomyLoadError(f"load_taxonomy: expected object in {abs_path}")

    try:
        snapshot = snapshot_from_document(parsed)
    except ValidationError as e:
        raise TaxonomyLoadError(f"load_taxonomy: malformed taxonomy in {abs_path}: {e}") from e

    logger.info(
        f"Loaded taxonomy {snapshot.version} from {abs_path} "
        f"({len(snapshot.taxonomy)} parents, {len(snapshot.cross_reactive)} cross-reactive relations)"
    )
    return snapshot
