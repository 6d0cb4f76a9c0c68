"""
Canonical Hashing Layer
Single source of truth for verdict and replay-report hashes.
"""

import hashlib
import json
from typing import Any

from pydantic import BaseModel


def canonicalize(obj: Any) -> str:
    """
    Convert object to canonical JSON string.
    Deterministic: same input always produces same output.

    Pydantic models are dumped by wire alias with None fields dropped, so
    incidental field ordering or optional-field presence never changes
    the hash.
    """
    def _clean(o: Any) -> Any:
        if isinstance(o, BaseModel):
            return _clean(o.model_dump(mode="json", by_alias=True, exclude_none=True))
        if isinstance(o, dict):
            return {k: _clean(v) for k, v in sorted(o.items())}
        elif isinstance(o, (list, tuple)):
            return [_clean(i) for i in o]
        elif isinstance(o, (set, frozenset)):
            return sorted(_clean(i) for i in o)
        elif isinstance(o, float):
            # Normalize floats to avoid precision issues
            return round(o, 10)
        return o

    cleaned = _clean(obj)
    return json.dumps(cleaned, sort_keys=True, separators=(',', ':'), ensure_ascii=True)


def canonicalize_and_hash(obj: Any) -> str:
    """
    Returns: "sha256:<64-char-hex>"
    """
    canonical = canonicalize(obj)
    digest = hashlib.sha256(canonical.encode('utf-8')).hexdigest()
    return f"sha256:{digest}"


def verify_hash(obj: Any, expected_hash: str) -> bool:
    return canonicalize_and_hash(obj) == expected_hash
