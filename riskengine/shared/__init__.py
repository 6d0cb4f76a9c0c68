"""Risk Engine Shared Utilities"""

from .hashing import (
    canonicalize,
    canonicalize_and_hash,
    verify_hash,
)
from .models import Severity, WireModel
from .text import (
    normalize_token,
    strip_punctuation,
    singularize,
    naive_counterpart,
)

__all__ = [
    "canonicalize",
    "canonicalize_and_hash",
    "verify_hash",
    "Severity",
    "WireModel",
    "normalize_token",
    "strip_punctuation",
    "singularize",
    "naive_counterpart",
]
