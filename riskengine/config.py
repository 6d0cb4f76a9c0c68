"""
Risk Engine Configuration

Environment-driven settings for the API and the replay CLI.

Rule constants live here as the single source of truth. They are NOT
environment-overridable: changing one is a rule-data change and must go
through the replay gate like any taxonomy edit.
"""

import os
from pathlib import Path
from typing import Optional


PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _getenv_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return Path(value).expanduser()


# ============================================================
# RULE CONSTANTS
# ============================================================

# Severity for any category missing from the snapshot's severity table.
DEFAULT_CATEGORY_SEVERITY = 50

# Max advice entries attached to a check report.
ADVICE_CAP = 3


# ============================================================
# ENVIRONMENT
# ============================================================

def taxonomy_path_from_env() -> Optional[str]:
    """ALLERGEN_TAXONOMY_PATH override, or None for the in-repo default."""
    value = os.getenv("ALLERGEN_TAXONOMY_PATH", "").strip()
    return value or None


def replay_strict_default() -> bool:
    return _getenv_bool("REPLAY_STRICT", False)


def replay_fixtures_dir() -> Path:
    return _getenv_path("REPLAY_FIXTURES_DIR", PROJECT_ROOT / "data" / "replay")


def replay_out_dir() -> Path:
    return _getenv_path("REPLAY_OUT_DIR", PROJECT_ROOT / "out")


def log_level() -> str:
    return os.getenv("RISK_LOG_LEVEL", "INFO").upper()
