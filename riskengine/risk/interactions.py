"""
Medication interaction map.

Each key is a lowercase medication name; the value lists medications
that interact with it. Interactions are clinically symmetric but stored
per drug, so both directions must be listed explicitly.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from .models import Medication


INTERACTION_MAP: Dict[str, List[str]] = {
    "ibuprofen": ["aspirin", "warfarin", "naproxen"],
    "aspirin": ["ibuprofen", "warfarin"],
    "warfarin": ["ibuprofen", "aspirin"],
    "naproxen": ["ibuprofen"],
}


def _normalize(s: str) -> str:
    return (s or "").lower().strip()


def find_interaction(
    extracted_med: str,
    current_meds: Sequence[Medication]
) -> Optional[Tuple[str, str]]:
    """
    First current medication that conflicts with the extracted one.

    Returns:
        (extracted, conflicts_with) in their original spelling, or None
    """
    interactions = INTERACTION_MAP.get(_normalize(extracted_med))
    if not interactions:
        return None

    for current in current_meds:
        if _normalize(current.name) in interactions:
            return extracted_med, current.name
    return None
