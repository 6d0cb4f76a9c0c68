"""
Risk Rule Engine

Evaluates normalized events against a user's profile and an explicit
TaxonomySnapshot to produce one auditable Verdict.

Rules, applied per event in input order:
  A) HIGH   - meal text mentions an expanded allergen term
  B) MEDIUM - otherwise, meal text mentions a term cross-reactive with a
              declared allergy, only while risk is not
              already HIGH
  C) MEDIUM - medication event conflicts with a current medication
              (never downgrades HIGH)
  D) NONE   - nothing matched

Pure: no clock, no randomness, no I/O, no shared state. Same inputs,
byte-identical Verdict.

Version: risk_engine_v1
"""

import logging
from typing import List, Optional, Sequence, Set, Union

from riskengine.matching import match_term
from riskengine.shared.hashing import canonicalize_and_hash
from riskengine.shared.text import normalize_token
from riskengine.taxonomy import (
    TaxonomySnapshot,
    expand_allergies,
    resolve_category,
    severity_for,
)

from .interactions import find_interaction
from .models import (
    RISK_ORDER,
    AllergyMatch,
    AllergyMatchDetails,
    CrossReactiveDetails,
    CrossReactiveMatch,
    Event,
    MedicationInteractionDetails,
    MedicationInteractionMatch,
    Profile,
    RuleMatch,
    Verdict,
    VerdictMeta,
)
from .rule_codes import RULE_ALLERGEN_MATCH, RULE_CROSS_REACTIVE, RULE_MED_INTERACTION


logger = logging.getLogger(__name__)

NO_RISK_REASONING = "No known risks detected."


# ============================================================
# CROSS-REACTIVITY
# ============================================================

def _declared_allergy_keys(allergies: Sequence[str]) -> Set[str]:
    return {normalize_token(a).replace(" ", "_") for a in allergies}


def _source_declared(source: str, declared: Set[str]) -> bool:
    """Source key or its naive plural/singular is among declared allergies."""
    source_norm = source.lower()
    if source_norm in declared or f"{source_norm}s" in declared:
        return True
    return any(key[:-1] == source_norm for key in declared if key.endswith("s"))


def find_cross_reactive_match(
    allergies: Sequence[str],
    meal_text: str,
    snapshot: TaxonomySnapshot
) -> Optional[CrossReactiveDetails]:
    """
    First registry relation whose source the user declared and whose
    related terms appear in the meal (related terms longest-first).
    """
    declared = _declared_allergy_keys(allergies)

    for relation in snapshot.cross_reactive:
        if not _source_declared(relation.source, declared):
            continue
        hit = match_term(meal_text, relation.related)
        if hit.matched:
            severity = severity_for(relation.source, snapshot) + relation.risk_modifier
            return CrossReactiveDetails(
                meal=meal_text,
                source=relation.source,
                matched_term=hit.matched_term,
                severity=severity,
            )
    return None


# ============================================================
# REASONING
# ============================================================

def _render_match(match: RuleMatch, declared: Set[str]) -> str:
    details = match.details
    if isinstance(match, AllergyMatch):
        if details.parent_key and details.parent_key in declared:
            return (
                f'Meal "{details.meal}" matches {details.parent_key} allergy via child token '
                f'"{details.allergen}" (severity {details.severity}/100).'
            )
        return (
            f'Meal "{details.meal}" matches known allergen "{details.allergen}" '
            f'(severity {details.severity}/100).'
        )
    if isinstance(match, CrossReactiveMatch):
        return f'"{details.matched_term}" is associated with {details.source} allergies (cross-reactive).'
    return f"{details.extracted} may interact with current medication {details.conflicts_with}"


def build_reasoning(matched: Sequence[RuleMatch], allergies: Sequence[str]) -> str:
    """
    One fixed sentence per match in evaluation order, joined with "; ",
    ending in exactly one period.
    """
    declared = {a.lower().strip() for a in allergies}
    parts = [_render_match(m, declared) for m in matched]
    return "; ".join(parts).rstrip(".") + "."


# ============================================================
# MAIN
# ============================================================

def _raise_to(current: str, level: str) -> str:
    return level if RISK_ORDER[level] > RISK_ORDER[current] else current


def evaluate(
    profile: Union[Profile, dict],
    events: Sequence[Union[Event, dict]],
    snapshot: TaxonomySnapshot
) -> Verdict:
    """
    Evaluate events against a profile under one taxonomy snapshot.

    Args:
        profile: Declared allergies and current medications
        events: Normalized events, processed in the given order
        snapshot: Read-only rule data for this run

    Returns:
        Verdict with risk level, reasoning, ordered matches and best-match meta
    """
    if not isinstance(profile, Profile):
        profile = Profile.model_validate(profile)
    events = [e if isinstance(e, Event) else Event.model_validate(e) for e in events]

    expanded = sorted(expand_allergies(profile.known_allergies, snapshot))
    matched: List[RuleMatch] = []
    risk_level = "none"
    best_meta: Optional[VerdictMeta] = None

    for event in events:
        if event.type == "meal":
            meal_text = event.text_field("meal")
            if not meal_text:
                continue

            hit = match_term(meal_text, expanded)
            if hit.matched:
                risk_level = "high"
                category = resolve_category(hit.matched_term, snapshot)
                severity = severity_for(category, snapshot)
                matched.append(AllergyMatch(
                    rule_code=RULE_ALLERGEN_MATCH,
                    details=AllergyMatchDetails(
                        meal=meal_text,
                        allergen=hit.matched_term,
                        parent_key=snapshot.parent_of(hit.matched_term),
                        matched_category=category,
                        severity=severity,
                    ),
                ))
                if best_meta is None or severity > best_meta.severity:
                    best_meta = VerdictMeta(
                        taxonomy_version=snapshot.version,
                        severity=severity,
                        matched_category=category,
                        cross_reactive=False,
                        matched_term=hit.matched_term,
                    )
                continue

            cross = find_cross_reactive_match(profile.known_allergies, meal_text, snapshot)
            if cross is not None and risk_level != "high":
                risk_level = "medium"
                matched.append(CrossReactiveMatch(rule_code=RULE_CROSS_REACTIVE, details=cross))
                if best_meta is None or cross.severity > best_meta.severity:
                    best_meta = VerdictMeta(
                        taxonomy_version=snapshot.version,
                        severity=cross.severity,
                        cross_reactive=True,
                        source=cross.source,
                        matched_term=cross.matched_term,
                    )

        elif event.type == "medication":
            med_name = event.text_field("medication")
            if not med_name:
                continue

            conflict = find_interaction(med_name, profile.current_medications)
            if conflict is not None:
                risk_level = _raise_to(risk_level, "medium")
                extracted, conflicts_with = conflict
                matched.append(MedicationInteractionMatch(
                    rule_code=RULE_MED_INTERACTION,
                    details=MedicationInteractionDetails(
                        extracted=extracted,
                        conflicts_with=conflicts_with,
                    ),
                ))

    if not matched:
        return Verdict(
            risk_level="none",
            reasoning=NO_RISK_REASONING,
            matched=[],
            meta=VerdictMeta(taxonomy_version=snapshot.version, severity=0),
        )

    logger.debug(
        f"Verdict {risk_level} from {len(matched)} match(es) under taxonomy {snapshot.version}"
    )
    return Verdict(
        risk_level=risk_level,
        reasoning=build_reasoning(matched, profile.known_allergies),
        matched=matched,
        meta=best_meta or VerdictMeta(taxonomy_version=snapshot.version, severity=0),
    )


def verdict_hash(verdict: Verdict) -> str:
    """Stable "sha256:<hex>" stamp over the Verdict wire shape."""
    return canonicalize_and_hash(verdict)
