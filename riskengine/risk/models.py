"""
Risk Engine Models

Inputs (Profile, Event) and the single output (Verdict) of evaluate().

RuleMatch is a tagged union on `rule`; each variant carries its own typed
`details`, so the JSON wire shape stays
{"rule": ..., "ruleCode": ..., "details": {...}}.

Verdicts stored before rule codes existed have no ruleCode; readers fill it
with rule_code_for(rule).

Version: risk_engine_v1
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field, field_validator, model_validator

from riskengine.shared.models import Severity, WireModel


RiskLevel = Literal["none", "medium", "high"]

# Explicit ordinal; risk only ever moves up within one evaluation.
RISK_ORDER: Dict[str, int] = {"none": 0, "medium": 1, "high": 2}


# ============================================================
# INPUTS
# ============================================================

class Medication(WireModel):
    name: str
    dosage: Optional[str] = None


class Profile(WireModel):
    """
    A user's declared allergies and current medications.
    Owned by the profile store; the engine only reads it.
    """
    known_allergies: List[str] = Field(
        default_factory=list,
        description="Free-form allergy strings or taxonomy keys e.g. ['tree_nut', 'Peanuts']"
    )
    current_medications: List[Medication] = Field(default_factory=list)

    @field_validator("current_medications", mode="before")
    @classmethod
    def _accept_bare_names(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"name": m} if isinstance(m, str) else m for m in value]
        return value


class Event(WireModel):
    """
    One normalized, already-extracted event.

    Unknown types are no-ops. The legacy `event_data` key is accepted in
    place of `fields`.
    """
    type: str
    fields: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _accept_event_data(cls, data: Any) -> Any:
        if isinstance(data, dict) and "fields" not in data and "event_data" in data:
            data = {**data, "fields": data.get("event_data") or {}}
            data.pop("event_data", None)
        return data

    def text_field(self, name: str) -> str:
        value = self.fields.get(name)
        return value if isinstance(value, str) else ""


# ============================================================
# RULE MATCHES (tagged union)
# ============================================================

class AllergyMatchDetails(WireModel):
    meal: str
    allergen: str
    parent_key: Optional[str] = None
    matched_category: str
    severity: Severity


class CrossReactiveDetails(WireModel):
    meal: str
    source: str
    matched_term: str
    severity: Severity = Field(
        description="Base severity of source + riskModifier. Not clamped to [0, 100]."
    )


class MedicationInteractionDetails(WireModel):
    extracted: str
    conflicts_with: str


class AllergyMatch(WireModel):
    rule: Literal["allergy_match"] = "allergy_match"
    rule_code: Optional[str] = None
    details: AllergyMatchDetails


class CrossReactiveMatch(WireModel):
    rule: Literal["cross_reactive"] = "cross_reactive"
    rule_code: Optional[str] = None
    details: CrossReactiveDetails


class MedicationInteractionMatch(WireModel):
    rule: Literal["medication_interaction"] = "medication_interaction"
    rule_code: Optional[str] = None
    details: MedicationInteractionDetails


RuleMatch = Annotated[
    Union[AllergyMatch, CrossReactiveMatch, MedicationInteractionMatch],
    Field(discriminator="rule"),
]


# ============================================================
# VERDICT
# ============================================================

class VerdictMeta(WireModel):
    """
    Best-match metadata: the single highest-severity allergy or
    cross-reactive match (first one wins ties).
    """
    taxonomy_version: str
    severity: Severity = 0
    matched_category: Optional[str] = None
    cross_reactive: Optional[bool] = None
    source: Optional[str] = None
    matched_term: Optional[str] = None


class Verdict(WireModel):
    """
    The engine's single output per evaluation. Created fresh per call,
    never cached or mutated.
    """
    risk_level: RiskLevel
    reasoning: str
    matched: List[RuleMatch] = Field(default_factory=list)
    meta: VerdictMeta
