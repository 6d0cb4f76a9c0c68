"""
Check Report Models

A downloadable safety report for one stored check. Reflects stored state;
only the traceId is derived.

Version: check_report_v1
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from riskengine.advice.models import AdviceEntry
from riskengine.explainability.models import StructuredExplanation
from riskengine.risk.models import RiskLevel
from riskengine.shared.models import Severity, WireModel


REPORT_VERSION = "v0-report-13.5"


class ReportEvent(WireModel):
    id: str
    created_at: Optional[str] = None
    event_type: str
    event_data: Dict[str, Any] = Field(default_factory=dict)


class ReportMatchedEntry(WireModel):
    kind: str
    rule_code: Optional[str] = None
    matched_term: str = ""
    matched_category: Optional[str] = None
    cross_reactive: Optional[bool] = None
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Remaining match details not already surfaced above"
    )


class AdviceBlock(WireModel):
    version: str
    items: List[AdviceEntry] = Field(default_factory=list)
    top_target: Optional[str] = None


class ReportMeta(WireModel):
    report_version: str = REPORT_VERSION
    generated_at: str
    check_id: str
    profile_id: str
    taxonomy_version: Optional[str] = None
    trace_id: str
    verdict_hash: Optional[str] = Field(
        default=None,
        description="sha256 of the stored verdict; equal hashes mean byte-identical verdicts"
    )


class ReportVerdictMeta(WireModel):
    severity: Severity = 0
    taxonomy_version: Optional[str] = None
    trace_id: str


class ReportVerdict(WireModel):
    risk_level: RiskLevel
    reasoning: str
    meta: ReportVerdictMeta
    matched: List[ReportMatchedEntry] = Field(default_factory=list)


class ReportInput(WireModel):
    events: List[ReportEvent] = Field(default_factory=list)


class ReportOutput(WireModel):
    verdict: ReportVerdict
    explanation: StructuredExplanation
    advice: Optional[AdviceBlock] = Field(
        default=None,
        description="Present only when allergy or cross-reactive matches exist"
    )


class CheckReport(WireModel):
    meta: ReportMeta
    input: ReportInput
    output: ReportOutput
