"""
Check Report Layer

build_check_report(check_id, profile_id, verdict, events) -> CheckReport

Verdict summary, normalized matches, structured explanation and a capped
advice block for one check. Never re-evaluates.

Version: check_report_v1
"""

from .models import (
    REPORT_VERSION,
    ReportEvent,
    ReportMatchedEntry,
    AdviceBlock,
    ReportMeta,
    ReportVerdictMeta,
    ReportVerdict,
    ReportInput,
    ReportOutput,
    CheckReport,
)
from .build import (
    build_check_report,
    build_advice_block,
    normalize_matched,
    report_filename,
)

__all__ = [
    # Models
    "REPORT_VERSION",
    "ReportEvent",
    "ReportMatchedEntry",
    "AdviceBlock",
    "ReportMeta",
    "ReportVerdictMeta",
    "ReportVerdict",
    "ReportInput",
    "ReportOutput",
    "CheckReport",
    # Functions
    "build_check_report",
    "build_advice_block",
    "normalize_matched",
    "report_filename",
]

__version__ = "check_report_v1"
