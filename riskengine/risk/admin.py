"""
Risk Check API Endpoints

FastAPI router for allergy and interaction risk checks.

Endpoints:
- POST /api/v1/risk/check - Evaluate events and return the check report
- GET /api/v1/risk/health - Module health check
- GET /api/v1/risk/taxonomy - Active taxonomy version and guardrail findings

Version: risk_engine_v1
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from riskengine.report import build_check_report
from riskengine.taxonomy import TaxonomyLoadError, find_taxonomy_issues, load_taxonomy

from .engine import evaluate
from .models import Event, Profile


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/risk",
    tags=["risk"]
)


class CheckRequest(BaseModel):
    check_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    profile_id: str = "anonymous"
    profile: Profile
    events: List[Event] = Field(default_factory=list)
    generated_at: Optional[str] = None

    class Config:
        extra = "forbid"


# ============================================================
# HEALTH CHECK
# ============================================================

@router.get("/health")
def risk_health():
    """
    Module health check.
    """
    try:
        version = load_taxonomy().version
    except TaxonomyLoadError as e:
        logger.warning(f"Taxonomy unavailable for health check: {e}")
        version = None

    return {
        "status": "ok" if version else "degraded",
        "module": "risk",
        "version": "risk_engine_v1",
        "taxonomy_version": version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ============================================================
# CHECK ENDPOINT
# ============================================================

@router.post("/check")
def check_risk(request: CheckRequest):
    """
    Evaluate events against a profile under the active taxonomy.

    Returns the full check report: verdict, explanation, and advice.
    Never re-evaluates or alters the verdict after the engine runs.
    """
    try:
        snapshot = load_taxonomy()
        verdict = evaluate(request.profile, request.events, snapshot)
        report = build_check_report(
            check_id=request.check_id,
            profile_id=request.profile_id,
            verdict=verdict,
            events=[
                {"id": f"{request.check_id}-{i}", "event_type": e.type, "event_data": e.fields}
                for i, e in enumerate(request.events)
            ],
            generated_at=request.generated_at,
            snapshot=snapshot,
        )
        return report.to_wire()
    except Exception as e:
        logger.exception(f"Risk check {request.check_id} failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to evaluate risk: {str(e)}"
        )


# ============================================================
# TAXONOMY
# ============================================================

@router.get("/taxonomy")
def taxonomy_status():
    """
    Active taxonomy version plus guardrail findings (empty when clean).
    """
    try:
        snapshot = load_taxonomy()
    except TaxonomyLoadError as e:
        raise HTTPException(status_code=500, detail=str(e))

    issues = find_taxonomy_issues(snapshot)
    return {
        "version": snapshot.version,
        "parents": sorted(snapshot.taxonomy),
        "cross_reactive_sources": sorted({r.source for r in snapshot.cross_reactive}),
        "issues": issues,
        "clean": not issues,
    }
