"""
Replay Gate API Endpoints

FastAPI router exposing the replay gate to CI and ops tooling.

Endpoints:
- POST /api/v1/replay/gate - Gate a replay report against an allowlist
- GET /api/v1/replay/health - Module health check

Version: replay_gate_v1
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from .gate import evaluate_gate, parse_allowlist
from .models import ReplayReport


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/replay",
    tags=["replay"]
)


class GateRequest(BaseModel):
    report: ReplayReport
    allowlist: Any = None
    strict: bool = False


# ============================================================
# HEALTH CHECK
# ============================================================

@router.get("/health")
def replay_health():
    """
    Module health check.
    """
    return {
        "status": "ok",
        "module": "replay",
        "version": "replay_gate_v1",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "principle": "The gate never auto-approves a risk increase."
    }


# ============================================================
# GATE
# ============================================================

@router.post("/gate")
def gate_report(request: GateRequest):
    """
    Evaluate a replay report. A malformed or absent allowlist pre-approves
    nothing.
    """
    try:
        allowlist = parse_allowlist(request.allowlist)
        result = evaluate_gate(request.report, allowlist, request.strict)
        return result.to_wire()
    except Exception as e:
        logger.exception("Replay gate evaluation failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to evaluate gate: {str(e)}"
        )
