"""
Risk Engine API Server Entry Point

Use this file for deployment:
  uvicorn main:app --host 0.0.0.0 --port $PORT
"""

import logging

from fastapi import FastAPI

from riskengine import __version__
from riskengine.config import log_level
from riskengine.replay.admin import router as replay_router
from riskengine.risk.admin import router as risk_router


logging.basicConfig(
    level=log_level(),
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Allergy & Interaction Risk Engine",
    description="Deterministic allergy, cross-reactivity and medication interaction checks with a replay gate",
    version=__version__
)

app.include_router(risk_router)
app.include_router(replay_router)
logger.info(f"Risk engine {__version__} routers registered")


@app.get("/")
def root():
    return {
        "service": "Allergy & Interaction Risk Engine",
        "version": __version__,
        "status": "operational",
    }


@app.get("/health")
def health():
    return {"status": "ok"}


# For local development
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
