"""FastAPI dependencies."""

from fastapi import HTTPException, Request

from src.orchestrator.engine import VerificationEngine


def get_engine(request: Request) -> VerificationEngine:
    """Return the engine built by the application lifespan."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Verification engine not initialised")
    return engine
