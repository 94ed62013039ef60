"""Health and readiness endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session

from registry_identity.core.errors import get_request_id
from registry_identity.core.logging import get_logger
from registry_identity.db.session import get_db

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok"] = "ok"


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: Literal["ok", "down"]
    database: Literal["ok", "down"]
    request_id: str


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns 200 if the API process is running.",
)
def health_check() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Verifies database connectivity.",
)
def readiness_check(request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(
            "Readiness check failed", extra={"request_id": request_id, "error": str(e)}
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ReadinessResponse(
                status="down", database="down", request_id=request_id
            ).model_dump(),
        )
    return ReadinessResponse(status="ok", database="ok", request_id=request_id)
