# File: outreach_cms/api/v1/endpoints/health.py
from datetime import datetime, timezone
import logging

from azure.core.exceptions import AzureError
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from outreach_cms.core import deps
from outreach_cms.core.config import Settings

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
def health_check(request: Request, config: Settings = Depends(deps.get_settings)) -> JSONResponse:
    """Readiness: database reachable and token signing configured. Storage is reported only."""
    session_factory = getattr(request.app.state, "session_factory", None)
    store = getattr(request.app.state, "object_store", None)
    timestamp = datetime.now(timezone.utc).isoformat()

    checks = {
        "database": False,
        "databaseUrl": session_factory is not None,
        "jwtSecret": bool(config.JWT_SECRET),
        "storage": False,
        "environment": config.ENVIRONMENT,
        "timestamp": timestamp,
    }

    if session_factory is not None:
        db = session_factory()
        try:
            db.execute(text("SELECT 1"))
            checks["database"] = True
        except SQLAlchemyError as e:
            logger.error(f"❌ Health check database error: {e}")
        finally:
            db.close()

    if store is not None:
        try:
            checks["storage"] = store.is_ready()
        except AzureError as e:
            logger.error(f"❌ Health check storage error: {e}")

    healthy = checks["database"] and checks["jwtSecret"]
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "checks": checks,
            "timestamp": timestamp,
        },
    )
