"""
Health and readiness checks – verify database connectivity.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from legal_vault.core.config import settings
from legal_vault.core.logger import logger
from legal_vault.db.database import get_db

router = APIRouter()


def _check_database(db: Session) -> tuple[str, str]:
    """Returns (status, detail). Status is 'ok' or 'error'."""
    try:
        db.execute(text("SELECT 1"))
        return "ok", "Database reachable"
    except SQLAlchemyError as e:
        logger.error("Readiness check failed: %s", str(e))
        return "error", f"Database: {str(e)}" if settings.is_development else "Database unreachable"


@router.get("/ready")
def readiness(db: Session = Depends(get_db)):
    db_status, db_detail = _check_database(db)
    body = {
        "status": "ready" if db_status == "ok" else "not_ready",
        "checks": {"database": {"status": db_status, "detail": db_detail}},
    }
    return JSONResponse(status_code=200 if db_status == "ok" else 503, content=body)
