"""Health endpoint: reports whether the ledger database answers."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stock_ledger.models.base import get_db

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database_ok = True
    except SQLAlchemyError:
        database_ok = False

    return {
        "status": "healthy" if database_ok else "degraded",
        "service": "stock-ledger",
        "database": "healthy" if database_ok else "unhealthy",
    }
