from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from taskboard.api.deps import get_db

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)) -> Any:
    """Liveness plus a database round trip."""
    db.execute(text("SELECT 1"))
    return {"ok": True, "ts": datetime.now(timezone.utc).isoformat()}
