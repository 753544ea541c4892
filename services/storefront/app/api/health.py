from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.infrastructure.db import get_db

router = APIRouter(prefix="/api", tags=["health"])

@router.get("/health")
def storefront_health():
    return {"ok": True, "service": "beyond-silhouette", "time": datetime.now(timezone.utc).isoformat()}

@router.get("/db/health")
def db_health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        return JSONResponse(status_code=500, content={"ok": False, "db": "error", "error": str(e)})
    return {"ok": True, "db": "connected", "time": datetime.now(timezone.utc).isoformat()}
