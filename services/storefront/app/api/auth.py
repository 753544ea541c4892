from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core_settings import Settings, get_settings
from app.infrastructure.db import get_db
from app.infrastructure.session import SessionClaims, clear_session, read_session, set_session
from app.application.auth_service import AuthService
from app.application.schemas import UserEnvelope
from app.domain.errors import AuthError, ConflictError, ValidationError
from app.domain.models import User
from .errors import ApiError

router = APIRouter(prefix="/api", tags=["auth"])

def _start_session(response: Response, user: User) -> None:
    set_session(response, SessionClaims(user_id=user.id, role=user.role, email=user.email))

@router.get("/me", response_model=UserEnvelope)
def me(request: Request, db: Session = Depends(get_db)):
    claims = read_session(request)
    user = AuthService(db).get(claims.user_id) if claims else None
    if user is None:
        return JSONResponse(status_code=401, content={"ok": False, "user": None})
    return {"ok": True, "user": user}

@router.post("/auth/register", response_model=UserEnvelope, status_code=201)
def register(
    response: Response,
    payload: Optional[dict] = Body(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    payload = payload or {}
    service = AuthService(db, password_min_length=settings.PASSWORD_MIN_LENGTH)
    try:
        user = service.register(payload.get("email"), payload.get("password"), payload.get("name"))
    except ValidationError as exc:
        raise ApiError(400, str(exc))
    except ConflictError as exc:
        raise ApiError(409, str(exc))
    _start_session(response, user)
    return {"ok": True, "user": user}

@router.post("/auth/login", response_model=UserEnvelope)
def login(response: Response, payload: Optional[dict] = Body(None), db: Session = Depends(get_db)):
    payload = payload or {}
    try:
        user = AuthService(db).authenticate(payload.get("email"), payload.get("password"))
    except AuthError as exc:
        raise ApiError(exc.status_code, str(exc))
    _start_session(response, user)
    return {"ok": True, "user": user}

@router.post("/auth/logout")
def logout(response: Response):
    clear_session(response)
    return {"ok": True}
