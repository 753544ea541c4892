"""Signed session cookie carrying the caller's identity as a JWT."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Request, Response

from app.core_settings import get_settings

BEARER_PREFIX = "Bearer "

@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    role: str = "customer"
    email: Optional[str] = None

def encode_session(claims: SessionClaims) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": claims.user_id,
        "role": claims.role,
        "email": claims.email,
        "iat": now,
        "exp": now + timedelta(days=settings.SESSION_TTL_DAYS),
    }
    return jwt.encode(payload, settings.AUTH_COOKIE_SECRET, algorithm=settings.JWT_ALG)

def decode_session(token: str) -> Optional[SessionClaims]:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.AUTH_COOKIE_SECRET, algorithms=[settings.JWT_ALG])
    except jwt.PyJWTError:
        return None
    user_id = payload.get("sub")
    if not user_id:
        return None
    return SessionClaims(user_id=str(user_id), role=payload.get("role") or "customer", email=payload.get("email"))

def read_session(request: Request) -> Optional[SessionClaims]:
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        auth_header = request.headers.get("Authorization") or ""
        if auth_header.startswith(BEARER_PREFIX):
            token = auth_header[len(BEARER_PREFIX):].strip()
    if not token:
        return None
    return decode_session(token)

def set_session(response: Response, claims: SessionClaims) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=encode_session(claims),
        max_age=settings.SESSION_TTL_DAYS * 24 * 60 * 60,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )

def clear_session(response: Response) -> None:
    response.delete_cookie(get_settings().session_cookie_name, path="/")
