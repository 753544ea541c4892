from fastapi import Depends, Request
from sqlalchemy.orm import Session

from shared.core import set_request_context
from app.core_settings import Settings, get_settings
from app.infrastructure.db import get_db
from app.infrastructure.session import SessionClaims, read_session
from app.infrastructure.store import SqlAlchemyStore
from app.application.order_service import OrderPlacementService
from .errors import ApiError

async def require_user(request: Request) -> SessionClaims:
    claims = read_session(request)
    if claims is None:
        raise ApiError(401, "Not authenticated")
    set_request_context(user_id=claims.user_id)
    return claims

def require_admin(claims: SessionClaims = Depends(require_user)) -> SessionClaims:
    if claims.role != "admin":
        raise ApiError(403, "Admin only")
    return claims

def get_placement_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> OrderPlacementService:
    return OrderPlacementService(SqlAlchemyStore(db), currency=settings.STORE_CURRENCY)
