from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.infrastructure.db import get_db
from app.application.catalog_service import CatalogService
from app.application.schemas import InventoryList, ProductEnvelope, ProductList
from app.domain.errors import ConflictError, NotFoundError, ValidationError
from .deps import require_admin
from .errors import ApiError

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])

@router.get("/products", response_model=ProductList)
def list_products(db: Session = Depends(get_db)):
    return {"ok": True, "products": CatalogService(db).list_products()}

@router.post("/products", response_model=ProductEnvelope, status_code=201)
def create_product(payload: Optional[dict] = Body(None), db: Session = Depends(get_db)):
    try:
        product = CatalogService(db).create_product(payload or {})
    except ValidationError as exc:
        raise ApiError(400, str(exc))
    except ConflictError as exc:
        raise ApiError(409, str(exc))
    return {"ok": True, "product": product}

@router.patch("/products/{product_id}", response_model=ProductEnvelope)
def update_product(product_id: str, payload: Optional[dict] = Body(None), db: Session = Depends(get_db)):
    """Update basic product fields; an ``inventory`` array replaces all stock rows."""
    try:
        product = CatalogService(db).update_product(product_id.strip(), payload or {})
    except NotFoundError as exc:
        raise ApiError(404, str(exc))
    except ValidationError as exc:
        raise ApiError(400, str(exc))
    except ConflictError as exc:
        raise ApiError(409, str(exc))
    return {"ok": True, "product": product}

@router.patch("/inventory", response_model=InventoryList)
def upsert_inventory(payload: Any = Body(None), db: Session = Depends(get_db)):
    """Bulk upsert ``[{productId, size, stock}]`` or ``{items: [...]}``."""
    try:
        items = CatalogService(db).upsert_inventory(payload)
    except NotFoundError as exc:
        raise ApiError(404, str(exc))
    except ValidationError as exc:
        raise ApiError(400, str(exc))
    except ConflictError as exc:
        raise ApiError(409, str(exc))
    return {"ok": True, "items": items}
