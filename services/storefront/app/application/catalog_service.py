"""Admin-side catalog maintenance: products and per-size stock levels."""

import math
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from shared.core import get_logger
from app.domain.errors import ConflictError, NotFoundError, ValidationError
from app.domain.models import Inventory, Product

logger = get_logger(__name__)

ADMIN_PRODUCT_LIMIT = 200

def _rounded(value: Any) -> Optional[int]:
    """Round a numeric admin input, or None when it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(round(number))

def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None

def normalize_inventory(rows: Any) -> Dict[str, int]:
    """Collapse ``[{size, stock}]`` into ``{size: stock}``, last row wins."""
    by_size: Dict[str, int] = {}
    for row in rows if isinstance(rows, list) else []:
        if not isinstance(row, Mapping):
            continue
        size = str(row.get("size") or "").strip()
        if not size:
            continue
        stock = _rounded(row.get("stock"))
        by_size[size] = max(0, stock) if stock is not None else 0
    return by_size

class CatalogService:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> List[Product]:
        stmt = (
            select(Product)
            .options(selectinload(Product.inventory))
            .order_by(Product.created_at.desc())
            .limit(ADMIN_PRODUCT_LIMIT)
        )
        return list(self.db.scalars(stmt))

    def create_product(self, data: Mapping) -> Product:
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValidationError("name is required")
        price = _rounded(data.get("priceMinor"))
        if price is None:
            raise ValidationError("priceMinor must be a number")

        product = Product(
            slug=_optional_text(data.get("slug")),
            name=name,
            description=_optional_text(data.get("description")),
            price_minor=max(0, price),
            is_published=bool(data.get("isPublished")),
        )
        for size, stock in normalize_inventory(data.get("inventory")).items():
            product.inventory.append(Inventory(size=size, stock=stock))

        self.db.add(product)
        self._commit("Duplicate unique field (slug)")
        logger.info("Product created", extra={'extra_fields': {'product_id': product.id}})
        return self._load(product.id)

    def update_product(self, product_id: str, data: Mapping) -> Product:
        product = self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product not found")

        if "slug" in data:
            product.slug = _optional_text(data["slug"])
        if "name" in data:
            name = str(data["name"] or "").strip()
            if not name:
                raise ValidationError("name is required")
            product.name = name
        if "description" in data:
            product.description = _optional_text(data["description"])
        if "priceMinor" in data:
            price = _rounded(data["priceMinor"])
            if price is None:
                raise ValidationError("priceMinor must be a number")
            product.price_minor = max(0, price)
        if "isPublished" in data:
            product.is_published = bool(data["isPublished"])

        if isinstance(data.get("inventory"), list):
            # Full replace
            self.db.execute(delete(Inventory).where(Inventory.product_id == product_id))
            for size, stock in normalize_inventory(data["inventory"]).items():
                self.db.add(Inventory(product_id=product_id, size=size, stock=stock))

        self._commit("Duplicate unique field (slug)")
        self.db.expire_all()
        return self._load(product_id)

    def upsert_inventory(self, payload: Any) -> List[Inventory]:
        if isinstance(payload, Mapping):
            payload = payload.get("items")
        # Repeated (productId, size) rows collapse, last row wins
        rows: Dict[tuple, Optional[int]] = {}
        for raw in payload if isinstance(payload, list) else []:
            if not isinstance(raw, Mapping):
                continue
            product_id = str(raw.get("productId") or "").strip()
            size = str(raw.get("size") or "").strip()
            if product_id and size:
                rows[(product_id, size)] = _rounded(raw.get("stock"))

        if not rows:
            raise ValidationError("No inventory rows provided")
        if any(stock is None for stock in rows.values()):
            raise ValidationError("stock must be a number")

        product_ids = {product_id for product_id, _ in rows}
        known = set(self.db.scalars(select(Product.id).where(Product.id.in_(product_ids))))
        missing = sorted(product_ids - known)
        if missing:
            raise NotFoundError(f"Unknown product: {', '.join(missing)}")

        out = []
        for (product_id, size), stock in rows.items():
            record = self.db.scalars(
                select(Inventory).where(Inventory.product_id == product_id, Inventory.size == size)
            ).first()
            if record is None:
                record = Inventory(product_id=product_id, size=size)
                self.db.add(record)
            record.stock = max(0, stock)
            out.append(record)
        self._commit("Inventory update conflicts with existing data")
        for record in out:
            self.db.refresh(record)
        logger.info("Inventory updated", extra={'extra_fields': {'rows': len(out)}})
        return out

    def _load(self, product_id: str) -> Product:
        stmt = select(Product).where(Product.id == product_id).options(selectinload(Product.inventory))
        return self.db.scalars(stmt).one()

    def _commit(self, conflict_message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(conflict_message) from exc
