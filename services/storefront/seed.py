"""Seed an admin account and a small demo catalog with per-size stock.

Safe to run repeatedly: existing users/products (matched by email/slug) are
left alone.
"""

import os

from sqlalchemy import select

from app.domain.models import Inventory, Product, User
from app.infrastructure.db import SessionLocal, init_models
from app.infrastructure.passwords import hash_password

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@beyondsilhouette.test")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "change-me-now")

CATALOG = [
    {"slug": "silhouette-tee", "name": "Silhouette Tee", "price_minor": 450000,
     "stock": {"S": 10, "M": 12, "L": 8}},
    {"slug": "midnight-hoodie", "name": "Midnight Hoodie", "price_minor": 980000,
     "stock": {"M": 5, "L": 5, "XL": 2}},
    {"slug": "shadow-cap", "name": "Shadow Cap", "price_minor": 250000,
     "stock": {"OS": 20}},
]

def seed() -> None:
    init_models()
    with SessionLocal() as db:
        if db.scalars(select(User).where(User.email == ADMIN_EMAIL)).first() is None:
            db.add(User(email=ADMIN_EMAIL, name="Admin", password_hash=hash_password(ADMIN_PASSWORD), role="admin"))
            print(f"Created admin user {ADMIN_EMAIL}")

        for entry in CATALOG:
            if db.scalars(select(Product).where(Product.slug == entry["slug"])).first() is not None:
                continue
            product = Product(slug=entry["slug"], name=entry["name"], price_minor=entry["price_minor"], is_published=True)
            for size, stock in entry["stock"].items():
                product.inventory.append(Inventory(size=size, stock=stock))
            db.add(product)
            print(f"Created product {entry['name']}")

        db.commit()

if __name__ == "__main__":
    seed()
