import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("AUTH_COOKIE_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core_settings import get_settings
from app.domain.models import Base, Inventory, Product, User
from app.infrastructure.db import get_db
from app.infrastructure.passwords import hash_password
from app.infrastructure.session import SessionClaims, encode_session
from fake_store import InMemoryStore

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()

@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def memory_store():
    return InMemoryStore()

@pytest.fixture
def make_user(db):
    def _make(email="shopper@example.com", password="secret123", role="customer"):
        user = User(email=email, name=email.split("@")[0], password_hash=hash_password(password), role=role)
        db.add(user)
        db.commit()
        return user
    return _make

@pytest.fixture
def make_product(db):
    def _make(name="Silhouette Tee", price_minor=4500, stock=None, slug=None):
        product = Product(name=name, slug=slug, price_minor=price_minor, is_published=True)
        for size, count in (stock or {}).items():
            product.inventory.append(Inventory(size=size, stock=count))
        db.add(product)
        db.commit()
        return product
    return _make

def login_as(client, user):
    token = encode_session(SessionClaims(user_id=user.id, role=user.role, email=user.email))
    client.cookies.set(get_settings().session_cookie_name, token)
    return client

@pytest.fixture
def shopper_client(client, make_user):
    return login_as(client, make_user())

@pytest.fixture
def admin_client(client, make_user):
    return login_as(client, make_user(email="admin@example.com", role="admin"))

@pytest.fixture
def login(client):
    return lambda user: login_as(client, user)

@pytest.fixture
def stock_of(db):
    def _stock(product_id, size):
        db.rollback()
        db.expire_all()
        row = db.query(Inventory).filter(Inventory.product_id == product_id, Inventory.size == size).first()
        return row.stock if row else None
    return _stock
