"""Shared fixtures: in-memory database, API client and catalog builders."""

import os

# Settings are read at import time, so configure them before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.product import Product, ProductVariant
from models.users import User
from utils.hashing import get_password_hash
from utils.tokenJWT import create_access_token


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.catalog_cache.invalidate()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    app.state.catalog_cache.invalidate()


def _make_user(db_session, username, role, password="secret123"):
    user = User(username=username, password_hash=get_password_hash(password), role=role)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _auth_headers(user):
    token = create_access_token({"sub": user.username, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db_session):
    return _make_user(db_session, "admin", "admin")


@pytest.fixture
def admin_headers(admin_user):
    return _auth_headers(admin_user)


@pytest.fixture
def staff_headers(db_session):
    return _auth_headers(_make_user(db_session, "staff", "staff"))


@pytest.fixture
def customer_user(db_session):
    return _make_user(db_session, "shopper", "customer")


@pytest.fixture
def customer_headers(customer_user):
    return _auth_headers(customer_user)


@pytest.fixture
def make_product():
    """Build an unsaved Product with variants given as (unit_size, price, stock) tuples."""
    counter = {"product": 0, "variant": 0}

    def _make(name, company=None, category=None, brand=None, variants=(("1kg", "1.00", 5),)):
        counter["product"] += 1
        product = Product(id=counter["product"], name=name, company=company, category=category, brand=brand)
        for unit_size, price, stock in variants:
            counter["variant"] += 1
            product.variants.append(ProductVariant(
                id=counter["variant"],
                unit_size=unit_size,
                price=Decimal(str(price)),
                stock_quantity=stock,
            ))
        return product

    return _make


@pytest.fixture
def grocery_catalog(make_product):
    """Three-product catalog used across the query engine tests."""
    return [
        make_product("Soap", company="A", category="Clean", variants=[("200g", 10, 5)]),
        make_product("Oil", company="A", category="Food", variants=[("1kg", 50, 0)]),
        make_product("Rice", company="B", category="Food", variants=[("5kg", 100, 20)]),
    ]


@pytest.fixture
def stored_catalog(db_session):
    """The grocery catalog persisted to the test database."""
    products = [
        Product(name="Soap", company="A", category="Clean", brand="Fresh",
                variants=[ProductVariant(unit_size="200g", price=Decimal("10"), stock_quantity=5)]),
        Product(name="Oil", company="A", category="Food", brand="Golden",
                variants=[ProductVariant(unit_size="1kg", price=Decimal("50"), stock_quantity=0)]),
        Product(name="Rice", company="B", category="Food", brand="Paddy",
                variants=[
                    ProductVariant(unit_size="5kg", price=Decimal("100"), stock_quantity=20),
                    ProductVariant(unit_size="1kg", price=Decimal("25"), stock_quantity=None),
                ]),
    ]
    db_session.add_all(products)
    db_session.commit()
    for p in products:
        db_session.refresh(p)
    return products
