"""Shared fixtures: an in-memory database, a test app and row factories."""

from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from multistore.api.v1.api import api_router
from multistore.core.config import settings
from multistore.core.errors import register_exception_handlers
from multistore.core.security import create_token
from multistore.db.session import get_db
from multistore.models import Base, User, Vendor, Product, ProductVariant, Category

STORE_HOST = "shop.example.com"


# =============================================================================
# Database and app
# =============================================================================


@pytest.fixture(autouse=True)
def quiet_settings(monkeypatch):
    """Never talk to a real SMTP server and never expose OTPs unless a test asks."""
    monkeypatch.setattr(settings, "SMTP_HOST", None)
    monkeypatch.setattr(settings, "EXPOSE_OTP", False)
    monkeypatch.setattr(settings, "SUPER_ADMIN_EMAILS", [])


@pytest.fixture
def session_factory():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app(session_factory):
    """Create test FastAPI app with every API router mounted under /api."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(api_router, prefix="/api")

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    test_app.dependency_overrides[get_db] = override_get_db
    return test_app


@pytest.fixture
def client(app):
    return TestClient(app)


# =============================================================================
# Factories
# =============================================================================


def auth_headers(user, impersonator_id=None, host=None):
    headers = {"Authorization": f"Bearer {create_token(user.id, user.role, impersonator_id)}"}
    if host:
        headers["Host"] = host
    return headers


@pytest.fixture
def make_user(db):
    def _make(email=None, role="buyer", **kwargs):
        user = User(email=email or f"user-{uuid4().hex[:8]}@example.com", role=role, **kwargs)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_vendor(db, make_user):
    def _make(name="Shop", domain=STORE_HOST, owner=None, **kwargs):
        owner = owner or make_user(role="seller")
        vendor = Vendor(owner_id=owner.id, name=name, domain=domain, **kwargs)
        db.add(vendor)
        db.commit()
        db.refresh(vendor)
        return vendor
    return _make


@pytest.fixture
def make_product(db):
    def _make(vendor, name="Tee", price="100.00", stock=10, sku=None, is_active=True, category=None):
        product = Product(
            vendor_id=vendor.id,
            name=name,
            price=Decimal(price),
            stock=stock,
            is_active=is_active,
            category_id=category.id if category else None,
        )
        product.variants.append(ProductVariant(
            sku=sku or f"SKU-{uuid4().hex[:6].upper()}",
            mrp=Decimal(price),
            selling_price=Decimal(price),
            purchase_price=Decimal(price) / 2,
            stock=stock,
        ))
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make


@pytest.fixture
def make_category(db):
    def _make(name="Apparel", vendor=None, is_global=False, parent=None, status="active"):
        category = Category(
            name=name,
            vendor_id=vendor.id if vendor else None,
            is_global=is_global,
            parent_id=parent.id if parent else None,
            status=status,
        )
        db.add(category)
        db.commit()
        db.refresh(category)
        return category
    return _make


@pytest.fixture
def super_admin(make_user):
    return make_user("root@example.com", role="super_admin", is_deletable=False)


@pytest.fixture
def seller(make_user):
    return make_user("seller@example.com", role="seller")


@pytest.fixture
def buyer(make_user):
    return make_user("buyer@example.com", role="buyer")


@pytest.fixture
def store(make_vendor, seller):
    return make_vendor(name="Seller Shop", domain=STORE_HOST, owner=seller)


@pytest.fixture
def auth():
    """``auth(user, impersonator_id=None, host=None)`` builds request headers."""
    return auth_headers
