import os

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import precosmart.models  # noqa: F401
from precosmart.core.database import get_db
from precosmart.main import app
from precosmart.models import Item, Membership, Organization, Product, User
from precosmart.models.organization import Base


@pytest.fixture
def engine():
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
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
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
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def organization(db):
    user = User(email="owner@example.com", name="Owner", hashed_password="x")
    org = Organization(name="Padaria Teste")
    db.add_all([user, org])
    db.flush()
    db.add(Membership(user_id=user.id, organization_id=org.id, role="admin"))
    db.commit()
    db.refresh(org)
    return org


@pytest.fixture
def make_item(db, organization):
    def _make(name="Farinha", unit="g", price="20.00", discounted_price=None, active=True, organization_id=None):
        item = Item(
            name=name,
            unit=unit,
            price=Decimal(price),
            discounted_price=Decimal(discounted_price) if discounted_price else None,
            active=active,
            organization_id=organization_id or organization.id,
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item
    return _make


@pytest.fixture
def make_product(db, organization):
    def _make(name="Bolo", sale_price="30.00"):
        product = Product(name=name, sale_price=Decimal(sale_price), organization_id=organization.id)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make


def register(client, email, password="secret123", name="Tester"):
    r = client.post("/auth/register", json={"email": email, "password": password, "name": name})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def signed_in(client):
    """Headers for a registered user that owns one organization."""
    headers = register(client, "owner@example.com")
    r = client.post("/organizations/", json={"name": "Padaria"}, headers=headers)
    assert r.status_code == 200, r.text
    return {**headers, "X-Organization-ID": str(r.json()["id"])}
