# tests/conftest.py
# ---------------------------------------------------------------------
# - In-memory SQLite (StaticPool) shared by the app and the tests
# - Tables are created fresh for every test and dropped afterwards
# - `client` overrides get_db so API calls use the test session
# ---------------------------------------------------------------------
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["STRICT_PRODUCT_REFERENCES"] = "false"

from datetime import date

import pytest
from fastapi.testclient import TestClient

from mandi.database import Base, SessionLocal, engine, get_db
from mandi.main import app

from mandi.vendor import models as vendor_models
from mandi.customer import models as customer_models
from mandi.vehicle import models as vehicle_models
from mandi.stock.products import models as product_models


TODAY = date(2026, 10, 19)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------- Seed helpers ----------
@pytest.fixture
def vendor(db):
    row = vendor_models.Vendor(name="Ramesh Traders", phone="9800000001")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def customer(db):
    row = customer_models.Customer(name="Sita Stores", phone="9800000002")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def vehicle(db):
    row = vehicle_models.Vehicle(number="MH12AB1234", type="truck")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def make_product(db):
    def _make(name="Onion", stock=0, purchase_price=20, sale_price=25, reorder_level=10):
        row = product_models.Product(
            name=name,
            unit="KG",
            purchase_price=purchase_price,
            sale_price=sale_price,
            current_stock=stock,
            reorder_level=reorder_level,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _make
