# Engine writes are all-or-nothing: a failing line item undoes the header,
# the earlier items and every ledger entry they made.
import pytest

from mandi.config import settings
from mandi.invoice import models as invoice_models
from mandi.purchase import models as purchase_models
from mandi.purchase.returns import models as return_models
from mandi.stock.movements import models as movement_models
from mandi.stock.vehicle_inventory import models as vi_models
from mandi.stock.vehicle_inventory import service as vi_service

from conftest import TODAY


MISSING_PRODUCT = 999


@pytest.fixture
def strict_products(monkeypatch):
    monkeypatch.setattr(settings, "STRICT_PRODUCT_REFERENCES", True)


def items(product_id, quantity=5, unit_price=10):
    return [
        {"product_id": product_id, "quantity": quantity, "unit_price": unit_price},
        {"product_id": MISSING_PRODUCT, "quantity": 1, "unit_price": 10},
    ]


def vehicle_quantity(db, vehicle_id, product_id):
    row = (
        db.query(vi_models.VehicleInventory)
        .filter_by(vehicle_id=vehicle_id, product_id=product_id)
        .first()
    )
    return row.quantity if row else None


def test_invoice_rolls_back_on_failing_item(client, db, customer, vehicle, make_product, strict_products):
    product = make_product(stock=50)
    vi_service.load_vehicle_inventory(db, vehicle.id, product.id, 20, date=TODAY)
    db.commit()

    res = client.post("/invoice/", json={
        "customer_id": customer.id,
        "vehicle_id": vehicle.id,
        "date": "2026-10-19",
        "items": items(product.id),
    })
    assert res.status_code == 404

    assert db.query(invoice_models.Invoice).count() == 0
    assert db.query(invoice_models.InvoiceItem).count() == 0
    assert db.query(movement_models.StockMovement).count() == 0
    assert db.query(vi_models.VehicleInventoryMovement).filter_by(type="sale").count() == 0

    db.refresh(product)
    assert product.current_stock == 50
    assert vehicle_quantity(db, vehicle.id, product.id) == 20


def test_purchase_rolls_back_on_failing_item(client, db, vendor, vehicle, make_product, strict_products):
    product = make_product(stock=50)

    res = client.post("/purchase/", json={
        "vendor_id": vendor.id,
        "vehicle_id": vehicle.id,
        "date": "2026-10-19",
        "items": items(product.id),
    })
    assert res.status_code == 404

    assert db.query(purchase_models.Purchase).count() == 0
    assert db.query(purchase_models.PurchaseItem).count() == 0
    assert db.query(movement_models.StockMovement).count() == 0
    assert db.query(vi_models.VehicleInventoryMovement).count() == 0
    assert db.query(vi_models.VehicleInventory).count() == 0

    db.refresh(product)
    assert product.current_stock == 50


def test_vendor_return_rolls_back_on_failing_item(client, db, vendor, vehicle, make_product, strict_products):
    product = make_product(stock=50)
    vi_service.load_vehicle_inventory(db, vehicle.id, product.id, 20, date=TODAY)
    db.commit()

    res = client.post("/purchase/returns/", json={
        "vendor_id": vendor.id,
        "vehicle_id": vehicle.id,
        "date": "2026-10-19",
        "reason": "Damaged",
        "items": items(product.id),
    })
    assert res.status_code == 404

    assert db.query(return_models.VendorReturn).count() == 0
    assert db.query(return_models.VendorReturnItem).count() == 0
    assert db.query(movement_models.StockMovement).count() == 0
    assert db.query(vi_models.VehicleInventoryMovement).filter_by(type="sale").count() == 0

    db.refresh(product)
    assert product.current_stock == 50
    assert vehicle_quantity(db, vehicle.id, product.id) == 20


def test_lenient_mode_commits_the_same_invoice(client, db, customer, make_product):
    product = make_product(stock=50)

    res = client.post("/invoice/", json={
        "customer_id": customer.id,
        "date": "2026-10-19",
        "items": items(product.id),
    })
    assert res.status_code == 201
    assert db.query(movement_models.StockMovement).count() == 2

    db.refresh(product)
    assert product.current_stock == 45
