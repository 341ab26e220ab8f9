import pytest

from mandi.stock.movements import models as movement_models
from mandi.stock.vehicle_inventory import models as vi_models
from mandi.stock.vehicle_inventory import service as vi_service

from conftest import TODAY


def invoice_payload(customer_id, product_id, quantity=10, unit_price=25, **extra):
    payload = {
        "customer_id": customer_id,
        "date": "2026-10-19",
        "items": [{"product_id": product_id, "quantity": quantity, "unit_price": unit_price}],
    }
    payload.update(extra)
    return payload


def test_invoice_with_percent_surcharge_and_vehicle(client, db, customer, vehicle, make_product):
    product = make_product(stock=100)
    vi_service.load_vehicle_inventory(db, vehicle.id, product.id, 40, date=TODAY)
    db.commit()

    res = client.post("/invoice/", json=invoice_payload(
        customer.id, product.id,
        vehicle_id=vehicle.id,
        surcharge={"mode": "percent-of-subtotal", "rate": 5},
    ))
    assert res.status_code == 201
    body = res.json()

    assert body["subtotal"] == 250
    assert body["surcharge_amount"] == 12.5
    assert body["grand_total"] == 262.5
    assert body["include_surcharge"] is True
    assert body["surcharge_mode"] == "percent-of-subtotal"
    assert body["status"] == "pending"
    assert body["invoice_number"] == f"INV-{body['id']:05d}"
    assert body["payment_status"] == "unpaid"
    assert body["customer_name"] == "Sita Stores"

    db.refresh(product)
    assert product.current_stock == 90

    row = db.query(vi_models.VehicleInventory).filter_by(vehicle_id=vehicle.id, product_id=product.id).one()
    assert row.quantity == 30
    sales = db.query(vi_models.VehicleInventoryMovement).filter_by(type="sale").all()
    assert len(sales) == 1
    assert sales[0].reference_id == body["id"]

    out = db.query(movement_models.StockMovement).filter_by(type="out").one()
    assert out.reason == f"Invoice {body['invoice_number']}"


def test_invoice_commits_despite_vehicle_shortfall(client, db, customer, vehicle, make_product):
    product = make_product(stock=100)
    vi_service.load_vehicle_inventory(db, vehicle.id, product.id, 3, date=TODAY)
    db.commit()

    res = client.post("/invoice/", json=invoice_payload(customer.id, product.id, vehicle_id=vehicle.id))
    assert res.status_code == 201
    assert res.json()["grand_total"] == 250

    row = db.query(vi_models.VehicleInventory).filter_by(vehicle_id=vehicle.id, product_id=product.id).one()
    assert row.quantity == 3
    assert db.query(vi_models.VehicleInventoryMovement).filter_by(type="sale").count() == 0


def test_caller_supplied_invoice_number_is_kept(client, customer, make_product):
    product = make_product(stock=10)
    res = client.post("/invoice/", json=invoice_payload(customer.id, product.id, quantity=1, invoice_number="W-778"))
    assert res.json()["invoice_number"] == "W-778"


def test_per_kg_and_per_bag_invoices(client, customer, make_product):
    product = make_product(stock=500)

    res = client.post("/invoice/", json={
        "customer_id": customer.id,
        "date": "2026-10-19",
        "items": [{"product_id": product.id, "quantity": 120, "unit_price": 10, "bags": 4}],
        "surcharge": {"mode": "per-kg", "rate": 0.5, "total_kg_weight": 118},
    })
    body = res.json()
    assert body["surcharge_basis"] == 118
    assert body["surcharge_amount"] == 59
    assert body["grand_total"] == pytest.approx(body["subtotal"] + body["surcharge_amount"])

    res = client.post("/invoice/", json={
        "customer_id": customer.id,
        "date": "2026-10-19",
        "items": [{"product_id": product.id, "quantity": 120, "unit_price": 10, "bags": 4}],
        "surcharge": {"mode": "per-bag", "rate": 15},
    })
    body = res.json()
    assert body["surcharge_basis"] == 4
    assert body["surcharge_amount"] == 60
    assert body["grand_total"] == 1260


def test_unknown_product_on_line_item_is_tolerated(client, customer):
    res = client.post("/invoice/", json=invoice_payload(customer.id, 4242, quantity=2, unit_price=50))
    assert res.status_code == 201
    assert res.json()["items"][0]["product_name"] == "Unknown Product"


def test_unknown_customer_is_404(client, make_product):
    product = make_product()
    assert client.post("/invoice/", json=invoice_payload(999, product.id)).status_code == 404


def test_bad_surcharge_mode_is_422(client, customer, make_product):
    product = make_product()
    res = client.post("/invoice/", json=invoice_payload(customer.id, product.id, surcharge={"mode": "flat", "rate": 5}))
    assert res.status_code == 422


def test_revise_invoice_recomputes_totals_without_stock_moves(client, db, customer, make_product):
    product = make_product(stock=100)
    created = client.post("/invoice/", json=invoice_payload(
        customer.id, product.id, surcharge={"mode": "percent-of-subtotal", "rate": 2},
    )).json()
    item_id = created["items"][0]["id"]
    movement_count = db.query(movement_models.StockMovement).count()

    res = client.patch(f"/invoice/{created['id']}", json={
        "items": [{"id": item_id, "unit_price": 30}],
        "surcharge_amount": 10,
        "status": "delivered",
    })
    assert res.status_code == 200
    body = res.json()
    assert body["items"][0]["total"] == 300
    assert body["subtotal"] == 300
    assert body["surcharge_amount"] == 10
    assert body["grand_total"] == 310
    assert body["status"] == "delivered"

    assert db.query(movement_models.StockMovement).count() == movement_count
    db.refresh(product)
    assert product.current_stock == 90


def test_revise_unknown_item_is_404(client, customer, make_product):
    product = make_product(stock=100)
    created = client.post("/invoice/", json=invoice_payload(customer.id, product.id)).json()

    res = client.patch(f"/invoice/{created['id']}", json={"items": [{"id": 9999, "unit_price": 1}]})
    assert res.status_code == 404

    unchanged = client.get(f"/invoice/{created['id']}").json()
    assert unchanged["grand_total"] == 250


def test_invoice_payment_summary(client, customer, make_product):
    product = make_product(stock=100)
    created = client.post("/invoice/", json=invoice_payload(customer.id, product.id)).json()

    client.post("/payments/customer", json={
        "customer_id": customer.id, "invoice_id": created["id"], "amount": 100,
    })

    detail = client.get(f"/invoice/{created['id']}").json()
    assert detail["total_paid"] == 100
    assert detail["balance_due"] == 150
    assert detail["payment_status"] == "partial"


def test_invoice_list_filters(client, customer, make_product):
    product = make_product(stock=100)
    client.post("/invoice/", json=invoice_payload(customer.id, product.id, quantity=1))
    client.post("/invoice/", json={**invoice_payload(customer.id, product.id, quantity=1), "date": "2026-09-30"})

    assert len(client.get("/invoice/").json()) == 2
    october = client.get("/invoice/", params={"start_date": "2026-10-01", "end_date": "2026-10-31"}).json()
    assert len(october) == 1
    assert len(client.get("/invoice/", params={"customer_id": customer.id + 1}).json()) == 0
