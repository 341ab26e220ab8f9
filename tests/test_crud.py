import io

from mandi.stock.movements import models as movement_models


def test_vendor_crud(client):
    res = client.post("/vendor/", json={"name": "Mohan Farms", "phone": "9811111111"})
    assert res.status_code == 201
    vendor_id = res.json()["id"]

    res = client.patch(f"/vendor/{vendor_id}", json={"address": "APMC Yard 4"})
    assert res.json()["address"] == "APMC Yard 4"
    assert res.json()["name"] == "Mohan Farms"

    assert [v["name"] for v in client.get("/vendor/", params={"name": "moh"}).json()] == ["Mohan Farms"]

    assert client.delete(f"/vendor/{vendor_id}").status_code == 200
    assert client.get(f"/vendor/{vendor_id}").status_code == 404


def test_referenced_vendor_cannot_be_deleted(client, vendor, make_product):
    product = make_product()
    client.post("/purchase/", json={
        "vendor_id": vendor.id, "date": "2026-10-19",
        "items": [{"product_id": product.id, "quantity": 1, "unit_price": 10}],
    })

    res = client.delete(f"/vendor/{vendor.id}")
    assert res.status_code == 400
    assert client.get(f"/vendor/{vendor.id}").status_code == 200


def test_referenced_customer_cannot_be_deleted(client, customer):
    client.post("/payments/customer", json={"customer_id": customer.id, "amount": 10})
    assert client.delete(f"/customer/{customer.id}").status_code == 400


def test_vehicle_crud(client):
    res = client.post("/vehicle/", json={"number": "KA01Z9999", "type": "tempo", "driver_name": "Raju"})
    assert res.status_code == 201
    vehicle_id = res.json()["id"]

    assert client.patch(f"/vehicle/{vehicle_id}", json={"capacity": "1.5 ton"}).json()["capacity"] == "1.5 ton"
    assert client.delete(f"/vehicle/{vehicle_id}").status_code == 200


def test_product_create_with_opening_stock(client, db):
    res = client.post("/stock/products/", json={
        "name": "Tomato", "unit": "KG", "purchase_price": 18, "sale_price": 24, "current_stock": 60,
    })
    assert res.status_code == 201
    body = res.json()
    assert body["current_stock"] == 60
    assert body["reorder_level"] == 10
    assert body["stock_value"] == 60 * 18

    movement = db.query(movement_models.StockMovement).filter_by(product_id=body["id"]).one()
    assert movement.reason == "Opening stock"


def test_product_update_cannot_touch_stock(client, make_product):
    product = make_product(stock=5)

    res = client.patch(f"/stock/products/{product.id}", json={"current_stock": 500})
    assert res.status_code == 422

    res = client.patch(f"/stock/products/{product.id}", json={"sale_price": 30})
    assert res.json()["sale_price"] == 30
    assert res.json()["current_stock"] == 5


def test_low_stock_endpoint(client, make_product):
    make_product(name="Onion", stock=50)
    make_product(name="Ginger", stock=2)

    names = [p["name"] for p in client.get("/stock/products/low-stock").json()]
    assert names == ["Ginger"]


def test_product_with_movements_cannot_be_deleted(client, make_product):
    product = make_product(stock=5)
    client.post("/stock/movements/", json={"product_id": product.id, "type": "out", "quantity": 1, "reason": "x"})

    assert client.delete(f"/stock/products/{product.id}").status_code == 400

    unused = make_product(name="Unused")
    assert client.delete(f"/stock/products/{unused.id}").status_code == 200


def test_product_import_from_csv(client, make_product):
    make_product(name="Onion")
    csv = (
        "Name,Unit,Purchase_Price,Sale_Price,Current_Stock\n"
        "Onion,KG,20,25,0\n"
        "Carrot,KG,\"₹1,200.50\",30,15\n"
        ",KG,1,1,0\n"
    )

    res = client.post(
        "/stock/products/import-excel",
        files={"file": ("products.csv", io.BytesIO(csv.encode("utf-8")), "text/csv")},
    )
    assert res.status_code == 200
    assert res.json()["imported"] == 1
    assert res.json()["skipped"] == 2

    carrot = [p for p in client.get("/stock/products/").json() if p["name"] == "Carrot"][0]
    assert carrot["purchase_price"] == 1200.5
    assert carrot["current_stock"] == 15


def test_product_import_rejects_other_files(client):
    res = client.post(
        "/stock/products/import-excel",
        files={"file": ("products.txt", io.BytesIO(b"name"), "text/plain")},
    )
    assert res.status_code == 400


def test_surcharge_cash_payment_delete(client, customer):
    res = client.post("/payments/surcharge-cash", json={"amount": 25, "customer_id": customer.id, "notes": "Hamali"})
    assert res.status_code == 201
    payment_id = res.json()["id"]
    assert res.json()["customer_name"] == "Sita Stores"

    assert len(client.get("/payments/surcharge-cash").json()) == 1
    assert client.delete(f"/payments/surcharge-cash/{payment_id}").status_code == 200
    assert client.delete(f"/payments/surcharge-cash/{payment_id}").status_code == 404


def test_company_settings_upsert(client):
    assert client.get("/company-settings/").json() is None

    client.post("/company-settings/", json={"name": "Shree Mandi", "gst_number": "27AAAAA0000A1Z5"})
    res = client.post("/company-settings/", json={"name": "Shree Mandi Traders", "phone": "020-123456"})
    assert res.status_code == 201

    body = client.get("/company-settings/").json()
    assert body["id"] == res.json()["id"]
    assert body["name"] == "Shree Mandi Traders"
    assert body["gst_number"] is None


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
