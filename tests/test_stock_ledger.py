import pytest
from fastapi import HTTPException

from mandi.stock.movements import models as movement_models
from mandi.stock.movements import service as movement_service
from mandi.stock.products import service as product_service
from mandi.stock.products import schemas as product_schemas

from conftest import TODAY


def movements_for(db, product_id):
    return (
        db.query(movement_models.StockMovement)
        .filter(movement_models.StockMovement.product_id == product_id)
        .order_by(movement_models.StockMovement.id)
        .all()
    )


def test_in_and_out_adjust_stock(db, make_product):
    product = make_product(stock=0)

    movement_service.apply_movement(db, product.id, "in", 50, "Delivery", date=TODAY, commit=True)
    movement_service.apply_movement(db, product.id, "out", 20, "Sale", date=TODAY, commit=True)

    db.refresh(product)
    assert product.current_stock == 30
    assert [m.type for m in movements_for(db, product.id)] == ["in", "out"]


def test_stock_is_clamped_at_each_step(db, make_product):
    product = make_product(stock=0)

    # 10 in, 25 out (clamps to 0), 5 in -> 5, not max(0, 10 - 25 + 5) == 0
    movement_service.apply_movement(db, product.id, "in", 10, "a", date=TODAY, commit=True)
    movement_service.apply_movement(db, product.id, "out", 25, "b", date=TODAY, commit=True)
    db.refresh(product)
    assert product.current_stock == 0

    movement_service.apply_movement(db, product.id, "in", 5, "c", date=TODAY, commit=True)
    db.refresh(product)
    assert product.current_stock == 5


def test_movement_keeps_requested_quantity_when_clamped(db, make_product):
    product = make_product(stock=3)

    movement = movement_service.apply_movement(db, product.id, "out", 10, "Over-sale", date=TODAY, commit=True)

    db.refresh(product)
    assert product.current_stock == 0
    assert movement.quantity == 10


def test_unknown_product_is_lenient_by_default(db):
    movement = movement_service.apply_movement(db, 999, "out", 4, "Invoice INV-1", date=TODAY, commit=True)

    assert movement.id is not None
    assert movement.product_id == 999


def test_unknown_product_rejected_when_strict(db):
    with pytest.raises(HTTPException) as exc:
        movement_service.apply_movement(db, 999, "in", 4, "x", date=TODAY, strict=True)
    assert exc.value.status_code == 404


@pytest.mark.parametrize("type_, quantity", [("in", 0), ("out", -1), ("sideways", 5)])
def test_invalid_internal_calls_raise_400(db, make_product, type_, quantity):
    product = make_product()
    with pytest.raises(HTTPException) as exc:
        movement_service.apply_movement(db, product.id, type_, quantity, "x", date=TODAY)
    assert exc.value.status_code == 400


def test_opening_stock_is_booked_as_movement(db):
    product = product_service.create_product(
        db,
        product_schemas.ProductCreate(
            name="Potato", unit="KG", purchase_price=12, sale_price=16, current_stock=40
        ),
    )

    assert product.current_stock == 40
    movements = movements_for(db, product.id)
    assert len(movements) == 1
    assert movements[0].type == "in"
    assert movements[0].reason == "Opening stock"


def test_manual_movement_api(client, make_product):
    product = make_product(stock=5)

    res = client.post("/stock/movements/", json={
        "product_id": product.id, "type": "out", "quantity": 2, "reason": "Spoilage",
    })
    assert res.status_code == 201
    body = res.json()
    assert body["product_name"] == "Onion"
    assert body["reference_type"] is None

    listing = client.get("/stock/movements/", params={"product_id": product.id}).json()
    assert len(listing) == 1


def test_manual_movement_unknown_product_is_404(client):
    res = client.post("/stock/movements/", json={
        "product_id": 12345, "type": "in", "quantity": 1, "reason": "Count",
    })
    assert res.status_code == 404


def test_manual_movement_rejects_zero_quantity(client, make_product):
    product = make_product()
    res = client.post("/stock/movements/", json={
        "product_id": product.id, "type": "in", "quantity": 0, "reason": "Count",
    })
    assert res.status_code == 422
