from sqlalchemy.orm import Session, joinedload, selectinload
from datetime import date
from fastapi import HTTPException
from loguru import logger

from mandi.purchase import models, schemas
from mandi.stock.movements import service as movement_service
from mandi.stock.vehicle_inventory import service as vehicle_inventory_service
from mandi.stock.products import service as product_service
from mandi.vendor import service as vendor_service
from mandi.vehicle import service as vehicle_service


REFERENCE_TYPE = "purchase"


def create_purchase(db: Session, purchase: schemas.PurchaseCreate):
    """
    Record an inbound purchase.

    Every item is booked into product stock, and loaded onto the vehicle
    when the goods arrived on one. Everything commits together.
    """
    vendor_service.get_vendor_or_404(db, purchase.vendor_id)
    if purchase.vehicle_id is not None:
        vehicle_service.get_vehicle_or_404(db, purchase.vehicle_id)

    try:
        # 1️⃣ Purchase header
        db_purchase = models.Purchase(
            vendor_id=purchase.vendor_id,
            vehicle_id=purchase.vehicle_id,
            date=purchase.date,
            total_amount=0,
            status=purchase.status or "completed",
        )
        db.add(db_purchase)
        db.flush()  # need the id for the movement reason

        total_amount = 0

        # 2️⃣ Items + ledgers
        for item in purchase.items:
            line_total = item.quantity * item.unit_price

            db.add(models.PurchaseItem(
                purchase_id=db_purchase.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total=line_total,
            ))
            total_amount += line_total

            movement_service.apply_movement(
                db,
                product_id=item.product_id,
                type=movement_service.STOCK_IN,
                quantity=item.quantity,
                reason=f"Purchase order #{db_purchase.id}",
                date=purchase.date,
                reference_id=db_purchase.id,
                reference_type=REFERENCE_TYPE,
            )

            if purchase.vehicle_id is not None:
                vehicle_inventory_service.load_vehicle_inventory(
                    db,
                    vehicle_id=purchase.vehicle_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    date=purchase.date,
                    reference_id=db_purchase.id,
                    reference_type=REFERENCE_TYPE,
                )

        # 3️⃣ Total
        db_purchase.total_amount = total_amount

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Purchase #{db_purchase.id} created for vendor {purchase.vendor_id}: "
        f"{len(purchase.items)} item(s), total {total_amount}"
    )
    return get_purchase(db, db_purchase.id)


def _attach_names(purchase: models.Purchase):
    purchase.vendor_name = purchase.vendor.name if purchase.vendor else None
    for item in purchase.items:
        item.product_name = product_service.display_name(item.product)
    return purchase


def list_purchases(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    vendor_id: int | None = None,
    vehicle_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
):
    Purchase = models.Purchase
    query = db.query(Purchase).options(
        joinedload(Purchase.vendor),
        selectinload(Purchase.items).joinedload(models.PurchaseItem.product),
    )

    if vendor_id:
        query = query.filter(Purchase.vendor_id == vendor_id)
    if vehicle_id:
        query = query.filter(Purchase.vehicle_id == vehicle_id)
    if start_date:
        query = query.filter(Purchase.date >= start_date)
    if end_date:
        query = query.filter(Purchase.date <= end_date)

    purchases = (
        query
        .order_by(Purchase.date.desc(), Purchase.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return [_attach_names(p) for p in purchases]


def get_purchase(db: Session, purchase_id: int):
    purchase = (
        db.query(models.Purchase)
        .options(joinedload(models.Purchase.vendor))
        .filter(models.Purchase.id == purchase_id)
        .first()
    )
    if not purchase:
        return None
    return _attach_names(purchase)


def get_purchase_items(db: Session, purchase_id: int):
    purchase = get_purchase(db, purchase_id)
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return purchase.items
