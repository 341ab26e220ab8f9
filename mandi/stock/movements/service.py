"""
Stock ledger.

Every change to ``Product.current_stock`` goes through :func:`apply_movement`,
which updates the product and appends one immutable ``StockMovement`` row.

The stored stock is clamped at zero on each step. The movement row keeps the
requested quantity, so after an over-deduction the running sum of movements and
the product's stock no longer agree. That is the intended contract: the log
records intent, the product column is the clamped projection.
"""
from datetime import date
from typing import Optional

from sqlalchemy import case, update
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException
from loguru import logger

from mandi.config import settings, local_today
from mandi.stock.movements import models, schemas
from mandi.stock.products import models as product_models
from mandi.stock.products import service as product_service


STOCK_IN = "in"
STOCK_OUT = "out"


def apply_movement(
    db: Session,
    product_id: int,
    type: str,
    quantity: float,
    reason: str,
    date: Optional[date] = None,
    reference_id: Optional[int] = None,
    reference_type: Optional[str] = None,
    commit: bool = False,
    strict: Optional[bool] = None,
) -> models.StockMovement:
    if type not in (STOCK_IN, STOCK_OUT):
        raise HTTPException(status_code=400, detail=f"Invalid movement type '{type}'")
    if quantity is None or quantity <= 0:
        raise HTTPException(status_code=400, detail="Quantity must be greater than zero")

    if strict is None:
        strict = settings.STRICT_PRODUCT_REFERENCES

    Product = product_models.Product
    db.flush()

    product = db.query(Product).filter(Product.id == product_id).first()

    if not product:
        if strict:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")
        logger.warning(
            f"Stock movement for unknown product {product_id} "
            f"({type} {quantity}, {reason}); stock not updated"
        )
    else:
        delta = quantity if type == STOCK_IN else -quantity
        before = product.current_stock or 0

        # Clamp in SQL so concurrent movements can't lose an update
        new_stock = Product.current_stock + delta
        db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(current_stock=case((new_stock < 0, 0), else_=new_stock))
            .execution_options(synchronize_session=False)
        )
        db.refresh(product)

        if before + delta < 0:
            logger.warning(
                f"Stock for '{product.name}' clamped at zero: "
                f"had {before}, {type} {quantity} ({reason})"
            )

    movement = models.StockMovement(
        product_id=product_id,
        type=type,
        quantity=quantity,
        reason=reason,
        date=date or local_today(),
        reference_id=reference_id,
        reference_type=reference_type,
    )
    db.add(movement)

    if commit:
        db.commit()
        db.refresh(movement)
    else:
        db.flush()

    return movement


def create_manual_movement(db: Session, data: schemas.StockMovementCreate):
    """Manual adjustment from the stock screen; the product must exist."""
    product_service.get_product_or_404(db, data.product_id)

    try:
        movement = apply_movement(
            db,
            product_id=data.product_id,
            type=data.type,
            quantity=data.quantity,
            reason=data.reason,
            date=data.date,
            reference_id=data.reference_id,
            strict=True,
        )
        db.commit()
        db.refresh(movement)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Manual stock movement #{movement.id}: {movement.type} {movement.quantity} of product {movement.product_id}")
    return movement


def list_movements(
    db: Session,
    start_date: date | None = None,
    end_date: date | None = None,
    product_id: int | None = None,
    type: str | None = None,
    skip: int = 0,
    limit: int = 500,
):
    StockMovement = models.StockMovement
    query = db.query(StockMovement).options(joinedload(StockMovement.product))

    if start_date:
        query = query.filter(StockMovement.date >= start_date)
    if end_date:
        query = query.filter(StockMovement.date <= end_date)
    if product_id:
        query = query.filter(StockMovement.product_id == product_id)
    if type:
        query = query.filter(StockMovement.type == type)

    movements = (
        query
        .order_by(StockMovement.date.desc(), StockMovement.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

    for m in movements:
        m.product_name = product_service.display_name(m.product)

    return movements
