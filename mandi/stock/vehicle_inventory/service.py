from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException
from loguru import logger

from mandi.config import local_today
from mandi.stock.vehicle_inventory import models
from mandi.stock.products import service as product_service


LOAD = "load"
SALE = "sale"
ADJUSTMENT = "adjustment"


@dataclass(frozen=True)
class Shortfall:
    """A deduction the vehicle could not cover. Nothing was changed."""
    vehicle_id: int
    product_id: int
    requested: float
    available: float

    def __str__(self):
        return (
            f"vehicle {self.vehicle_id} has {self.available} of product "
            f"{self.product_id}, {self.requested} requested"
        )


def _get_row(db: Session, vehicle_id: int, product_id: int):
    VehicleInventory = models.VehicleInventory
    return (
        db.query(VehicleInventory)
        .filter(
            VehicleInventory.vehicle_id == vehicle_id,
            VehicleInventory.product_id == product_id,
        )
        .populate_existing()
        .first()
    )


def _upsert_quantity(db: Session, vehicle_id: int, product_id: int, quantity: float):
    VehicleInventory = models.VehicleInventory
    dialect = db.get_bind().dialect.name

    if dialect in ("postgresql", "sqlite"):
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = insert(VehicleInventory).values(
            vehicle_id=vehicle_id,
            product_id=product_id,
            quantity=quantity,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["vehicle_id", "product_id"],
            set_={
                "quantity": VehicleInventory.quantity + stmt.excluded.quantity,
                "updated_at": datetime.utcnow(),
            },
        )
        db.execute(stmt)
        return

    # Other backends: lock the row and increment it
    row = (
        db.query(VehicleInventory)
        .filter(
            VehicleInventory.vehicle_id == vehicle_id,
            VehicleInventory.product_id == product_id,
        )
        .with_for_update()
        .first()
    )
    if row:
        row.quantity = (row.quantity or 0) + quantity
    else:
        db.add(VehicleInventory(vehicle_id=vehicle_id, product_id=product_id, quantity=quantity))
    db.flush()


def _log_movement(
    db: Session,
    vehicle_id: int,
    product_id: int,
    type: str,
    quantity: float,
    date: Optional[date],
    reference_id: Optional[int],
    reference_type: Optional[str],
    notes: Optional[str],
):
    db.add(models.VehicleInventoryMovement(
        vehicle_id=vehicle_id,
        product_id=product_id,
        type=type,
        quantity=quantity,
        reference_id=reference_id,
        reference_type=reference_type,
        date=date or local_today(),
        notes=notes,
    ))


def load_vehicle_inventory(
    db: Session,
    vehicle_id: int,
    product_id: int,
    quantity: float,
    date: Optional[date] = None,
    reference_id: Optional[int] = None,
    reference_type: Optional[str] = None,
    notes: Optional[str] = None,
) -> models.VehicleInventory:
    if quantity is None or quantity <= 0:
        raise HTTPException(status_code=400, detail="Quantity must be greater than zero")

    db.flush()
    _upsert_quantity(db, vehicle_id, product_id, quantity)
    _log_movement(db, vehicle_id, product_id, LOAD, quantity, date, reference_id, reference_type, notes)
    db.flush()

    return _get_row(db, vehicle_id, product_id)


def deduct_vehicle_inventory(
    db: Session,
    vehicle_id: int,
    product_id: int,
    quantity: float,
    date: Optional[date] = None,
    reference_id: Optional[int] = None,
    reference_type: Optional[str] = None,
    movement_type: str = SALE,
    notes: Optional[str] = None,
) -> Union[models.VehicleInventory, Shortfall]:
    """
    Take ``quantity`` off the vehicle in one conditional UPDATE.

    Returns the updated row, or a :class:`Shortfall` when the vehicle holds
    less than requested. A shortfall leaves the row and the movement log
    untouched; the caller decides whether that matters.
    """
    if quantity is None or quantity <= 0:
        raise HTTPException(status_code=400, detail="Quantity must be greater than zero")
    if movement_type not in (SALE, ADJUSTMENT):
        raise HTTPException(status_code=400, detail=f"Invalid deduction type '{movement_type}'")

    VehicleInventory = models.VehicleInventory
    db.flush()

    result = db.execute(
        update(VehicleInventory)
        .where(
            VehicleInventory.vehicle_id == vehicle_id,
            VehicleInventory.product_id == product_id,
            VehicleInventory.quantity >= quantity,
        )
        .values(
            quantity=VehicleInventory.quantity - quantity,
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        row = _get_row(db, vehicle_id, product_id)
        return Shortfall(
            vehicle_id=vehicle_id,
            product_id=product_id,
            requested=quantity,
            available=row.quantity if row else 0,
        )

    _log_movement(db, vehicle_id, product_id, movement_type, quantity, date, reference_id, reference_type, notes)
    db.flush()

    return _get_row(db, vehicle_id, product_id)


def get_vehicle_inventory(db: Session, vehicle_id: int):
    VehicleInventory = models.VehicleInventory
    rows = (
        db.query(VehicleInventory)
        .options(joinedload(VehicleInventory.product))
        .filter(VehicleInventory.vehicle_id == vehicle_id)
        .order_by(VehicleInventory.product_id)
        .all()
    )
    for row in rows:
        row.product_name = product_service.display_name(row.product)
    return rows


def list_vehicle_movements(db: Session, vehicle_id: int, skip: int = 0, limit: int = 500):
    Movement = models.VehicleInventoryMovement
    movements = (
        db.query(Movement)
        .options(joinedload(Movement.product))
        .filter(Movement.vehicle_id == vehicle_id)
        .order_by(Movement.date.desc(), Movement.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    for m in movements:
        m.product_name = product_service.display_name(m.product)
    return movements


# ============================================================
# MANUAL LOAD / ADJUST (vehicle screen)
# ============================================================

def manual_load(db: Session, vehicle_id: int, data):
    product_service.get_product_or_404(db, data.product_id)

    try:
        row = load_vehicle_inventory(
            db,
            vehicle_id=vehicle_id,
            product_id=data.product_id,
            quantity=data.quantity,
            date=data.date,
            notes=data.notes,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(row)
    row.product_name = product_service.display_name(row.product)
    logger.info(f"Loaded {data.quantity} of product {data.product_id} onto vehicle {vehicle_id}")
    return row


def manual_adjust(db: Session, vehicle_id: int, data):
    try:
        result = deduct_vehicle_inventory(
            db,
            vehicle_id=vehicle_id,
            product_id=data.product_id,
            quantity=data.quantity,
            date=data.date,
            movement_type=ADJUSTMENT,
            notes=data.notes,
        )

        # The caller asked for exactly this deduction, so a shortfall is an error here
        if isinstance(result, Shortfall):
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient vehicle stock: {result}"
            )

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(result)
    result.product_name = product_service.display_name(result.product)
    logger.info(f"Adjusted vehicle {vehicle_id}: -{data.quantity} of product {data.product_id}")
    return result
