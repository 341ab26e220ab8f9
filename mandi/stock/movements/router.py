from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Literal, Optional
from datetime import date

from mandi.database import get_db
from mandi.stock.movements import schemas, service

router = APIRouter()


@router.post("/", response_model=schemas.StockMovementOut, status_code=201)
def create_movement(movement: schemas.StockMovementCreate, db: Session = Depends(get_db)):
    """
    Manual stock movement.
    type=in adds to stock, type=out deducts (clamped at zero).
    """
    created = service.create_manual_movement(db, movement)
    created.product_name = created.product.name if created.product else None
    return created


@router.get("/", response_model=List[schemas.StockMovementOut])
def list_movements(
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    product_id: Optional[int] = None,
    type: Optional[Literal["in", "out"]] = None,
    skip: int = 0,
    limit: int = 500,
    db: Session = Depends(get_db),
):
    return service.list_movements(
        db,
        start_date=start_date,
        end_date=end_date,
        product_id=product_id,
        type=type,
        skip=skip,
        limit=limit,
    )
