from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from mandi.database import get_db
from mandi.purchase import schemas, service

router = APIRouter()


@router.post("/", response_model=schemas.PurchaseOut, status_code=status.HTTP_201_CREATED)
def create_purchase(purchase: schemas.PurchaseCreate, db: Session = Depends(get_db)):
    return service.create_purchase(db, purchase)


@router.get("/", response_model=List[schemas.PurchaseOut])
def list_purchases(
    skip: int = 0,
    limit: int = 100,
    vendor_id: Optional[int] = Query(None),
    vehicle_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return service.list_purchases(
        db,
        skip=skip,
        limit=limit,
        vendor_id=vendor_id,
        vehicle_id=vehicle_id,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/{purchase_id}", response_model=schemas.PurchaseOut)
def get_purchase(purchase_id: int, db: Session = Depends(get_db)):
    purchase = service.get_purchase(db, purchase_id)
    if not purchase:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Purchase not found")
    return purchase


@router.get("/{purchase_id}/items", response_model=List[schemas.PurchaseItemOut])
def get_purchase_items(purchase_id: int, db: Session = Depends(get_db)):
    return service.get_purchase_items(db, purchase_id)
