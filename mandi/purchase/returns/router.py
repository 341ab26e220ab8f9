from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from mandi.database import get_db
from mandi.purchase.returns import schemas, service

router = APIRouter()


@router.post("/", response_model=schemas.VendorReturnOut, status_code=status.HTTP_201_CREATED)
def create_vendor_return(data: schemas.VendorReturnCreate, db: Session = Depends(get_db)):
    return service.create_vendor_return(db, data)


@router.get("/", response_model=List[schemas.VendorReturnOut])
def list_vendor_returns(
    skip: int = 0,
    limit: int = 100,
    vendor_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return service.list_vendor_returns(
        db,
        skip=skip,
        limit=limit,
        vendor_id=vendor_id,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/{return_id}", response_model=schemas.VendorReturnOut)
def get_vendor_return(return_id: int, db: Session = Depends(get_db)):
    vendor_return = service.get_vendor_return(db, return_id)
    if not vendor_return:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor return not found")
    return vendor_return
