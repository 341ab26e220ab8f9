from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from mandi.database import get_db
from mandi.payments import schemas, service

router = APIRouter()


# ===============================
# VENDOR
# ===============================
@router.post("/vendor", response_model=schemas.VendorPaymentOut, status_code=status.HTTP_201_CREATED)
def create_vendor_payment(payment: schemas.VendorPaymentCreate, db: Session = Depends(get_db)):
    return service.create_vendor_payment(db, payment)


@router.get("/vendor", response_model=List[schemas.VendorPaymentOut])
def list_vendor_payments(
    vendor_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return service.list_vendor_payments(db, vendor_id, start_date, end_date)


# ===============================
# CUSTOMER
# ===============================
@router.post("/customer", response_model=schemas.CustomerPaymentOut, status_code=status.HTTP_201_CREATED)
def create_customer_payment(payment: schemas.CustomerPaymentCreate, db: Session = Depends(get_db)):
    return service.create_customer_payment(db, payment)


@router.get("/customer", response_model=List[schemas.CustomerPaymentOut])
def list_customer_payments(
    customer_id: Optional[int] = Query(None),
    invoice_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return service.list_customer_payments(db, customer_id, invoice_id, start_date, end_date)


# ===============================
# SURCHARGE CASH
# ===============================
@router.post("/surcharge-cash", response_model=schemas.SurchargeCashPaymentOut, status_code=status.HTTP_201_CREATED)
def create_surcharge_cash_payment(payment: schemas.SurchargeCashPaymentCreate, db: Session = Depends(get_db)):
    return service.create_surcharge_cash_payment(db, payment)


@router.get("/surcharge-cash", response_model=List[schemas.SurchargeCashPaymentOut])
def list_surcharge_cash_payments(
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return service.list_surcharge_cash_payments(db, start_date, end_date)


@router.delete("/surcharge-cash/{payment_id}")
def delete_surcharge_cash_payment(payment_id: int, db: Session = Depends(get_db)):
    result = service.delete_surcharge_cash_payment(db, payment_id)
    if not result:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Surcharge payment not found")
    return result
