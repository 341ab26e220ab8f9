from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from mandi.database import get_db
from mandi.invoice import schemas, service

router = APIRouter()


@router.post("/", response_model=schemas.InvoiceOut, status_code=status.HTTP_201_CREATED)
def create_invoice(data: schemas.InvoiceCreate, db: Session = Depends(get_db)):
    return service.create_invoice(db, data)


@router.get("/", response_model=List[schemas.InvoiceOut])
def list_invoices(
    skip: int = 0,
    limit: int = 100,
    customer_id: Optional[int] = Query(None),
    vehicle_id: Optional[int] = Query(None),
    invoice_number: Optional[str] = Query(None, description="Invoice number search"),
    status: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return service.list_invoices(
        db,
        skip=skip,
        limit=limit,
        customer_id=customer_id,
        vehicle_id=vehicle_id,
        invoice_number=invoice_number,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/{invoice_id}", response_model=schemas.InvoiceOut)
def get_invoice(invoice_id: int, db: Session = Depends(get_db)):
    invoice = service.get_invoice(db, invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.get("/{invoice_id}/items", response_model=List[schemas.InvoiceItemOut])
def get_invoice_items(invoice_id: int, db: Session = Depends(get_db)):
    return service.get_invoice_items(db, invoice_id)


@router.patch("/{invoice_id}", response_model=schemas.InvoiceOut)
def revise_invoice(invoice_id: int, data: schemas.InvoiceRevise, db: Session = Depends(get_db)):
    return service.revise_invoice(db, invoice_id, data)
