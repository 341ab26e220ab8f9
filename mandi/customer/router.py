from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

from mandi.database import get_db
from mandi.customer import schemas, service
from mandi.accounts.balances import service as balance_service

router = APIRouter()


@router.post("/", response_model=schemas.CustomerOut, status_code=201)
def create_customer(customer: schemas.CustomerCreate, db: Session = Depends(get_db)):
    return service.create_customer(db, customer)


@router.get("/", response_model=list[schemas.CustomerOut])
def list_customers(
    skip: int = 0,
    limit: int = 100,
    name: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return service.get_customers(db, skip, limit, name)


@router.get("/{customer_id}", response_model=schemas.CustomerOut)
def read_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = service.get_customer(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.get("/{customer_id}/balance", response_model=schemas.CustomerBalanceOut)
def read_customer_balance(customer_id: int, db: Session = Depends(get_db)):
    service.get_customer_or_404(db, customer_id)
    return balance_service.customer_balance(db, customer_id)


@router.patch("/{customer_id}", response_model=schemas.CustomerOut)
def update_customer(customer_id: int, customer_update: schemas.CustomerUpdate, db: Session = Depends(get_db)):
    customer = service.update_customer(db, customer_id, customer_update)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.delete("/{customer_id}")
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    result = service.delete_customer(db, customer_id)
    if not result:
        raise HTTPException(status_code=404, detail="Customer not found")
    return result
