from sqlalchemy.orm import Session
from fastapi import HTTPException

from mandi.customer import models, schemas
from mandi.invoice import models as invoice_models
from mandi.payments import models as payment_models


def create_customer(db: Session, customer: schemas.CustomerCreate):
    new_customer = models.Customer(**customer.model_dump())
    db.add(new_customer)
    db.commit()
    db.refresh(new_customer)
    return new_customer


def get_customer(db: Session, customer_id: int):
    return db.query(models.Customer).filter(models.Customer.id == customer_id).first()


def get_customer_or_404(db: Session, customer_id: int):
    customer = get_customer(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail=f"Customer {customer_id} not found")
    return customer


def get_customers(db: Session, skip: int = 0, limit: int = 100, name: str | None = None):
    query = db.query(models.Customer)
    if name:
        query = query.filter(models.Customer.name.ilike(f"%{name.strip()}%"))
    return query.order_by(models.Customer.name).offset(skip).limit(limit).all()


def update_customer(db: Session, customer_id: int, customer_update: schemas.CustomerUpdate):
    customer = get_customer(db, customer_id)
    if not customer:
        return None
    for key, value in customer_update.model_dump(exclude_unset=True).items():
        setattr(customer, key, value)
    db.commit()
    db.refresh(customer)
    return customer


def delete_customer(db: Session, customer_id: int):
    customer = get_customer(db, customer_id)
    if not customer:
        return None

    usage_count = (
        db.query(invoice_models.Invoice).filter(invoice_models.Invoice.customer_id == customer_id).count()
        + db.query(payment_models.CustomerPayment).filter(payment_models.CustomerPayment.customer_id == customer_id).count()
    )
    if usage_count > 0:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete customer '{customer.name}'. It is referenced by {usage_count} record(s)."
        )

    db.delete(customer)
    db.commit()
    return {"message": "Customer deleted successfully"}
