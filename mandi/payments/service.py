from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException
from datetime import date
from loguru import logger

from mandi.payments import models, schemas
from mandi.purchase import models as purchase_models
from mandi.invoice import models as invoice_models
from mandi.vendor import service as vendor_service
from mandi.customer import service as customer_service


def _get_invoice_for_customer(db: Session, invoice_id: int, customer_id: int | None):
    invoice = (
        db.query(invoice_models.Invoice)
        .filter(invoice_models.Invoice.id == invoice_id)
        .first()
    )
    if not invoice:
        raise HTTPException(status_code=404, detail=f"Invoice {invoice_id} not found")
    if customer_id is not None and invoice.customer_id != customer_id:
        raise HTTPException(
            status_code=400,
            detail=f"Invoice {invoice.invoice_number} does not belong to customer {customer_id}"
        )
    return invoice


# -------------------------
# Vendor payments
# -------------------------
def create_vendor_payment(db: Session, payment: schemas.VendorPaymentCreate):
    vendor = vendor_service.get_vendor_or_404(db, payment.vendor_id)

    if payment.purchase_id is not None:
        purchase = (
            db.query(purchase_models.Purchase)
            .filter(purchase_models.Purchase.id == payment.purchase_id)
            .first()
        )
        if not purchase:
            raise HTTPException(status_code=404, detail=f"Purchase {payment.purchase_id} not found")
        if purchase.vendor_id != payment.vendor_id:
            raise HTTPException(
                status_code=400,
                detail=f"Purchase #{purchase.id} does not belong to vendor {payment.vendor_id}"
            )

    new_payment = models.VendorPayment(**payment.model_dump())
    db.add(new_payment)
    db.commit()
    db.refresh(new_payment)

    logger.info(f"Vendor payment #{new_payment.id}: {new_payment.amount} to '{vendor.name}'")
    new_payment.vendor_name = vendor.name
    return new_payment


def list_vendor_payments(
    db: Session,
    vendor_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
):
    VendorPayment = models.VendorPayment
    query = db.query(VendorPayment).options(joinedload(VendorPayment.vendor))

    if vendor_id:
        query = query.filter(VendorPayment.vendor_id == vendor_id)
    if start_date:
        query = query.filter(VendorPayment.date >= start_date)
    if end_date:
        query = query.filter(VendorPayment.date <= end_date)

    payments = query.order_by(VendorPayment.date.desc(), VendorPayment.id.desc()).all()
    for p in payments:
        p.vendor_name = p.vendor.name if p.vendor else None
    return payments


# -------------------------
# Customer payments
# -------------------------
def create_customer_payment(db: Session, payment: schemas.CustomerPaymentCreate):
    customer = customer_service.get_customer_or_404(db, payment.customer_id)

    invoice = None
    if payment.invoice_id is not None:
        invoice = _get_invoice_for_customer(db, payment.invoice_id, payment.customer_id)

    new_payment = models.CustomerPayment(**payment.model_dump())
    db.add(new_payment)
    db.commit()
    db.refresh(new_payment)

    logger.info(f"Customer payment #{new_payment.id}: {new_payment.amount} from '{customer.name}'")
    new_payment.customer_name = customer.name
    new_payment.invoice_number = invoice.invoice_number if invoice else None
    return new_payment


def _invoice_numbers(db: Session, invoice_ids) -> dict:
    ids = {i for i in invoice_ids if i is not None}
    if not ids:
        return {}
    rows = (
        db.query(invoice_models.Invoice.id, invoice_models.Invoice.invoice_number)
        .filter(invoice_models.Invoice.id.in_(ids))
        .all()
    )
    return {row.id: row.invoice_number for row in rows}


def list_customer_payments(
    db: Session,
    customer_id: int | None = None,
    invoice_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
):
    CustomerPayment = models.CustomerPayment
    query = db.query(CustomerPayment).options(joinedload(CustomerPayment.customer))

    if customer_id:
        query = query.filter(CustomerPayment.customer_id == customer_id)
    if invoice_id:
        query = query.filter(CustomerPayment.invoice_id == invoice_id)
    if start_date:
        query = query.filter(CustomerPayment.date >= start_date)
    if end_date:
        query = query.filter(CustomerPayment.date <= end_date)

    payments = query.order_by(CustomerPayment.date.desc(), CustomerPayment.id.desc()).all()

    numbers = _invoice_numbers(db, (p.invoice_id for p in payments))
    for p in payments:
        p.customer_name = p.customer.name if p.customer else None
        p.invoice_number = numbers.get(p.invoice_id)
    return payments


# -------------------------
# Surcharge cash payments
# -------------------------
def create_surcharge_cash_payment(db: Session, payment: schemas.SurchargeCashPaymentCreate):
    customer = None
    if payment.customer_id is not None:
        customer = customer_service.get_customer_or_404(db, payment.customer_id)

    invoice = None
    if payment.invoice_id is not None:
        invoice = _get_invoice_for_customer(db, payment.invoice_id, payment.customer_id)

    new_payment = models.SurchargeCashPayment(**payment.model_dump())
    db.add(new_payment)
    db.commit()
    db.refresh(new_payment)

    logger.info(f"Surcharge cash payment #{new_payment.id}: {new_payment.amount}")
    new_payment.customer_name = customer.name if customer else None
    new_payment.invoice_number = invoice.invoice_number if invoice else None
    return new_payment


def list_surcharge_cash_payments(
    db: Session,
    start_date: date | None = None,
    end_date: date | None = None,
):
    SurchargeCashPayment = models.SurchargeCashPayment
    query = db.query(SurchargeCashPayment).options(joinedload(SurchargeCashPayment.customer))

    if start_date:
        query = query.filter(SurchargeCashPayment.date >= start_date)
    if end_date:
        query = query.filter(SurchargeCashPayment.date <= end_date)

    payments = query.order_by(SurchargeCashPayment.date.desc(), SurchargeCashPayment.id.desc()).all()

    numbers = _invoice_numbers(db, (p.invoice_id for p in payments))
    for p in payments:
        p.customer_name = p.customer.name if p.customer else None
        p.invoice_number = numbers.get(p.invoice_id)
    return payments


def delete_surcharge_cash_payment(db: Session, payment_id: int):
    payment = (
        db.query(models.SurchargeCashPayment)
        .filter(models.SurchargeCashPayment.id == payment_id)
        .first()
    )
    if not payment:
        return None

    db.delete(payment)
    db.commit()
    logger.info(f"Surcharge cash payment #{payment_id} deleted")
    return {"message": "Surcharge payment deleted successfully"}
