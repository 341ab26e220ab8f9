"""
Derived vendor and customer balances.

Nothing here is stored; every call re-aggregates purchases, returns,
invoices and payments in SQL.
"""
from sqlalchemy.orm import Session
from sqlalchemy import func

from mandi.purchase import models as purchase_models
from mandi.purchase.returns import models as return_models
from mandi.invoice import models as invoice_models
from mandi.payments import models as payment_models
from mandi.vendor import models as vendor_models
from mandi.customer import models as customer_models


PAID = "paid"
PARTIAL = "partial"
UNPAID = "unpaid"


def payment_status(total_billed: float, total_paid: float) -> str:
    balance = (total_billed or 0) - (total_paid or 0)
    return PAID if balance <= 0 else PARTIAL if (total_paid or 0) > 0 else UNPAID


def _sum(db: Session, column, *criteria) -> float:
    value = db.query(func.coalesce(func.sum(column), 0)).filter(*criteria).scalar()
    return float(value or 0)


def vendor_balance(db: Session, vendor_id: int) -> dict:
    total_purchases = _sum(
        db,
        purchase_models.Purchase.total_amount,
        purchase_models.Purchase.vendor_id == vendor_id,
    )
    total_payments = _sum(
        db,
        payment_models.VendorPayment.amount,
        payment_models.VendorPayment.vendor_id == vendor_id,
    )
    total_returns = _sum(
        db,
        return_models.VendorReturn.total_amount,
        return_models.VendorReturn.vendor_id == vendor_id,
    )

    return {
        "vendor_id": vendor_id,
        "total_purchases": total_purchases,
        "total_payments": total_payments,
        "total_returns": total_returns,
        "balance": total_purchases - total_payments - total_returns,
    }


def customer_balance(db: Session, customer_id: int) -> dict:
    total_invoiced = _sum(
        db,
        invoice_models.Invoice.grand_total,
        invoice_models.Invoice.customer_id == customer_id,
    )
    total_payments = _sum(
        db,
        payment_models.CustomerPayment.amount,
        payment_models.CustomerPayment.customer_id == customer_id,
    )

    return {
        "customer_id": customer_id,
        "total_invoiced": total_invoiced,
        "total_payments": total_payments,
        "balance": total_invoiced - total_payments,
        "payment_status": payment_status(total_invoiced, total_payments),
    }


def invoice_payment_summary(invoice) -> dict:
    total_paid = sum(p.amount or 0 for p in invoice.payments)
    return {
        "total_paid": total_paid,
        "balance_due": (invoice.grand_total or 0) - total_paid,
        "payment_status": payment_status(invoice.grand_total, total_paid),
    }


def all_vendor_balances(db: Session) -> list[dict]:
    vendors = db.query(vendor_models.Vendor).order_by(vendor_models.Vendor.name).all()
    result = []
    for vendor in vendors:
        row = vendor_balance(db, vendor.id)
        row["vendor_name"] = vendor.name
        result.append(row)
    return result


def all_customer_balances(db: Session) -> list[dict]:
    customers = db.query(customer_models.Customer).order_by(customer_models.Customer.name).all()
    result = []
    for customer in customers:
        row = customer_balance(db, customer.id)
        row["customer_name"] = customer.name
        result.append(row)
    return result
