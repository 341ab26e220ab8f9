from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import date

import pandas as pd

from mandi.config import local_today
from mandi.invoice import models as invoice_models
from mandi.payments import models as payment_models
from mandi.stock.movements import models as movement_models
from mandi.stock.products import models as product_models
from mandi.stock.products import service as product_service
from mandi.accounts.balances import service as balance_service
from mandi.vendor import models as vendor_models
from mandi.customer import models as customer_models


ROLLUP_COLUMNS = ["sales", "invoice_count", "surcharge_from_invoices", "surcharge_cash"]


def _between(query, column, start_date, end_date):
    if start_date:
        query = query.filter(column >= start_date)
    if end_date:
        query = query.filter(column <= end_date)
    return query


# ============================================================
# SURCHARGE SUMMARY
# ============================================================
def get_surcharge_summary(db: Session, start_date: date | None = None, end_date: date | None = None):
    Invoice = invoice_models.Invoice
    SurchargeCashPayment = payment_models.SurchargeCashPayment

    invoices = _between(
        db.query(Invoice.subtotal, Invoice.grand_total, Invoice.surcharge_amount, Invoice.include_surcharge),
        Invoice.date, start_date, end_date,
    ).all()

    with_surcharge = [inv for inv in invoices if inv.include_surcharge]
    invoice_surcharge_total = float(sum(inv.surcharge_amount or 0 for inv in with_surcharge))

    cash_surcharge_total = float(
        _between(
            db.query(func.coalesce(func.sum(SurchargeCashPayment.amount), 0)),
            SurchargeCashPayment.date, start_date, end_date,
        ).scalar() or 0
    )

    return {
        "invoice_surcharge_total": invoice_surcharge_total,
        "cash_surcharge_total": cash_surcharge_total,
        "total_surcharge_collected": invoice_surcharge_total + cash_surcharge_total,
        "invoices_with_surcharge": len(with_surcharge),
        "invoices_without_surcharge": len(invoices) - len(with_surcharge),
        "invoice_count": len(invoices),
        "total_sales": float(sum(inv.grand_total or 0 for inv in invoices)),
        "total_subtotal": float(sum(inv.subtotal or 0 for inv in invoices)),
    }


# ============================================================
# DAY / MONTH ROLLUPS
# ============================================================
def _rollup_frames(db: Session, start_date: date | None, end_date: date | None):
    Invoice = invoice_models.Invoice
    SurchargeCashPayment = payment_models.SurchargeCashPayment

    invoice_rows = _between(
        db.query(Invoice.date, Invoice.grand_total, Invoice.surcharge_amount, Invoice.include_surcharge),
        Invoice.date, start_date, end_date,
    ).all()
    invoices = pd.DataFrame(
        [tuple(r) for r in invoice_rows],
        columns=["date", "grand_total", "surcharge_amount", "include_surcharge"],
    )
    # Only invoices that opted in count towards collected surcharge
    invoices["invoice_surcharge"] = invoices["surcharge_amount"].where(
        invoices["include_surcharge"].astype(bool), 0
    )

    cash_rows = _between(
        db.query(SurchargeCashPayment.date, SurchargeCashPayment.amount),
        SurchargeCashPayment.date, start_date, end_date,
    ).all()
    cash = pd.DataFrame([tuple(r) for r in cash_rows], columns=["date", "amount"])

    return invoices, cash


def _rollup(invoices: pd.DataFrame, cash: pd.DataFrame, key: str) -> pd.DataFrame:
    parts = []
    if not invoices.empty:
        parts.append(
            invoices.groupby(key).agg(
                sales=("grand_total", "sum"),
                invoice_count=("grand_total", "size"),
                surcharge_from_invoices=("invoice_surcharge", "sum"),
            )
        )
    if not cash.empty:
        parts.append(cash.groupby(key).agg(surcharge_cash=("amount", "sum")))

    if not parts:
        return pd.DataFrame(columns=ROLLUP_COLUMNS + ["total_surcharge"])

    merged = pd.concat(parts, axis=1).reindex(columns=ROLLUP_COLUMNS).fillna(0)
    merged["total_surcharge"] = merged["surcharge_from_invoices"] + merged["surcharge_cash"]

    # Newest first
    return merged.sort_index(ascending=False)


def _row_values(row) -> dict:
    return {
        "sales": float(row["sales"]),
        "invoice_count": int(row["invoice_count"]),
        "surcharge_from_invoices": float(row["surcharge_from_invoices"]),
        "surcharge_cash": float(row["surcharge_cash"]),
        "total_surcharge": float(row["total_surcharge"]),
    }


def get_daily_rollup(db: Session, start_date: date | None = None, end_date: date | None = None):
    invoices, cash = _rollup_frames(db, start_date, end_date)
    table = _rollup(invoices, cash, "date")
    return [{"date": day, **_row_values(row)} for day, row in table.iterrows()]


def get_monthly_rollup(db: Session, start_date: date | None = None, end_date: date | None = None):
    invoices, cash = _rollup_frames(db, start_date, end_date)
    invoices["month"] = [d.strftime("%Y-%m") for d in invoices["date"]]
    cash["month"] = [d.strftime("%Y-%m") for d in cash["date"]]

    table = _rollup(invoices, cash, "month")
    result = []
    for month, row in table.iterrows():
        year, month_no = (int(part) for part in month.split("-"))
        result.append({
            "month": month,
            "month_label": date(year, month_no, 1).strftime("%B %Y"),
            **_row_values(row),
        })
    return result


# ============================================================
# STOCK SUMMARY
# ============================================================
def total_stock_value(db: Session) -> float:
    Product = product_models.Product
    value = db.query(
        func.coalesce(func.sum(Product.current_stock * Product.purchase_price), 0)
    ).scalar()
    return float(value or 0)


def get_stock_summary(db: Session, start_date: date | None = None, end_date: date | None = None):
    StockMovement = movement_models.StockMovement

    def movement_total(type: str) -> float:
        query = db.query(func.coalesce(func.sum(StockMovement.quantity), 0)).filter(StockMovement.type == type)
        return float(_between(query, StockMovement.date, start_date, end_date).scalar() or 0)

    low_stock = product_service.get_low_stock_products(db)

    return {
        "stock_in_total": movement_total("in"),
        "stock_out_total": movement_total("out"),
        "product_count": db.query(product_models.Product).count(),
        "low_stock_count": len(low_stock),
        "low_stock_products": low_stock,
        "total_stock_value": total_stock_value(db),
    }


# ============================================================
# DASHBOARD
# ============================================================
def get_dashboard(db: Session):
    Invoice = invoice_models.Invoice
    today = local_today()

    today_sales, today_count = (
        db.query(func.coalesce(func.sum(Invoice.grand_total), 0), func.count(Invoice.id))
        .filter(Invoice.date == today)
        .one()
    )

    total_receivable = sum(row["balance"] for row in balance_service.all_customer_balances(db))
    total_payable = sum(row["balance"] for row in balance_service.all_vendor_balances(db))

    return {
        "date": today,
        "today_sales": float(today_sales or 0),
        "today_invoice_count": int(today_count or 0),
        "total_stock_value": total_stock_value(db),
        "low_stock_count": len(product_service.get_low_stock_products(db)),
        "total_receivable": float(total_receivable),
        "total_payable": float(total_payable),
        "vendor_count": db.query(vendor_models.Vendor).count(),
        "customer_count": db.query(customer_models.Customer).count(),
    }
