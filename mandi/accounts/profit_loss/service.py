from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import date

from mandi.invoice import models as invoice_models
from mandi.purchase import models as purchase_models
from mandi.purchase.returns import models as return_models
from mandi.stock.products import models as product_models


def _date_filtered_sum(db: Session, column, date_column, start_date, end_date) -> float:
    query = db.query(func.coalesce(func.sum(column), 0))
    if start_date:
        query = query.filter(date_column >= start_date)
    if end_date:
        query = query.filter(date_column <= end_date)
    return float(query.scalar() or 0)


def product_margins(db: Session) -> list[dict]:
    products = db.query(product_models.Product).order_by(product_models.Product.name).all()

    result = []
    for p in products:
        purchase_price = p.purchase_price or 0
        sale_price = p.sale_price or 0
        margin = sale_price - purchase_price
        result.append({
            "id": p.id,
            "name": p.name,
            "purchase_price": purchase_price,
            "sale_price": sale_price,
            "margin": margin,
            # undefined for free stock
            "margin_percent": (margin / purchase_price) * 100 if purchase_price else None,
        })
    return result


def get_profit_and_loss(
    db: Session,
    start_date: date | None = None,
    end_date: date | None = None
):
    """
    Returns the P&L report.
    - No date filter means all time
    - Both bounds are inclusive
    """

    # -------------------------
    # 1. Sales
    # -------------------------
    Invoice = invoice_models.Invoice
    total_sales = _date_filtered_sum(db, Invoice.grand_total, Invoice.date, start_date, end_date)

    # -------------------------
    # 2. Purchases net of returns
    # -------------------------
    Purchase = purchase_models.Purchase
    total_purchases = _date_filtered_sum(db, Purchase.total_amount, Purchase.date, start_date, end_date)

    VendorReturn = return_models.VendorReturn
    total_returns = _date_filtered_sum(db, VendorReturn.total_amount, VendorReturn.date, start_date, end_date)

    net_purchases = total_purchases - total_returns

    # -------------------------
    # 3. Report
    # -------------------------
    return {
        "period": {
            "start_date": start_date,
            "end_date": end_date
        },
        "total_sales": total_sales,
        "total_purchases": total_purchases,
        "total_returns": total_returns,
        "net_purchases": net_purchases,
        "gross_profit": total_sales - net_purchases,
        "product_profits": product_margins(db),
    }
