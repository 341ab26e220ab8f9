from sqlalchemy.orm import Session, joinedload, selectinload
from datetime import date
from fastapi import HTTPException
from loguru import logger

from mandi.invoice import models, schemas, surcharge
from mandi.accounts.balances import service as balance_service
from mandi.customer import service as customer_service
from mandi.vehicle import service as vehicle_service
from mandi.stock.movements import service as movement_service
from mandi.stock.vehicle_inventory import service as vehicle_inventory_service
from mandi.stock.products import service as product_service


REFERENCE_TYPE = "invoice"


def _invoice_number(invoice_id: int) -> str:
    return f"INV-{invoice_id:05d}"


def create_invoice(db: Session, data: schemas.InvoiceCreate):
    """
    Create an invoice with all items in one transaction.

    Totals are computed here from the line items and the surcharge config;
    caller prices are taken as-is. Each item is taken out of stock, and off
    the vehicle when one is given. A vehicle that is short is logged and
    skipped, the sale still goes through.
    """
    customer_service.get_customer_or_404(db, data.customer_id)
    if data.vehicle_id is not None:
        vehicle_service.get_vehicle_or_404(db, data.vehicle_id)

    subtotal = surcharge.calculate_subtotal(data.items)
    charge = surcharge.compute_surcharge(data.surcharge, subtotal, data.items)

    try:
        # 1️⃣ Invoice header
        invoice = models.Invoice(
            invoice_number=data.invoice_number or "",
            customer_id=data.customer_id,
            vehicle_id=data.vehicle_id,
            date=data.date,
            subtotal=subtotal,
            include_surcharge=charge.include,
            surcharge_mode=charge.mode,
            surcharge_rate=charge.rate,
            surcharge_basis=charge.basis,
            surcharge_amount=charge.amount,
            grand_total=subtotal + charge.amount,
            status=data.status or "pending",
        )
        db.add(invoice)
        db.flush()  # get invoice ID without committing

        if not data.invoice_number:
            invoice.invoice_number = _invoice_number(invoice.id)

        # 2️⃣ Items + ledgers
        for item in data.items:
            db.add(models.InvoiceItem(
                invoice_id=invoice.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total=item.quantity * item.unit_price,
                bags=item.bags,
            ))

            movement_service.apply_movement(
                db,
                product_id=item.product_id,
                type=movement_service.STOCK_OUT,
                quantity=item.quantity,
                reason=f"Invoice {invoice.invoice_number}",
                date=data.date,
                reference_id=invoice.id,
                reference_type=REFERENCE_TYPE,
            )

            if data.vehicle_id is not None:
                result = vehicle_inventory_service.deduct_vehicle_inventory(
                    db,
                    vehicle_id=data.vehicle_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    date=data.date,
                    reference_id=invoice.id,
                    reference_type=REFERENCE_TYPE,
                )
                if isinstance(result, vehicle_inventory_service.Shortfall):
                    logger.warning(f"Invoice {invoice.invoice_number}: {result}; vehicle not updated")

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Invoice {invoice.invoice_number} created for customer {data.customer_id}: "
        f"subtotal {subtotal}, surcharge {charge.amount}, total {invoice.grand_total}"
    )
    return get_invoice(db, invoice.id)


def revise_invoice(db: Session, invoice_id: int, data: schemas.InvoiceRevise):
    """
    Re-price an existing invoice.

    Only unit prices, the surcharge amount and the status can change; stock
    is not touched. Subtotal and grand total are recomputed together.
    """
    invoice = (
        db.query(models.Invoice)
        .options(selectinload(models.Invoice.items))
        .filter(models.Invoice.id == invoice_id)
        .first()
    )
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")

    items_by_id = {item.id: item for item in invoice.items}

    try:
        for edit in data.items:
            item = items_by_id.get(edit.id)
            if not item:
                raise HTTPException(
                    status_code=404,
                    detail=f"Item {edit.id} not found on invoice {invoice.invoice_number}"
                )
            item.unit_price = edit.unit_price
            item.total = item.quantity * edit.unit_price

        invoice.subtotal = sum(item.total for item in invoice.items)

        if data.surcharge_amount is not None:
            invoice.surcharge_amount = data.surcharge_amount
            invoice.include_surcharge = data.surcharge_amount > 0

        invoice.grand_total = invoice.subtotal + (invoice.surcharge_amount or 0)

        if data.status is not None:
            invoice.status = data.status

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Invoice {invoice.invoice_number} revised: total {invoice.grand_total}")
    return get_invoice(db, invoice_id)


def _attach_details(invoice: models.Invoice):
    invoice.customer_name = invoice.customer.name if invoice.customer else None
    for item in invoice.items:
        item.product_name = product_service.display_name(item.product)

    summary = balance_service.invoice_payment_summary(invoice)
    invoice.total_paid = summary["total_paid"]
    invoice.balance_due = summary["balance_due"]
    invoice.payment_status = summary["payment_status"]
    return invoice


def list_invoices(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    customer_id: int | None = None,
    vehicle_id: int | None = None,
    invoice_number: str | None = None,
    status: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
):
    Invoice = models.Invoice
    query = db.query(Invoice).options(
        joinedload(Invoice.customer),
        selectinload(Invoice.items).joinedload(models.InvoiceItem.product),
        selectinload(Invoice.payments),
    )

    if customer_id:
        query = query.filter(Invoice.customer_id == customer_id)
    if vehicle_id:
        query = query.filter(Invoice.vehicle_id == vehicle_id)
    if invoice_number:
        query = query.filter(Invoice.invoice_number.ilike(f"%{invoice_number.strip()}%"))
    if status:
        query = query.filter(Invoice.status == status)
    if start_date:
        query = query.filter(Invoice.date >= start_date)
    if end_date:
        query = query.filter(Invoice.date <= end_date)

    invoices = (
        query
        .order_by(Invoice.date.desc(), Invoice.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return [_attach_details(inv) for inv in invoices]


def get_invoice(db: Session, invoice_id: int):
    invoice = (
        db.query(models.Invoice)
        .options(
            joinedload(models.Invoice.customer),
            selectinload(models.Invoice.items).joinedload(models.InvoiceItem.product),
            selectinload(models.Invoice.payments),
        )
        .filter(models.Invoice.id == invoice_id)
        .first()
    )
    if not invoice:
        return None
    return _attach_details(invoice)


def get_invoice_items(db: Session, invoice_id: int):
    invoice = get_invoice(db, invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice.items
