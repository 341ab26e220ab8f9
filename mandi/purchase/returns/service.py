from sqlalchemy.orm import Session, joinedload, selectinload
from datetime import date
from loguru import logger

from mandi.purchase.returns import models, schemas
from mandi.purchase import service as purchase_service
from mandi.stock.movements import service as movement_service
from mandi.stock.vehicle_inventory import service as vehicle_inventory_service
from mandi.stock.products import service as product_service
from mandi.vendor import service as vendor_service
from mandi.vehicle import service as vehicle_service
from fastapi import HTTPException


REFERENCE_TYPE = "vendor_return"


def create_vendor_return(db: Session, data: schemas.VendorReturnCreate):
    """
    Send goods back to a vendor.

    Stock goes out of the shop; if the goods leave from a vehicle, the vehicle
    is drawn down as well. A vehicle that does not hold enough is logged and
    skipped, the return itself still goes through.
    """
    vendor_service.get_vendor_or_404(db, data.vendor_id)
    if data.vehicle_id is not None:
        vehicle_service.get_vehicle_or_404(db, data.vehicle_id)
    if data.purchase_id is not None and not purchase_service.get_purchase(db, data.purchase_id):
        raise HTTPException(status_code=404, detail=f"Purchase {data.purchase_id} not found")

    try:
        vendor_return = models.VendorReturn(
            vendor_id=data.vendor_id,
            vehicle_id=data.vehicle_id,
            purchase_id=data.purchase_id,
            date=data.date,
            total_amount=0,
            reason=data.reason,
            status=data.status or "completed",
        )
        db.add(vendor_return)
        db.flush()

        total_amount = 0

        for item in data.items:
            line_total = item.quantity * item.unit_price
            item_reason = item.reason or data.reason or "Returned"

            db.add(models.VendorReturnItem(
                return_id=vendor_return.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total=line_total,
                reason=item.reason,
            ))
            total_amount += line_total

            movement_service.apply_movement(
                db,
                product_id=item.product_id,
                type=movement_service.STOCK_OUT,
                quantity=item.quantity,
                reason=f"Vendor return: {item_reason}",
                date=data.date,
                reference_id=vendor_return.id,
                reference_type=REFERENCE_TYPE,
            )

            if data.vehicle_id is not None:
                result = vehicle_inventory_service.deduct_vehicle_inventory(
                    db,
                    vehicle_id=data.vehicle_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    date=data.date,
                    reference_id=vendor_return.id,
                    reference_type=REFERENCE_TYPE,
                )
                if isinstance(result, vehicle_inventory_service.Shortfall):
                    logger.warning(f"Vendor return #{vendor_return.id}: {result}; vehicle not updated")

        vendor_return.total_amount = total_amount

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Vendor return #{vendor_return.id} for vendor {data.vendor_id}: total {total_amount}")
    return get_vendor_return(db, vendor_return.id)


def _attach_names(vendor_return: models.VendorReturn):
    vendor_return.vendor_name = vendor_return.vendor.name if vendor_return.vendor else None
    for item in vendor_return.items:
        item.product_name = product_service.display_name(item.product)
    return vendor_return


def list_vendor_returns(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    vendor_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
):
    VendorReturn = models.VendorReturn
    query = db.query(VendorReturn).options(
        joinedload(VendorReturn.vendor),
        selectinload(VendorReturn.items).joinedload(models.VendorReturnItem.product),
    )

    if vendor_id:
        query = query.filter(VendorReturn.vendor_id == vendor_id)
    if start_date:
        query = query.filter(VendorReturn.date >= start_date)
    if end_date:
        query = query.filter(VendorReturn.date <= end_date)

    returns = (
        query
        .order_by(VendorReturn.date.desc(), VendorReturn.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return [_attach_names(r) for r in returns]


def get_vendor_return(db: Session, return_id: int):
    vendor_return = (
        db.query(models.VendorReturn)
        .options(joinedload(models.VendorReturn.vendor))
        .filter(models.VendorReturn.id == return_id)
        .first()
    )
    if not vendor_return:
        return None
    return _attach_names(vendor_return)
