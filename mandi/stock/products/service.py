import re
from typing import Optional

import pandas as pd
from sqlalchemy.orm import Session
from sqlalchemy import func
from fastapi import HTTPException, UploadFile
from loguru import logger

from mandi.config import settings
from mandi.stock.products import models, schemas
from mandi.stock.movements import models as movement_models


UNKNOWN_PRODUCT = "Unknown Product"


def display_name(product: Optional[models.Product]) -> str:
    # Line items are not FK checked, so the product may be gone
    return product.name if product else UNKNOWN_PRODUCT


def create_product(db: Session, product: schemas.ProductCreate):
    from mandi.stock.movements import service as movement_service

    db_product = models.Product(
        name=product.name.strip(),
        unit=product.unit.strip(),
        purchase_price=product.purchase_price,
        sale_price=product.sale_price,
        current_stock=0,
        reorder_level=(
            product.reorder_level
            if product.reorder_level is not None
            else settings.DEFAULT_REORDER_LEVEL
        ),
    )

    try:
        db.add(db_product)
        db.flush()  # get product ID without committing yet

        # Opening stock goes through the ledger like everything else
        if product.current_stock > 0:
            movement_service.apply_movement(
                db,
                product_id=db_product.id,
                type=movement_service.STOCK_IN,
                quantity=product.current_stock,
                reason="Opening stock",
            )

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_product)
    return db_product


def get_product(db: Session, product_id: int):
    return db.query(models.Product).filter(models.Product.id == product_id).first()


def get_product_or_404(db: Session, product_id: int):
    product = get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")
    return product


def get_products(db: Session, name: Optional[str] = None):
    query = db.query(models.Product)

    if name:
        query = query.filter(
            func.lower(models.Product.name).contains(name.lower().strip())
        )

    return query.order_by(models.Product.name).all()


def get_low_stock_products(db: Session):
    Product = models.Product
    reorder_level = func.coalesce(Product.reorder_level, settings.DEFAULT_REORDER_LEVEL)
    return (
        db.query(Product)
        .filter(Product.current_stock <= reorder_level)
        .order_by(Product.current_stock.asc())
        .all()
    )


def update_product(db: Session, product_id: int, product_update: schemas.ProductUpdate):
    product = get_product(db, product_id)
    if not product:
        return None

    for key, value in product_update.model_dump(exclude_unset=True).items():
        if isinstance(value, str):
            value = value.strip()
        setattr(product, key, value)

    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int):
    product = get_product(db, product_id)
    if not product:
        return None

    movement_count = (
        db.query(movement_models.StockMovement)
        .filter(movement_models.StockMovement.product_id == product_id)
        .count()
    )
    if movement_count > 0:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete product '{product.name}'. It has {movement_count} stock movement(s)."
        )

    db.delete(product)
    db.commit()
    return {"message": "Product deleted successfully"}


# --------------------------------------------------
# Helper: Clean price values from a spreadsheet
# --------------------------------------------------
def clean_number(value):
    """
    Accepts: int, float, str (₹1,200.50), or NaN
    Returns: float
    """
    if value is None or pd.isna(value):
        return 0.0

    if isinstance(value, (int, float)):
        return float(value)

    # Strip currency symbols and thousands separators
    value = re.sub(r"[^\d.]", "", str(value))

    try:
        return float(value)
    except ValueError:
        return 0.0


def import_products_from_file(db: Session, file: UploadFile):
    """
    Bulk-create products from an .xlsx/.xls/.csv upload.

    Required columns: name, unit, purchase_price, sale_price.
    Optional: current_stock (booked as opening stock), reorder_level.
    Rows with a blank name or a name that already exists are skipped.
    """
    from mandi.stock.movements import service as movement_service

    filename = (file.filename or "").lower()
    if not filename.endswith((".xlsx", ".xls", ".csv")):
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Upload .xlsx, .xls or .csv"
        )

    try:
        if filename.endswith(".csv"):
            df = pd.read_csv(file.file)
        else:
            df = pd.read_excel(file.file)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Could not read file: {e}")

    # Normalize column names
    df.columns = [str(c).strip().lower() for c in df.columns]

    required_columns = {"name", "unit", "purchase_price", "sale_price"}
    if not required_columns.issubset(df.columns):
        raise HTTPException(
            status_code=400,
            detail=f"File must contain columns: {sorted(required_columns)}"
        )

    existing_names = {
        name.lower().strip()
        for (name,) in db.query(models.Product.name).all()
    }

    imported = 0
    skipped = 0

    try:
        for _, row in df.iterrows():
            if pd.isna(row["name"]) or not str(row["name"]).strip():
                skipped += 1
                continue

            name = str(row["name"]).strip()
            if name.lower() in existing_names:
                skipped += 1
                continue

            reorder_level = settings.DEFAULT_REORDER_LEVEL
            if "reorder_level" in df.columns and not pd.isna(row["reorder_level"]):
                reorder_level = clean_number(row["reorder_level"])

            product = models.Product(
                name=name,
                unit="" if pd.isna(row["unit"]) else str(row["unit"]).strip(),
                purchase_price=clean_number(row["purchase_price"]),
                sale_price=clean_number(row["sale_price"]),
                current_stock=0,
                reorder_level=reorder_level,
            )
            db.add(product)
            db.flush()

            opening_stock = clean_number(row["current_stock"]) if "current_stock" in df.columns else 0
            if opening_stock > 0:
                movement_service.apply_movement(
                    db,
                    product_id=product.id,
                    type=movement_service.STOCK_IN,
                    quantity=opening_stock,
                    reason="Opening stock",
                )

            existing_names.add(name.lower())
            imported += 1

        if imported == 0:
            raise HTTPException(
                status_code=409,
                detail={
                    "message": "Import unsuccessful",
                    "imported": 0,
                    "skipped": skipped,
                    "reason": "All rows were invalid or duplicated"
                }
            )

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Product import: {imported} imported, {skipped} skipped")
    return {
        "message": "Import completed successfully",
        "imported": imported,
        "skipped": skipped
    }
