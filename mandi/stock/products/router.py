from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.orm import Session
from typing import List, Optional

from mandi.database import get_db
from mandi.stock.products import schemas, service

router = APIRouter()


@router.post("/", response_model=schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(product: schemas.ProductCreate, db: Session = Depends(get_db)):
    return service.create_product(db, product)


@router.get("/", response_model=List[schemas.ProductOut])
def list_products(name: Optional[str] = None, db: Session = Depends(get_db)):
    return service.get_products(db, name=name)


@router.get("/simple", response_model=List[schemas.ProductSimpleSchema])
def list_products_simple(db: Session = Depends(get_db)):
    """Lightweight list for the billing dropdowns."""
    return service.get_products(db)


@router.get("/low-stock", response_model=List[schemas.ProductOut])
def list_low_stock(db: Session = Depends(get_db)):
    return service.get_low_stock_products(db)


@router.get("/{product_id}", response_model=schemas.ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = service.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.patch("/{product_id}", response_model=schemas.ProductOut)
def update_product(product_id: int, product_update: schemas.ProductUpdate, db: Session = Depends(get_db)):
    product = service.update_product(db, product_id, product_update)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.delete("/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    result = service.delete_product(db, product_id)
    if not result:
        raise HTTPException(status_code=404, detail="Product not found")
    return result


@router.post("/import-excel")
def import_products(file: UploadFile = File(...), db: Session = Depends(get_db)):
    """Bulk product upload (.xlsx, .xls or .csv)."""
    return service.import_products_from_file(db, file)
