from pydantic import BaseModel, Field
from datetime import date as date_type, datetime
from typing import List, Optional


class PurchaseItemCreate(BaseModel):
    product_id: int
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)


class PurchaseCreate(BaseModel):
    vendor_id: int
    date: date_type
    items: List[PurchaseItemCreate] = Field(..., min_length=1)
    vehicle_id: Optional[int] = None
    status: Optional[str] = "completed"


class PurchaseItemOut(BaseModel):
    id: int
    purchase_id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: float
    unit_price: float
    total: float

    class Config:
        from_attributes = True


class PurchaseOut(BaseModel):
    id: int
    vendor_id: int
    vendor_name: Optional[str] = None
    vehicle_id: Optional[int] = None
    date: date_type
    total_amount: float
    status: str
    created_at: Optional[datetime] = None
    items: List[PurchaseItemOut] = []

    class Config:
        from_attributes = True
