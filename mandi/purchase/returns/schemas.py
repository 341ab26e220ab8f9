from pydantic import BaseModel, Field
from datetime import date as date_type, datetime
from typing import List, Optional


class VendorReturnItemCreate(BaseModel):
    product_id: int
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    reason: Optional[str] = None


class VendorReturnCreate(BaseModel):
    vendor_id: int
    date: date_type
    items: List[VendorReturnItemCreate] = Field(..., min_length=1)
    vehicle_id: Optional[int] = None
    purchase_id: Optional[int] = None
    reason: Optional[str] = None
    status: Optional[str] = "completed"


class VendorReturnItemOut(BaseModel):
    id: int
    return_id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: float
    unit_price: float
    total: float
    reason: Optional[str] = None

    class Config:
        from_attributes = True


class VendorReturnOut(BaseModel):
    id: int
    vendor_id: int
    vendor_name: Optional[str] = None
    vehicle_id: Optional[int] = None
    purchase_id: Optional[int] = None
    date: date_type
    total_amount: float
    reason: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    items: List[VendorReturnItemOut] = []

    class Config:
        from_attributes = True
