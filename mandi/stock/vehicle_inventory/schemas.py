from pydantic import BaseModel, Field
from typing import Optional
from datetime import date as date_type, datetime


class VehicleInventoryOut(BaseModel):
    id: int
    vehicle_id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: float
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VehicleInventoryMovementOut(BaseModel):
    id: int
    vehicle_id: int
    product_id: int
    product_name: Optional[str] = None
    type: str
    quantity: float
    reference_id: Optional[int] = None
    reference_type: Optional[str] = None
    date: date_type
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VehicleLoadCreate(BaseModel):
    product_id: int
    quantity: float = Field(..., gt=0)
    date: Optional[date_type] = None
    notes: Optional[str] = None


class VehicleAdjustCreate(BaseModel):
    """Manual deduction (spoilage, count correction)."""
    product_id: int
    quantity: float = Field(..., gt=0)
    date: Optional[date_type] = None
    notes: Optional[str] = None
