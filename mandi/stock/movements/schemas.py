from pydantic import BaseModel, Field
from datetime import date as date_type, datetime
from typing import Literal, Optional


class StockMovementCreate(BaseModel):
    product_id: int
    type: Literal["in", "out"]
    quantity: float = Field(..., gt=0)
    reason: str = Field(..., min_length=1)
    date: Optional[date_type] = None       # defaults to today
    reference_id: Optional[int] = None


class StockMovementOut(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    type: str
    quantity: float
    reason: str
    date: date_type
    reference_id: Optional[int] = None
    reference_type: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
