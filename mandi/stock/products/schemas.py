from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Optional
from datetime import datetime


# -------------------------------
# Base
# -------------------------------
class ProductBase(BaseModel):
    name: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1)          # KG, Box, Bag
    purchase_price: float = Field(..., ge=0)
    sale_price: float = Field(..., ge=0)
    reorder_level: Optional[float] = Field(None, ge=0)


# -------------------------------
# Create
# -------------------------------
class ProductCreate(ProductBase):
    # Opening stock, booked as an "in" movement
    current_stock: float = Field(0, ge=0)


# -------------------------------
# Update (stock is owned by the ledger)
# -------------------------------
class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    unit: Optional[str] = Field(None, min_length=1)
    purchase_price: Optional[float] = Field(None, ge=0)
    sale_price: Optional[float] = Field(None, ge=0)
    reorder_level: Optional[float] = Field(None, ge=0)

    model_config = ConfigDict(extra="forbid")


# -------------------------------
# Output
# -------------------------------
class ProductOut(BaseModel):
    id: int
    name: str
    unit: str
    purchase_price: float
    sale_price: float
    current_stock: float
    reorder_level: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True

    @computed_field
    @property
    def stock_value(self) -> float:
        return (self.current_stock or 0) * (self.purchase_price or 0)


class ProductSimpleSchema(BaseModel):
    id: int
    name: str
    unit: str
    sale_price: float

    class Config:
        from_attributes = True
