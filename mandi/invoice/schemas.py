from pydantic import BaseModel, ConfigDict, Field
from datetime import date as date_type, datetime
from typing import Annotated, List, Literal, Optional, Union

from mandi.config import settings


# ===============================
# SURCHARGE CONFIG (tagged on mode)
# ===============================
class PercentOfSubtotalSurcharge(BaseModel):
    mode: Literal["percent-of-subtotal"]
    rate: float = Field(default_factory=lambda: settings.DEFAULT_SURCHARGE_PERCENT, ge=0)


class PerKgSurcharge(BaseModel):
    mode: Literal["per-kg"]
    rate: float = Field(..., ge=0)
    # Weighing-station total; falls back to the summed item quantity
    total_kg_weight: Optional[float] = Field(None, ge=0)


class PerBagSurcharge(BaseModel):
    mode: Literal["per-bag"]
    rate: float = Field(..., ge=0)
    total_bags: Optional[float] = Field(None, ge=0)


SurchargeConfig = Annotated[
    Union[PercentOfSubtotalSurcharge, PerKgSurcharge, PerBagSurcharge],
    Field(discriminator="mode"),
]


# ===============================
# CREATE
# ===============================
class InvoiceItemCreate(BaseModel):
    product_id: int
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    bags: Optional[int] = Field(None, ge=0)


class InvoiceCreate(BaseModel):
    customer_id: int
    date: date_type
    items: List[InvoiceItemCreate] = Field(..., min_length=1)
    surcharge: Optional[SurchargeConfig] = None
    vehicle_id: Optional[int] = None
    invoice_number: Optional[str] = None
    status: Optional[str] = None


# ===============================
# REVISE (prices and surcharge only)
# ===============================
class InvoiceItemRevise(BaseModel):
    id: int
    unit_price: float = Field(..., ge=0)


class InvoiceRevise(BaseModel):
    items: List[InvoiceItemRevise] = []
    surcharge_amount: Optional[float] = Field(None, ge=0)
    status: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


# ===============================
# OUTPUT
# ===============================
class InvoiceItemOut(BaseModel):
    id: int
    invoice_id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: float
    unit_price: float
    total: float
    bags: Optional[int] = None

    class Config:
        from_attributes = True


class InvoiceOut(BaseModel):
    id: int
    invoice_number: str
    customer_id: int
    customer_name: Optional[str] = None
    vehicle_id: Optional[int] = None
    date: date_type
    subtotal: float
    include_surcharge: bool
    surcharge_mode: Optional[str] = None
    surcharge_rate: Optional[float] = None
    surcharge_basis: Optional[float] = None
    surcharge_amount: float
    grand_total: float
    status: str
    created_at: Optional[datetime] = None

    # Payment summary (derived)
    total_paid: float = 0
    balance_due: float = 0
    payment_status: Literal["paid", "partial", "unpaid"] = "unpaid"

    items: List[InvoiceItemOut] = []

    class Config:
        from_attributes = True
