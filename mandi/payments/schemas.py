from pydantic import BaseModel, Field
from typing import Optional
from datetime import date as date_type, datetime

from mandi.config import local_today


# -------------------------
# Vendor payments
# -------------------------
class VendorPaymentCreate(BaseModel):
    vendor_id: int
    purchase_id: Optional[int] = None
    amount: float = Field(..., gt=0)
    date: date_type = Field(default_factory=local_today)
    payment_method: str = "cash"              # cash / bank / upi / cheque
    notes: Optional[str] = None


class VendorPaymentOut(VendorPaymentCreate):
    id: int
    vendor_name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# -------------------------
# Customer payments
# -------------------------
class CustomerPaymentCreate(BaseModel):
    customer_id: int
    invoice_id: Optional[int] = None
    amount: float = Field(..., gt=0)
    date: date_type = Field(default_factory=local_today)
    payment_method: str = "cash"
    notes: Optional[str] = None


class CustomerPaymentOut(CustomerPaymentCreate):
    id: int
    customer_name: Optional[str] = None
    invoice_number: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# -------------------------
# Surcharge collected in cash, outside any invoice
# -------------------------
class SurchargeCashPaymentCreate(BaseModel):
    amount: float = Field(..., gt=0)
    date: date_type = Field(default_factory=local_today)
    customer_id: Optional[int] = None
    invoice_id: Optional[int] = None
    notes: Optional[str] = None


class SurchargeCashPaymentOut(SurchargeCashPaymentCreate):
    id: int
    customer_name: Optional[str] = None
    invoice_number: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
