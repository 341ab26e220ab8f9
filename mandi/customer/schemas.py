from pydantic import BaseModel, Field
from typing import Literal, Optional


class CustomerBase(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: Optional[str] = None
    email: Optional[str] = None


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    email: Optional[str] = None


class CustomerOut(CustomerBase):
    id: int

    class Config:
        from_attributes = True


class CustomerBalanceOut(BaseModel):
    customer_id: int
    total_invoiced: float
    total_payments: float
    balance: float
    payment_status: Literal["paid", "partial", "unpaid"]
