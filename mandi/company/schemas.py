from pydantic import BaseModel, Field
from typing import Optional


class CompanySettingsIn(BaseModel):
    name: str = Field(..., min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    gst_number: Optional[str] = None
    bank_details: Optional[str] = None


class CompanySettingsOut(CompanySettingsIn):
    id: int

    class Config:
        from_attributes = True
