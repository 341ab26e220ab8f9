from pydantic import BaseModel, Field
from typing import Optional


class VehicleBase(BaseModel):
    number: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    capacity: Optional[str] = None
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None


class VehicleCreate(VehicleBase):
    pass


class VehicleUpdate(BaseModel):
    number: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    capacity: Optional[str] = None
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None


class VehicleOut(VehicleBase):
    id: int

    class Config:
        from_attributes = True
