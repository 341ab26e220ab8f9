from sqlalchemy import Column, Integer, String
from mandi.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(String, nullable=False)
    type = Column(String, nullable=False)      # truck, tempo, pickup
    capacity = Column(String, nullable=True)
    driver_name = Column(String, nullable=True)
    driver_phone = Column(String, nullable=True)
