from sqlalchemy import Column, Integer, String, Float, DateTime
from datetime import datetime
from mandi.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    unit = Column(String, nullable=False)          # KG, Box, Bag ...

    purchase_price = Column(Float, nullable=False)
    sale_price = Column(Float, nullable=False)

    # Written only by the stock ledger, never below zero
    current_stock = Column(Float, nullable=False, default=0)
    reorder_level = Column(Float, nullable=True, default=10)

    created_at = Column(DateTime, default=datetime.utcnow)
