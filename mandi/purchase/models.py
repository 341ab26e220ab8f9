from sqlalchemy import Column, Integer, Float, ForeignKey, Date, DateTime, String
from sqlalchemy.orm import relationship
from datetime import datetime
from mandi.database import Base


class Purchase(Base):
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)

    vendor_id = Column(
        Integer,
        ForeignKey("vendors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    vehicle_id = Column(
        Integer,
        ForeignKey("vehicles.id", ondelete="SET NULL"),
        nullable=True
    )

    date = Column(Date, nullable=False, index=True)
    total_amount = Column(Float, nullable=False, default=0)
    status = Column(String, nullable=False, default="completed")

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    vendor = relationship("Vendor")
    vehicle = relationship("Vehicle")
    items = relationship(
        "PurchaseItem",
        back_populates="purchase",
        cascade="all, delete-orphan",
        order_by="PurchaseItem.id",
    )


class PurchaseItem(Base):
    __tablename__ = "purchase_items"

    id = Column(Integer, primary_key=True, index=True)

    purchase_id = Column(
        Integer,
        ForeignKey("purchases.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    product_id = Column(Integer, nullable=False, index=True)

    quantity = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)
    total = Column(Float, nullable=False)

    purchase = relationship("Purchase", back_populates="items")
    product = relationship(
        "Product",
        primaryjoin="foreign(PurchaseItem.product_id) == Product.id",
        viewonly=True,
    )
