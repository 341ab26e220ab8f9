from sqlalchemy import Column, Integer, Float, ForeignKey, Date, DateTime, String
from sqlalchemy.orm import relationship
from datetime import datetime
from mandi.database import Base


class VendorReturn(Base):
    __tablename__ = "vendor_returns"

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
    purchase_id = Column(
        Integer,
        ForeignKey("purchases.id", ondelete="SET NULL"),
        nullable=True
    )

    date = Column(Date, nullable=False, index=True)
    total_amount = Column(Float, nullable=False, default=0)
    reason = Column(String, nullable=True)
    status = Column(String, nullable=False, default="completed")

    created_at = Column(DateTime, default=datetime.utcnow)

    vendor = relationship("Vendor")
    items = relationship(
        "VendorReturnItem",
        back_populates="vendor_return",
        cascade="all, delete-orphan",
        order_by="VendorReturnItem.id",
    )


class VendorReturnItem(Base):
    __tablename__ = "vendor_return_items"

    id = Column(Integer, primary_key=True, index=True)

    return_id = Column(
        Integer,
        ForeignKey("vendor_returns.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    product_id = Column(Integer, nullable=False, index=True)

    quantity = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)
    total = Column(Float, nullable=False)
    reason = Column(String, nullable=True)

    vendor_return = relationship("VendorReturn", back_populates="items")
    product = relationship(
        "Product",
        primaryjoin="foreign(VendorReturnItem.product_id) == Product.id",
        viewonly=True,
    )
