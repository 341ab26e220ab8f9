from sqlalchemy import Column, Integer, Float, String, Date, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from mandi.database import Base


class StockMovement(Base):
    """Append-only audit row for every change to Product.current_stock."""

    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, index=True)

    # No FK: line items may carry product ids that no longer resolve
    product_id = Column(Integer, nullable=False, index=True)

    type = Column(String(3), nullable=False)       # in / out
    quantity = Column(Float, nullable=False)       # requested, not the clamped delta
    reason = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)

    reference_id = Column(Integer, nullable=True, index=True)
    reference_type = Column(String(20), nullable=True)  # purchase / invoice / vendor_return

    created_at = Column(DateTime, default=datetime.utcnow)

    product = relationship(
        "Product",
        primaryjoin="foreign(StockMovement.product_id) == Product.id",
        viewonly=True,
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_movement_quantity_positive"),
        CheckConstraint("type IN ('in', 'out')", name="ck_stock_movement_type"),
    )
