from sqlalchemy import Column, Integer, Float, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from mandi.database import Base


class VehicleInventory(Base):
    __tablename__ = "vehicle_inventory"

    id = Column(Integer, primary_key=True, index=True)

    vehicle_id = Column(
        Integer,
        ForeignKey("vehicles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    product_id = Column(Integer, nullable=False, index=True)

    quantity = Column(Float, nullable=False, default=0)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vehicle = relationship("Vehicle")
    product = relationship(
        "Product",
        primaryjoin="foreign(VehicleInventory.product_id) == Product.id",
        viewonly=True,
    )

    # One logical row per (vehicle, product); the ledger upserts against it
    __table_args__ = (
        UniqueConstraint(
            "vehicle_id",
            "product_id",
            name="uq_vehicle_inventory_vehicle_product"
        ),
    )


class VehicleInventoryMovement(Base):
    __tablename__ = "vehicle_inventory_movements"

    id = Column(Integer, primary_key=True, index=True)

    vehicle_id = Column(Integer, nullable=False, index=True)
    product_id = Column(Integer, nullable=False, index=True)

    type = Column(String(10), nullable=False)      # load / sale / adjustment
    quantity = Column(Float, nullable=False)

    reference_id = Column(Integer, nullable=True)
    reference_type = Column(String(20), nullable=True)  # purchase / invoice / vendor_return

    date = Column(Date, nullable=False)
    notes = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    product = relationship(
        "Product",
        primaryjoin="foreign(VehicleInventoryMovement.product_id) == Product.id",
        viewonly=True,
    )
