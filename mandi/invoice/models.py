from sqlalchemy import Column, Integer, String, Float, ForeignKey, Date, DateTime, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from mandi.database import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)

    # Caller supplied, shown on the printout; not unique-enforced
    invoice_number = Column(String(50), nullable=False, index=True)

    customer_id = Column(
        Integer,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    vehicle_id = Column(
        Integer,
        ForeignKey("vehicles.id", ondelete="SET NULL"),
        nullable=True
    )

    date = Column(Date, nullable=False, index=True)

    subtotal = Column(Float, nullable=False, default=0)

    # Surcharge (hamali / halal charge)
    include_surcharge = Column(Boolean, nullable=False, default=False)
    surcharge_mode = Column(String(25), nullable=True)   # percent-of-subtotal / per-kg / per-bag
    surcharge_rate = Column(Float, nullable=True)
    surcharge_basis = Column(Float, nullable=True)       # kg weight or bag count
    surcharge_amount = Column(Float, nullable=False, default=0)

    # Always subtotal + surcharge_amount
    grand_total = Column(Float, nullable=False, default=0)

    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime, default=datetime.utcnow)

    customer = relationship("Customer")
    vehicle = relationship("Vehicle")
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
    )
    payments = relationship(
        "CustomerPayment",
        primaryjoin="Invoice.id == foreign(CustomerPayment.invoice_id)",
        viewonly=True,
    )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)

    invoice_id = Column(
        Integer,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    product_id = Column(Integer, nullable=False, index=True)

    quantity = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)
    total = Column(Float, nullable=False)
    bags = Column(Integer, nullable=True, default=0)

    invoice = relationship("Invoice", back_populates="items")
    product = relationship(
        "Product",
        primaryjoin="foreign(InvoiceItem.product_id) == Product.id",
        viewonly=True,
    )
