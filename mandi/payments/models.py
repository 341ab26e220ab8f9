from sqlalchemy import Column, Integer, Float, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from mandi.database import Base


class VendorPayment(Base):
    __tablename__ = "vendor_payments"

    id = Column(Integer, primary_key=True, index=True)

    vendor_id = Column(
        Integer,
        ForeignKey("vendors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    purchase_id = Column(
        Integer,
        ForeignKey("purchases.id", ondelete="SET NULL"),
        nullable=True
    )

    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)
    payment_method = Column(String, nullable=False, default="cash")  # cash / bank / upi / cheque
    notes = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    vendor = relationship("Vendor")


class CustomerPayment(Base):
    __tablename__ = "customer_payments"

    id = Column(Integer, primary_key=True, index=True)

    customer_id = Column(
        Integer,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    invoice_id = Column(
        Integer,
        ForeignKey("invoices.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)
    payment_method = Column(String, nullable=False, default="cash")
    notes = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    customer = relationship("Customer")


class SurchargeCashPayment(Base):
    """Hamali collected in cash outside the invoice flow."""

    __tablename__ = "surcharge_cash_payments"

    id = Column(Integer, primary_key=True, index=True)

    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)

    customer_id = Column(
        Integer,
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True
    )
    invoice_id = Column(
        Integer,
        ForeignKey("invoices.id", ondelete="SET NULL"),
        nullable=True
    )
    notes = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    customer = relationship("Customer")
