"""
Payment Record Model — Tracks PayU payment attempts.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, JSON, Float

from formpay.database import Base

PAYMENT_PENDING = "pending"
PAYMENT_SUCCEEDED = "succeeded"
PAYMENT_FAILED = "failed"

PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_SUCCEEDED, PAYMENT_FAILED)


class PaymentRecord(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    txnid = Column(String(64), unique=True, nullable=False, index=True)

    name = Column(String(128), nullable=False)
    email = Column(String(254), nullable=False)
    phone = Column(String(32), nullable=False)
    whatsapp = Column(String(32))

    amount = Column(Float, nullable=False)       # As submitted, in INR
    form_type = Column(String(64), nullable=False)

    # Status tracking
    status = Column(String(16), nullable=False, default=PAYMENT_PENDING)  # pending | succeeded | failed
    payment_details = Column(JSON)               # Raw gateway callback payload

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
