"""
Brochure Request Model — Leads asking for a product brochure.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime

from formpay.database import Base


class BrochureRequest(Base):
    __tablename__ = "brochures"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String(128), nullable=False)
    email = Column(String(254), nullable=False)
    phone = Column(String(32), nullable=False)
    interest = Column(String(256), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
