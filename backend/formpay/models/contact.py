"""
Contact Message Model — Messages left through the website contact form.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Text

from formpay.database import Base

DEFAULT_CONTACT_SUBJECT = "Contact Form Submission"


class ContactMessage(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String(128), nullable=False)
    email = Column(String(254), nullable=False)
    phone = Column(String(32), default="")
    subject = Column(String(256), default=DEFAULT_CONTACT_SUBJECT)
    message = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
