from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime

from formpay.database import Base


class FormSubmission(Base):
    __tablename__ = "form_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String(128), nullable=False)
    email = Column(String(254), nullable=False)
    phone = Column(String(32), nullable=False)
    whatsapp = Column(String(32))
    form_type = Column(String(64), nullable=False)  # e.g. demo | webinar | course

    submitted_at = Column(DateTime, default=datetime.utcnow)
