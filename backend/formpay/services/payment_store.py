"""
Payment Store — Persistence for PayU payment attempts, keyed by txnid.
"""
from typing import Optional, Dict

from sqlalchemy.orm import Session

from formpay.models.payment import PaymentRecord, PAYMENT_PENDING, PAYMENT_STATUSES


class PaymentStore:
    """Thin wrapper over the SQLAlchemy session for PaymentRecord rows."""

    def __init__(self, db: Session):
        self.db = db

    def exists(self, txnid: str) -> bool:
        return self.db.query(PaymentRecord.id).filter(PaymentRecord.txnid == txnid).first() is not None

    def get(self, txnid: str) -> Optional[PaymentRecord]:
        if not txnid:
            return None
        return self.db.query(PaymentRecord).filter(PaymentRecord.txnid == txnid).first()

    def create(
        self,
        txnid: str,
        name: str,
        email: str,
        phone: str,
        amount: float,
        form_type: str,
        whatsapp: Optional[str] = None,
    ) -> PaymentRecord:
        """Insert a pending record and commit. IntegrityError propagates on a duplicate txnid."""
        record = PaymentRecord(
            txnid=txnid,
            name=name,
            email=email,
            phone=phone,
            whatsapp=whatsapp,
            amount=amount,
            form_type=form_type,
            status=PAYMENT_PENDING,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def set_status(self, record: PaymentRecord, status: str, details: Optional[Dict] = None) -> PaymentRecord:
        """Move a record to a new status and attach the raw callback payload."""
        if status not in PAYMENT_STATUSES:
            raise ValueError(f"Unknown payment status: {status}")
        record.status = status
        if details is not None:
            record.payment_details = dict(details)
        self.db.commit()
        self.db.refresh(record)
        return record

    def list_all(self) -> list[PaymentRecord]:
        """All records, newest first."""
        return (
            self.db.query(PaymentRecord)
            .order_by(PaymentRecord.created_at.desc(), PaymentRecord.id.desc())
            .all()
        )
