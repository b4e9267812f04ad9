"""
Session Initiator — Prepares a signed PayU payment request.

No network call is made here: the returned payload is posted to PayU by the
browser. Only the pending PaymentRecord is written.
"""
import secrets
import time

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from formpay.config import GatewayConfig
from formpay.logging_config import get_logger
from formpay.schemas.schemas import PaymentSessionRequest
from formpay.services.payment_store import PaymentStore
from formpay.utils.hashing import UDF_FIELDS, compute_request_signature
from formpay.utils.validators import format_amount

MAX_TXNID_ATTEMPTS = 5


class TransactionIdExhausted(RuntimeError):
    """Could not find an unused transaction id."""


def generate_txnid() -> str:
    """TXN_<epoch millis>_<0..999>."""
    return f"TXN_{int(time.time() * 1000)}_{secrets.randbelow(1000)}"


class SessionInitiator:
    """Creates a pending payment and the signed payload for PayU."""

    def __init__(
        self,
        db: Session,
        gateway: GatewayConfig,
        base_url: str,
        product_name: str,
        logger=None,
        txnid_factory=generate_txnid,
    ):
        self.store = PaymentStore(db)
        self.db = db
        self.gateway = gateway
        self.base_url = base_url.rstrip("/")
        self.product_name = product_name
        self.logger = logger or get_logger("session_initiator")
        self.txnid_factory = txnid_factory

    def _create_pending(self, payload: PaymentSessionRequest):
        for attempt in range(1, MAX_TXNID_ATTEMPTS + 1):
            txnid = self.txnid_factory()
            if self.store.exists(txnid):
                self.logger.warning("txnid_collision", txnid=txnid, attempt=attempt)
                continue
            try:
                return self.store.create(
                    txnid=txnid,
                    name=payload.name,
                    email=payload.email,
                    phone=payload.phone,
                    whatsapp=payload.whatsapp,
                    amount=float(payload.amount),
                    form_type=payload.form_type,
                )
            except IntegrityError:
                # Lost a race with a concurrent insert of the same txnid
                self.db.rollback()
                self.logger.warning("txnid_collision", txnid=txnid, attempt=attempt)
        raise TransactionIdExhausted(f"No unique txnid after {MAX_TXNID_ATTEMPTS} attempts")

    def initiate(self, payload: PaymentSessionRequest) -> dict:
        """Persist a pending record and return the signed PayU field set."""
        record = self._create_pending(payload)

        data = {
            "key": self.gateway.key,
            "txnid": record.txnid,
            "amount": format_amount(payload.amount),
            "productinfo": f"{self.product_name} {payload.form_type} Payment",
            "firstname": payload.name,
            "email": payload.email,
            "phone": payload.phone,
            "surl": f"{self.base_url}/api/payment/success",
            "furl": f"{self.base_url}/api/payment/failure",
        }
        data.update({udf: "" for udf in UDF_FIELDS})
        data["hash"] = compute_request_signature(data, self.gateway.salt)
        data["payu_url"] = self.gateway.url

        self.logger.info(
            "payment_session_created",
            txnid=record.txnid,
            amount=data["amount"],
            form_type=payload.form_type,
            production=self.gateway.production,
        )
        return data
