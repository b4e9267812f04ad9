"""
Callback Verifier — Authenticates PayU status callbacks and settles payments.

Success callbacks carry a reverse SHA-512 hash that is recomputed and compared
in constant time before the gateway-reported status is trusted. A mismatch is
recorded as a failed payment, never raised.

Failure callbacks are accepted on the txnid alone unless
``verify_failure_signature`` is enabled. That is a weaker trust boundary than
the success path.
"""
from dataclasses import dataclass
from typing import Optional, Mapping
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from formpay.config import GatewayConfig
from formpay.logging_config import get_logger
from formpay.models.payment import PaymentRecord, PAYMENT_PENDING, PAYMENT_SUCCEEDED, PAYMENT_FAILED
from formpay.services.payment_store import PaymentStore
from formpay.utils.hashing import verify_callback_signature

GATEWAY_SUCCESS = "success"


@dataclass
class CallbackOutcome:
    redirect_url: str
    status: str                      # internal status after handling
    record: Optional[PaymentRecord] = None
    verified: bool = False


def map_gateway_status(status: Optional[str]) -> str:
    """PayU "success" (any case) -> succeeded; everything else -> failed."""
    if status and status.strip().lower() == GATEWAY_SUCCESS:
        return PAYMENT_SUCCEEDED
    return PAYMENT_FAILED


class CallbackVerifier:
    """Handles PayU success/failure callbacks for one request."""

    def __init__(
        self,
        db: Session,
        gateway: GatewayConfig,
        frontend_url: str,
        verify_failure_signature: bool = False,
        logger=None,
    ):
        self.store = PaymentStore(db)
        self.gateway = gateway
        self.frontend_url = frontend_url.rstrip("/")
        self.verify_failure_signature = verify_failure_signature
        self.logger = logger or get_logger("callback_verifier")

    # ─── Redirect targets ───────────────────────────────────────────

    def success_redirect(self, status: str, txnid: Optional[str] = None, error: Optional[str] = None) -> str:
        params = {"payment_status": GATEWAY_SUCCESS if status == PAYMENT_SUCCEEDED else PAYMENT_FAILED}
        if txnid:
            params["txnid"] = txnid
        if error:
            params["error"] = error
        return f"{self.frontend_url}?{urlencode(params)}"

    def failure_redirect(self, txnid: Optional[str], status: Optional[str]) -> str:
        params = {"txnid": txnid or "", "status": status or PAYMENT_FAILED}
        return f"{self.frontend_url}/payment/failure?{urlencode(params)}"

    # ─── Success callback ───────────────────────────────────────────

    def handle_success(self, payload: Mapping[str, str]) -> CallbackOutcome:
        """Verify a success callback and settle the matching record."""
        txnid = payload.get("txnid")
        received_hash = payload.get("hash")

        if not txnid or not received_hash:
            self.logger.warning("callback_missing_fields", txnid=txnid, has_hash=bool(received_hash))
            return CallbackOutcome(self.success_redirect(PAYMENT_FAILED, txnid), PAYMENT_FAILED)

        record = self.store.get(txnid)
        if record is None:
            self.logger.warning("callback_unknown_txnid", txnid=txnid)
            return CallbackOutcome(self.success_redirect(PAYMENT_FAILED, txnid), PAYMENT_FAILED)

        if not verify_callback_signature(payload, self.gateway.salt, received_hash):
            self.logger.warning(
                "callback_hash_mismatch",
                txnid=txnid,
                reported_status=payload.get("status"),
                previous_status=record.status,
            )
            self.store.set_status(record, PAYMENT_FAILED, payload)
            return CallbackOutcome(self.success_redirect(PAYMENT_FAILED, txnid), PAYMENT_FAILED, record)

        new_status = map_gateway_status(payload.get("status"))
        if record.status not in (PAYMENT_PENDING, new_status):
            self.logger.warning("callback_status_overwrite", txnid=txnid, previous_status=record.status, status=new_status)
        self.store.set_status(record, new_status, payload)
        self.logger.info("callback_verified", txnid=txnid, status=new_status, mihpayid=payload.get("mihpayid"))
        return CallbackOutcome(self.success_redirect(new_status, txnid), new_status, record, verified=True)

    # ─── Failure callback ───────────────────────────────────────────

    def handle_failure(self, payload: Mapping[str, str]) -> Optional[PaymentRecord]:
        """Mark the record failed. Returns None if unknown or rejected."""
        txnid = payload.get("txnid")
        record = self.store.get(txnid)
        if record is None:
            self.logger.warning("failure_callback_unknown_txnid", txnid=txnid)
            return None

        if self.verify_failure_signature and not verify_callback_signature(
            payload, self.gateway.salt, payload.get("hash")
        ):
            self.logger.warning("failure_callback_hash_mismatch", txnid=txnid)
            return None

        if record.status == PAYMENT_SUCCEEDED:
            self.logger.warning("failure_callback_overwrites_success", txnid=txnid)
        self.store.set_status(record, PAYMENT_FAILED, payload)
        self.logger.info(
            "payment_marked_failed",
            txnid=txnid,
            reported_status=payload.get("status"),
            authenticated=self.verify_failure_signature,
        )
        return record
