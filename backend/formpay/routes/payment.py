"""
Payment Routes — PayU payment sessions and gateway callbacks.
Handles: session creation, success/failure callbacks, status lookup, admin listing.
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from formpay.config import GatewayConfig, Settings, get_settings
from formpay.database import get_db
from formpay.dependencies import get_gateway_config, is_form_request, read_callback_payload
from formpay.logging_config import get_logger
from formpay.models.payment import PAYMENT_FAILED
from formpay.schemas.schemas import (
    PaymentSessionRequest, PaymentSessionResponse, PaymentSessionData,
    PaymentStatusResponse, PaymentStatusData, PaymentListResponse,
    PaymentFailureResponse, PaymentRecordOut, HashDebugRequest, HashDebugResponse,
    ValidationErrorResponse,
)
from formpay.services.callback_verifier import CallbackVerifier
from formpay.services.payment_store import PaymentStore
from formpay.services.session_initiator import SessionInitiator, TransactionIdExhausted
from formpay.utils.hashing import build_request_hash_string, compute_request_signature

router = APIRouter(prefix="/api/payment", tags=["Payment"])
BAD_REQUEST = {400: {"model": ValidationErrorResponse}}
logger = get_logger("payment_routes")

# PayU posts from a browser form; 303 turns the redirect into a GET
REDIRECT_STATUS = 303


def _verifier(db: Session, gateway: GatewayConfig, settings: Settings) -> CallbackVerifier:
    return CallbackVerifier(
        db,
        gateway,
        frontend_url=settings.FRONTEND_URL,
        verify_failure_signature=settings.PAYU_VERIFY_FAILURE_CALLBACK,
        logger=logger,
    )


@router.post("/create-payment-session", response_model=PaymentSessionResponse, responses=BAD_REQUEST)
def create_payment_session(
    payload: PaymentSessionRequest,
    db: Session = Depends(get_db),
    gateway: GatewayConfig = Depends(get_gateway_config),
    settings: Settings = Depends(get_settings),
):
    """Create a pending payment and return the signed PayU form fields."""
    initiator = SessionInitiator(
        db,
        gateway,
        base_url=settings.BASE_URL,
        product_name=settings.PRODUCT_NAME,
        logger=logger,
    )
    try:
        data = initiator.initiate(payload)
    except (SQLAlchemyError, TransactionIdExhausted):
        db.rollback()
        logger.exception("payment_session_failed", form_type=payload.form_type)
        raise HTTPException(status_code=500, detail="Error creating payment")

    return PaymentSessionResponse(data=PaymentSessionData(**data))


@router.post("/success")
def payment_success(
    payload: dict = Depends(read_callback_payload),
    db: Session = Depends(get_db),
    gateway: GatewayConfig = Depends(get_gateway_config),
    settings: Settings = Depends(get_settings),
):
    """PayU success callback. Always answers with a redirect to the frontend."""
    verifier = _verifier(db, gateway, settings)
    try:
        outcome = verifier.handle_success(payload)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("success_callback_error", txnid=payload.get("txnid"))
        url = verifier.success_redirect(PAYMENT_FAILED, payload.get("txnid"), error="processing_error")
        return RedirectResponse(url, status_code=REDIRECT_STATUS)

    return RedirectResponse(outcome.redirect_url, status_code=REDIRECT_STATUS)


@router.post("/failure", response_model=PaymentFailureResponse)
def payment_failure(
    request: Request,
    payload: dict = Depends(read_callback_payload),
    db: Session = Depends(get_db),
    gateway: GatewayConfig = Depends(get_gateway_config),
    settings: Settings = Depends(get_settings),
):
    """PayU failure callback.

    Form posts (the gateway) always get a redirect; JSON callers get a JSON
    acknowledgment or 404.
    """
    verifier = _verifier(db, gateway, settings)
    txnid = payload.get("txnid")
    from_gateway = is_form_request(request)
    redirect_url = verifier.failure_redirect(txnid, payload.get("status"))

    try:
        record = verifier.handle_failure(payload)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("failure_callback_error", txnid=txnid)
        if from_gateway:
            return RedirectResponse(redirect_url, status_code=REDIRECT_STATUS)
        raise HTTPException(status_code=500, detail="Error in failure callback")

    if from_gateway:
        return RedirectResponse(redirect_url, status_code=REDIRECT_STATUS)
    if record is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return PaymentFailureResponse(data=PaymentRecordOut.model_validate(record))


@router.get("/status/{txnid}", response_model=PaymentStatusResponse)
def get_payment_status(txnid: str, db: Session = Depends(get_db)):
    """Current status and public fields of one payment."""
    record = PaymentStore(db).get(txnid)
    if not record:
        raise HTTPException(status_code=404, detail="Payment not found")
    return PaymentStatusResponse(data=PaymentStatusData.model_validate(record))


@router.get("/all", response_model=PaymentListResponse)
def list_payments(db: Session = Depends(get_db)):
    """Admin: every payment record, newest first."""
    records = PaymentStore(db).list_all()
    return PaymentListResponse(data=[PaymentRecordOut.model_validate(r) for r in records])


@router.post("/test-hash", response_model=HashDebugResponse)
def test_hash(payload: HashDebugRequest, settings: Settings = Depends(get_settings)):
    """Debug helper: show the request hash string and its digest. DEBUG only."""
    if not settings.DEBUG:
        raise HTTPException(status_code=404, detail="Not Found")

    fields = payload.model_dump(exclude={"salt"})
    return HashDebugResponse(
        hash_string=build_request_hash_string(fields, payload.salt),
        hash=compute_request_signature(fields, payload.salt),
    )
