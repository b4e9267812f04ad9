from formpay.services.payment_store import PaymentStore
from formpay.services.session_initiator import SessionInitiator
from formpay.services.callback_verifier import CallbackVerifier
from formpay.services.notification_service import NotificationService

__all__ = ["PaymentStore", "SessionInitiator", "CallbackVerifier", "NotificationService"]
