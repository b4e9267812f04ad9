from formpay.utils.hashing import (
    compute_request_signature, compute_callback_signature, verify_callback_signature,
)
from formpay.utils.validators import validate_email, format_amount

__all__ = [
    "compute_request_signature", "compute_callback_signature", "verify_callback_signature",
    "validate_email", "format_amount",
]
