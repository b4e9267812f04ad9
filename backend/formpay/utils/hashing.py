"""
Cryptographic Hashing Utilities — PayU SHA-512 request and response hashes.

Request hash:
    key|txnid|amount|productinfo|firstname|email|udf1|udf2|udf3|udf4|udf5||||||SALT

Response (reverse) hash:
    SALT|status||||||udf5|udf4|udf3|udf2|udf1|email|firstname|productinfo|amount|txnid|key
"""
import hashlib
import hmac
from typing import Mapping

UDF_FIELDS = ("udf1", "udf2", "udf3", "udf4", "udf5")
RESERVED_FIELDS = 5


def _field(data: Mapping, name: str) -> str:
    value = data.get(name)
    return "" if value is None else str(value)


def _sha512(hash_string: str) -> str:
    return hashlib.sha512(hash_string.encode("utf-8")).hexdigest()


def build_request_hash_string(data: Mapping, salt: str) -> str:
    """Pipe-joined field list signed on the outbound payment request."""
    parts = [_field(data, name) for name in ("key", "txnid", "amount", "productinfo", "firstname", "email")]
    parts += [_field(data, name) for name in UDF_FIELDS]
    parts += [""] * RESERVED_FIELDS
    parts.append(salt)
    return "|".join(parts)


def build_callback_hash_string(data: Mapping, salt: str) -> str:
    """Pipe-joined field list PayU signs on its status callback."""
    parts = [salt, _field(data, "status")]
    parts += [""] * RESERVED_FIELDS
    parts += [_field(data, name) for name in reversed(UDF_FIELDS)]
    parts += [_field(data, name) for name in ("email", "firstname", "productinfo", "amount", "txnid", "key")]
    return "|".join(parts)


def compute_request_signature(data: Mapping, salt: str) -> str:
    """SHA-512 hex digest for an outbound payment request."""
    return _sha512(build_request_hash_string(data, salt))


def compute_callback_signature(data: Mapping, salt: str) -> str:
    """SHA-512 hex digest PayU is expected to send back with a callback."""
    return _sha512(build_callback_hash_string(data, salt))


def verify_callback_signature(data: Mapping, salt: str, received: str | None) -> bool:
    """Constant-time check of a received callback hash."""
    if not received:
        return False
    expected = compute_callback_signature(data, salt)
    return hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8"))
