"""
Validators — Regex and rule-based validation for form and payment input.
"""
import re
from decimal import Decimal, ROUND_HALF_UP

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")


def validate_email(email: str | None) -> bool:
    """Validate a basic user@domain.tld email address."""
    if not email:
        return False
    return bool(_EMAIL_RE.match(email.strip()))


def format_amount(amount: Decimal | int | float | str) -> str:
    """Fixed-point two-decimal amount as PayU expects it (1500 -> "1500.00")."""
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{value:f}"
