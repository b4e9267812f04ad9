from formpay.models.payment import PaymentRecord
from formpay.models.brochure import BrochureRequest
from formpay.models.contact import ContactMessage
from formpay.models.submission import FormSubmission

__all__ = ["PaymentRecord", "BrochureRequest", "ContactMessage", "FormSubmission"]
