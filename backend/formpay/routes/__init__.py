from formpay.routes.payment import router as payment_router
from formpay.routes.brochure import router as brochure_router
from formpay.routes.contact import router as contact_router
from formpay.routes.forms import router as forms_router

__all__ = ["payment_router", "brochure_router", "contact_router", "forms_router"]
