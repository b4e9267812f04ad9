"""
Shared FastAPI dependencies — gateway credentials, callback bodies, services.
"""
from fastapi import Depends, Request

from formpay.config import GatewayConfig, Settings, get_settings
from formpay.services.notification_service import NotificationService

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_gateway_config(settings: Settings = Depends(get_settings)) -> GatewayConfig:
    """PayU credentials for this request, resolved once from settings."""
    return settings.gateway()


def get_notification_service(settings: Settings = Depends(get_settings)) -> NotificationService:
    return NotificationService(settings)


def is_form_request(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return any(ct in content_type for ct in FORM_CONTENT_TYPES)


async def read_callback_payload(request: Request) -> dict[str, str]:
    """Gateway callback body as a flat dict of strings (form-encoded or JSON)."""
    if is_form_request(request):
        form = await request.form()
        return {k: v for k, v in form.items() if isinstance(v, str)}

    try:
        body = await request.json()
    except ValueError:
        return {}
    if not isinstance(body, dict):
        return {}
    return {str(k): "" if v is None else str(v) for k, v in body.items()}
