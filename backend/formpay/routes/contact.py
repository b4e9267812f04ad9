"""
Contact Routes — Contact form messages with admin email notification.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from formpay.database import get_db
from formpay.dependencies import get_notification_service
from formpay.logging_config import get_logger
from formpay.models.contact import ContactMessage, DEFAULT_CONTACT_SUBJECT
from formpay.schemas.schemas import (
    ContactSubmitRequest, ContactSubmitResponse, ContactListResponse, ContactOut,
    ValidationErrorResponse,
)
from formpay.services.notification_service import NotificationService

router = APIRouter(prefix="/api/contact", tags=["Contact"])
logger = get_logger("contact_routes")


@router.post("/submit", response_model=ContactSubmitResponse, status_code=201,
             responses={400: {"model": ValidationErrorResponse}})
def submit_contact(
    payload: ContactSubmitRequest,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Store a contact message, then email the admin (best effort)."""
    contact = ContactMessage(
        name=payload.name,
        email=payload.email,
        phone=payload.phone or "",
        subject=payload.subject or DEFAULT_CONTACT_SUBJECT,
        message=payload.message,
    )
    try:
        db.add(contact)
        db.commit()
        db.refresh(contact)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("contact_save_failed")
        raise HTTPException(status_code=500, detail="Error submitting contact form")

    logger.info("contact_submitted", contact_id=contact.id)
    notifier.notify_contact(contact)
    return ContactSubmitResponse()


@router.get("/all", response_model=ContactListResponse)
def list_contacts(db: Session = Depends(get_db)):
    """Admin: all contact messages, newest first."""
    contacts = (
        db.query(ContactMessage)
        .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
        .all()
    )
    return ContactListResponse(data=[ContactOut.model_validate(c) for c in contacts])
