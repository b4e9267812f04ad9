"""
Form Routes — Generic lead form submissions tagged by form type.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from formpay.database import get_db
from formpay.logging_config import get_logger
from formpay.models.submission import FormSubmission
from formpay.schemas.schemas import (
    FormSubmitRequest, FormSubmitResponse, FormSubmitData, ValidationErrorResponse,
)

router = APIRouter(prefix="/api/forms", tags=["Forms"])
logger = get_logger("form_routes")


@router.post("/", response_model=FormSubmitResponse, responses={400: {"model": ValidationErrorResponse}})
def submit_form(payload: FormSubmitRequest, db: Session = Depends(get_db)):
    submission = FormSubmission(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        whatsapp=payload.whatsapp,
        form_type=payload.form_type,
    )
    try:
        db.add(submission)
        db.commit()
        db.refresh(submission)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("form_save_failed", form_type=payload.form_type)
        raise HTTPException(status_code=500, detail="Error submitting form")

    logger.info("form_submitted", submission_id=submission.id, form_type=submission.form_type)
    return FormSubmitResponse(
        data=FormSubmitData(
            id=submission.id,
            form_type=submission.form_type,
            submitted_at=submission.submitted_at,
        )
    )
