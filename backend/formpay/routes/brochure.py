"""
Brochure Routes — Brochure request leads.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from formpay.database import get_db
from formpay.logging_config import get_logger
from formpay.models.brochure import BrochureRequest
from formpay.schemas.schemas import (
    BrochureSubmitRequest, BrochureSubmitResponse, BrochureListResponse, BrochureOut,
    ValidationErrorResponse,
)

router = APIRouter(prefix="/api/brochure", tags=["Brochure"])
logger = get_logger("brochure_routes")


@router.post("/submit", response_model=BrochureSubmitResponse, status_code=201,
             responses={400: {"model": ValidationErrorResponse}})
def submit_brochure(payload: BrochureSubmitRequest, db: Session = Depends(get_db)):
    """Store a brochure request."""
    brochure = BrochureRequest(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        interest=payload.interest,
    )
    try:
        db.add(brochure)
        db.commit()
        db.refresh(brochure)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("brochure_save_failed")
        raise HTTPException(status_code=500, detail="Error submitting brochure request")

    logger.info("brochure_submitted", brochure_id=brochure.id, interest=brochure.interest)
    return BrochureSubmitResponse(data=BrochureOut.model_validate(brochure))


@router.get("/all", response_model=BrochureListResponse)
def list_brochures(db: Session = Depends(get_db)):
    """Admin: all brochure requests, newest first."""
    brochures = (
        db.query(BrochureRequest)
        .order_by(BrochureRequest.created_at.desc(), BrochureRequest.id.desc())
        .all()
    )
    return BrochureListResponse(data=[BrochureOut.model_validate(b) for b in brochures])
