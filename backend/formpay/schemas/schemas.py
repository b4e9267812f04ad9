"""
Pydantic Schemas — Request & Response models for API validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, Dict, List, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from formpay.utils.validators import validate_email


class _FormInput(BaseModel):
    """Shared config for submitted form bodies: trim strings, accept camelCase aliases."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    @field_validator("email", check_fields=False)
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not validate_email(value):
            raise ValueError("Valid email is required")
        return value.lower()


class _ApiOut(BaseModel):
    """Response models: built from ORM rows or by field name, emitted in camelCase where the frontend expects it."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


# ──────────────── Payment ────────────────

class PaymentSessionRequest(_FormInput):
    name: str = Field(..., min_length=1, max_length=128)
    email: str
    phone: str = Field(..., min_length=1, max_length=32)
    whatsapp: Optional[str] = Field(None, max_length=32)
    amount: Decimal = Field(..., gt=0, max_digits=15, description="Amount in INR, rounded to paise for PayU")
    form_type: str = Field(..., alias="formType", min_length=1, max_length=64)


class PaymentSessionData(_ApiOut):
    """Fields the browser posts to PayU. Never carries the salt."""

    key: str
    txnid: str
    amount: str
    productinfo: str
    firstname: str
    email: str
    phone: str
    surl: str
    furl: str
    udf1: str = ""
    udf2: str = ""
    udf3: str = ""
    udf4: str = ""
    udf5: str = ""
    hash: str
    payu_url: str = Field(..., alias="payuUrl")


class PaymentSessionResponse(BaseModel):
    success: bool = True
    data: PaymentSessionData
    message: str = "Payment session created successfully"


class PaymentStatusData(_ApiOut):
    txnid: str
    status: str
    amount: float
    name: str
    email: str
    form_type: str = Field(..., alias="formType")
    created_at: datetime = Field(..., alias="createdAt")


class PaymentStatusResponse(BaseModel):
    success: bool = True
    data: PaymentStatusData


class PaymentRecordOut(_ApiOut):
    id: int
    txnid: str
    name: str
    email: str
    phone: str
    whatsapp: Optional[str] = None
    amount: float
    form_type: str = Field(..., alias="formType")
    status: str
    payment_details: Optional[Dict[str, Any]] = Field(None, alias="paymentDetails")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class PaymentListResponse(BaseModel):
    success: bool = True
    data: List[PaymentRecordOut]


class PaymentFailureResponse(BaseModel):
    success: bool = True
    message: str = "Payment marked as failed"
    data: PaymentRecordOut


class HashDebugRequest(BaseModel):
    key: str = ""
    txnid: str = ""
    amount: str = ""
    productinfo: str = ""
    firstname: str = ""
    email: str = ""
    salt: str = ""


class HashDebugResponse(BaseModel):
    success: bool = True
    hash_string: str
    hash: str


# ──────────────── Brochure ────────────────

class BrochureSubmitRequest(_FormInput):
    name: str = Field(..., min_length=1, max_length=128)
    email: str
    phone: str = Field(..., min_length=1, max_length=32)
    interest: str = Field(..., min_length=1, max_length=256)


class BrochureOut(_ApiOut):
    id: int
    name: str
    email: str
    phone: str
    interest: str
    created_at: datetime = Field(..., alias="createdAt")


class BrochureSubmitResponse(BaseModel):
    success: bool = True
    message: str = "Brochure request submitted successfully"
    data: BrochureOut


class BrochureListResponse(BaseModel):
    success: bool = True
    data: List[BrochureOut]


# ──────────────── Contact ────────────────

class ContactSubmitRequest(_FormInput):
    name: str = Field(..., min_length=1, max_length=128)
    email: str
    phone: Optional[str] = Field(None, max_length=32)
    subject: Optional[str] = Field(None, max_length=256)
    message: str = Field(..., min_length=1, max_length=5000)


class ContactOut(_ApiOut):
    id: int
    name: str
    email: str
    phone: Optional[str] = ""
    subject: str
    message: str
    created_at: datetime = Field(..., alias="createdAt")


class ContactSubmitResponse(BaseModel):
    success: bool = True
    message: str = "Contact form submitted successfully"


class ContactListResponse(BaseModel):
    success: bool = True
    data: List[ContactOut]


# ──────────────── Generic forms ────────────────

class FormSubmitRequest(_FormInput):
    name: str = Field(..., min_length=1, max_length=128)
    email: str
    phone: str = Field(..., min_length=1, max_length=32)
    whatsapp: Optional[str] = Field(None, max_length=32)
    form_type: str = Field(..., alias="formType", min_length=1, max_length=64)


class FormSubmitData(_ApiOut):
    id: int
    form_type: str = Field(..., alias="formType")
    submitted_at: datetime = Field(..., alias="submittedAt")


class FormSubmitResponse(BaseModel):
    success: bool = True
    message: str = "Form submitted successfully"
    data: FormSubmitData


# ──────────────── Generic ────────────────

class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    success: bool = False
    errors: List[FieldError]
