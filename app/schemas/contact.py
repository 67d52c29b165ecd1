"""
Pydantic schemas for contact submissions
"""
from pydantic import BaseModel, field_validator
from typing import Union

from app.models.contact import CONTACT_STATUSES


class ContactCreate(BaseModel):
    """Validated, sanitized and normalized contact form data"""
    full_name: str
    email: str
    contact: str
    message: str


class ContactSubmitted(BaseModel):
    """Data returned after a successful contact submission"""
    id: Union[int, str]
    submittedAt: str
    reference: str


class ContactStatusUpdate(BaseModel):
    """Admin status change for a contact submission"""
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        """Must be one of the statuses the table's CHECK constraint allows"""
        if v not in CONTACT_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(CONTACT_STATUSES)}")
        return v
