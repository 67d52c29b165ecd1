"""
Pydantic schemas for Africure Pharma API
"""
from app.schemas.common import ApiResponse, FieldErrorDetail, Pagination
from app.schemas.contact import (
    ContactCreate, ContactSubmitted, ContactStatusUpdate
)
from app.schemas.career import (
    POSITIONS, EXPERIENCE_RANGES, QUALIFICATIONS,
    PositionOption, CareerApplicationCreate, ApplicationSubmitted,
    ApplicationStatusUpdate, ResumeReference
)
from app.schemas.auth import AdminLogin, Token

__all__ = [
    # Envelope schemas
    "ApiResponse", "FieldErrorDetail", "Pagination",
    # Contact schemas
    "ContactCreate", "ContactSubmitted", "ContactStatusUpdate",
    # Career schemas
    "POSITIONS", "EXPERIENCE_RANGES", "QUALIFICATIONS",
    "PositionOption", "CareerApplicationCreate", "ApplicationSubmitted",
    "ApplicationStatusUpdate", "ResumeReference",
    # Auth schemas
    "AdminLogin", "Token"
]
