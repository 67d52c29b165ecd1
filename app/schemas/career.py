"""
Pydantic schemas for career applications
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.models.career_application import APPLICATION_STATUSES

# value -> label, in the order shown on the careers page
POSITIONS = {
    "supply-chain": "Supply Chain Dy. Managers",
    "executive-ceo": "Executive Assistant to CEO",
    "executive-directors": "Executive Assistant to Directors",
    "manager-ehs": "Manager - EHS",
    "manager-hrd": "Manager HRD",
    "manager-accounts": "Manager Accounts",
    "manager-regulatory": "Manager Regulatory Affairs",
    "manager-procurement": "Manager – API Procurement",
    "trainee-procurement": "Trainee- Procurement",
    "business-development": "Business Development Manager",
    "manager-engineering": "Manager-Engineering",
    "deputy-qa": "Deputy Manager-QA Validation",
    "other": "Other",
}

EXPERIENCE_RANGES = ("0-1", "2-3", "4-5", "6-7", "8-10", "10+")

QUALIFICATIONS = ("bpharm", "mpharm", "mba", "bsc", "msc", "bcom", "mcom", "ca", "engineering", "other")


class PositionOption(BaseModel):
    """Entry of the positions dropdown"""
    value: str
    label: str


class ResumeReference(BaseModel):
    """Where an uploaded resume ended up"""
    url: str
    file_name: str
    storage_path: str


class CareerApplicationCreate(BaseModel):
    """Validated, sanitized and normalized career application"""
    full_name: str
    email: str
    phone: str
    location: str
    position: str
    experience: str
    qualification: str
    cover_letter: Optional[str] = None
    consent: bool


class ApplicationSubmitted(BaseModel):
    """Data returned after a successful application"""
    applicationNumber: str
    id: int
    submittedAt: Optional[str] = None
    position: str
    status: str


class ApplicationStatusUpdate(BaseModel):
    """Admin status change for a career application"""
    status: str
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        """Must be one of the statuses the table's CHECK constraint allows"""
        if v not in APPLICATION_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(APPLICATION_STATUSES)}")
        return v
