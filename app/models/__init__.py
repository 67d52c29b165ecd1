"""
Database models for Africure Pharma API
"""
from app.models.contact import ContactSubmission, CONTACT_STATUSES
from app.models.career_application import CareerApplication, APPLICATION_STATUSES

__all__ = [
    "ContactSubmission", "CONTACT_STATUSES",
    "CareerApplication", "APPLICATION_STATUSES"
]
