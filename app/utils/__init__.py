"""
Utility functions for Africure Pharma API
"""
from app.utils.security import (
    verify_password, get_password_hash, authenticate_admin,
    create_access_token, verify_token
)
from app.utils.sanitizer import sanitize
from app.utils.validation import FieldError, validate, CONTACT_RULES, career_rules

__all__ = [
    "verify_password", "get_password_hash", "authenticate_admin",
    "create_access_token", "verify_token",
    "sanitize",
    "FieldError", "validate", "CONTACT_RULES", "career_rules"
]
