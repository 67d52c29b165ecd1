"""
Pydantic schemas for admin authentication
"""
from pydantic import BaseModel, EmailStr


class AdminLogin(BaseModel):
    """Schema for admin login"""
    email: EmailStr
    password: str


class Token(BaseModel):
    """Schema for JWT token response"""
    access_token: str
    token_type: str = "bearer"
