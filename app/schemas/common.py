"""
Uniform response envelope shared by every endpoint
"""
from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Any, List, Optional


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class FieldErrorDetail(BaseModel):
    """One violated validation rule"""
    field: str
    message: str
    value: Any = None


class ApiResponse(BaseModel):
    """Envelope: {success, message, data?, errors?}"""
    success: bool
    message: str
    data: Optional[Any] = None
    errors: Optional[List[FieldErrorDetail]] = None
    error: Optional[str] = Field(None, description="Underlying error detail, never sent in production")
    timestamp: str = Field(default_factory=utc_now_iso)

    def to_content(self) -> dict:
        """JSON body without the empty optional top-level keys"""
        content = self.model_dump(mode="json")
        return {key: value for key, value in content.items() if value is not None}

    @classmethod
    def ok(cls, message: str, data: Any = None) -> dict:
        """Success envelope ready for a JSONResponse"""
        return cls(success=True, message=message, data=data).to_content()


class Pagination(BaseModel):
    """Pagination metadata for admin list endpoints"""
    page: int
    limit: int
    total: int
    totalPages: int
