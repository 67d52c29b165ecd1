"""
Contact Service
Business logic for contact form submissions
"""
import html
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Union

from app.core.exceptions import ValidationError
from app.models import ContactSubmission
from app.schemas.common import utc_now_iso
from app.schemas.contact import ContactCreate, ContactSubmitted
from app.services.persistence import Page, PersistenceGateway
from app.utils.sanitizer import sanitize
from app.utils.validation import CONTACT_RULES, validate

logger = logging.getLogger(__name__)


def contact_reference(record_id: Union[int, str]) -> str:
    """Public reference quoted back to the sender, e.g. AF-42"""
    return f"AF-{str(record_id)[-8:].upper()}"


def today_range() -> tuple:
    """ISO bounds of the current UTC day"""
    start = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return start.strftime("%Y-%m-%dT%H:%M:%SZ"), end.strftime("%Y-%m-%dT%H:%M:%SZ")


class ContactService:
    """Validate, store and read contact submissions"""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    @staticmethod
    def prepare(raw: Mapping[str, Any]) -> ContactCreate:
        """
        Sanitize, validate and normalize raw form data

        Raises:
            ValidationError: With one entry per invalid field
        """
        data = sanitize(raw)
        errors = validate(data, CONTACT_RULES)
        if errors:
            raise ValidationError(errors)

        return ContactCreate(
            full_name=data["fullName"].strip(),
            email=data["email"].strip().lower(),
            contact=data["contact"].strip(),
            message=html.escape(data["message"].strip())
        )

    async def submit(self, raw: Mapping[str, Any]) -> ContactSubmitted:
        """
        Store a contact form submission

        Args:
            raw: Request body as received

        Returns:
            ContactSubmitted: id, submission time and public reference
        """
        contact = self.prepare(raw)
        row = await self.gateway.insert(ContactSubmission, contact.model_dump())

        logger.info(f"Contact form submitted successfully - ID: {row['id']}")
        return ContactSubmitted(
            id=row["id"],
            submittedAt=row.get("created_at") or utc_now_iso(),
            reference=contact_reference(row["id"])
        )

    async def list_contacts(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "created_at",
        sort_order: str = "desc"
    ) -> Page:
        return await self.gateway.list(ContactSubmission, page, limit, sort_by, sort_order)

    async def get_contact(self, contact_id: int) -> Dict[str, Any]:
        return await self.gateway.get(ContactSubmission, contact_id)

    async def update_status(self, contact_id: int, status: str) -> Dict[str, Any]:
        return await self.gateway.update(
            ContactSubmission,
            contact_id,
            {"status": status, "updated_at": utc_now_iso()}
        )

    async def get_stats(self) -> Dict[str, Any]:
        """Total submissions and submissions received today"""
        start, end = today_range()
        total = await self.gateway.count(ContactSubmission)
        today = await self.gateway.count(
            ContactSubmission,
            [("created_at", "gte", start), ("created_at", "lt", end)]
        )
        return {
            "total": total,
            "today": today,
            "lastUpdated": utc_now_iso()
        }
