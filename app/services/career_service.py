"""
Career Service
Business logic for career applications and resume uploads
"""
import logging
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional

from starlette.datastructures import UploadFile

from app.config import Settings
from app.core.exceptions import PersistenceError, ValidationError
from app.models import CareerApplication
from app.schemas.career import (
    EXPERIENCE_RANGES, POSITIONS, QUALIFICATIONS,
    ApplicationSubmitted, CareerApplicationCreate, PositionOption, ResumeReference
)
from app.schemas.common import utc_now_iso
from app.services.contact_service import today_range
from app.services.persistence import Filter, Page, PersistenceGateway
from app.services.storage_service import ResumeStorage
from app.utils.file_handler import read_upload_file
from app.utils.sanitizer import sanitize
from app.utils.validation import FieldError, career_rules, validate

logger = logging.getLogger(__name__)

CAREER_RULES = career_rules(list(POSITIONS), EXPERIENCE_RANGES, QUALIFICATIONS)


def application_number(application_id: int) -> str:
    """Human-readable number, e.g. AC-000042"""
    return f"AC-{int(application_id):06d}"


class CareerService:
    """Validate, store and read career applications"""

    def __init__(self, gateway: PersistenceGateway, storage: ResumeStorage, settings: Settings):
        self.gateway = gateway
        self.storage = storage
        self.settings = settings

    @staticmethod
    def get_positions() -> List[PositionOption]:
        return [PositionOption(value=value, label=label) for value, label in POSITIONS.items()]

    @staticmethod
    def prepare(raw: Mapping[str, Any], resume: Optional[UploadFile]) -> CareerApplicationCreate:
        """
        Sanitize, validate and normalize the form fields

        Raises:
            ValidationError: With one entry per invalid field, including a
                missing resume
        """
        data = sanitize(raw)
        errors = validate(data, CAREER_RULES)
        if resume is None:
            errors.append(FieldError("resume", "Please upload your resume (PDF, DOC, or DOCX format)"))
        if errors:
            raise ValidationError(errors)

        cover_letter = (data.get("coverLetter") or "").strip()
        return CareerApplicationCreate(
            full_name=data["fullName"].strip(),
            email=data["email"].strip().lower(),
            phone=data["phone"].strip(),
            location=data["location"].strip(),
            position=data["position"].strip(),
            experience=data["experience"].strip(),
            qualification=data["qualification"].strip(),
            cover_letter=cover_letter or None,
            consent=True
        )

    async def submit(self, raw: Mapping[str, Any], resume: Optional[UploadFile]) -> ApplicationSubmitted:
        """
        Store a career application with its resume

        The resume is only read and uploaded once every form field passed
        validation. If the row cannot be stored afterwards the uploaded file
        is deleted again.

        Args:
            raw: Form fields as received
            resume: The single uploaded file, if any

        Returns:
            ApplicationSubmitted: Application number, id and status
        """
        application = self.prepare(raw, resume)

        accepted = await read_upload_file(
            resume,
            max_size=self.settings.MAX_RESUME_SIZE,
            allowed_types=self.settings.allowed_resume_types
        )
        reference = await self.storage.upload(accepted)

        try:
            row = await self.gateway.insert(CareerApplication, self._values(application, reference))
        except PersistenceError:
            removed = await self.storage.delete(reference.storage_path)
            logger.error(
                f"Career application insert failed; orphaned resume "
                f"{reference.storage_path} {'removed' if removed else 'left in storage'}"
            )
            raise

        logger.info(
            f"Career application submitted successfully - ID: {row['id']}, Position: {row.get('position')}"
        )
        return ApplicationSubmitted(
            applicationNumber=application_number(row["id"]),
            id=row["id"],
            submittedAt=row.get("application_date"),
            position=row.get("position", application.position),
            status=row.get("application_status", "pending")
        )

    @staticmethod
    def _values(application: CareerApplicationCreate, resume: ResumeReference) -> Dict[str, Any]:
        return {
            "full_name": application.full_name,
            "email": application.email,
            "phone": application.phone,
            "location": application.location,
            "position": application.position,
            "experience": application.experience,
            "qualification": application.qualification,
            "cover_letter": application.cover_letter,
            "resume_url": resume.url,
            "resume_file_name": resume.file_name,
            "consent_given": application.consent,
            "application_status": "pending",
            "application_date": utc_now_iso()
        }

    async def list_applications(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "application_date",
        sort_order: str = "desc",
        status: Optional[str] = None,
        position: Optional[str] = None
    ) -> Page:
        filters: List[Filter] = []
        if status:
            filters.append(("application_status", "eq", status))
        if position:
            filters.append(("position", "eq", position))
        return await self.gateway.list(CareerApplication, page, limit, sort_by, sort_order, filters)

    async def get_application(self, application_id: int) -> Dict[str, Any]:
        return await self.gateway.get(CareerApplication, application_id)

    async def update_status(self, application_id: int, status: str, notes: Optional[str] = None) -> Dict[str, Any]:
        """Move an application to another status, optionally replacing the notes"""
        values = {"application_status": status, "updated_at": utc_now_iso()}
        if notes:
            values["admin_notes"] = notes
        row = await self.gateway.update(CareerApplication, application_id, values)
        logger.info(f"Career application {application_id} moved to {status}")
        return row

    async def get_stats(self) -> Dict[str, Any]:
        """Totals, today's count and a per-status breakdown"""
        start, end = today_range()
        total = await self.gateway.count(CareerApplication)
        today = await self.gateway.count(
            CareerApplication,
            [("application_date", "gte", start), ("application_date", "lt", end)]
        )
        statuses = await self.gateway.select_column(CareerApplication, "application_status")
        return {
            "total": total,
            "today": today,
            "statusBreakdown": dict(Counter(statuses)),
            "lastUpdated": utc_now_iso()
        }
