"""
Career application model
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, Boolean, CheckConstraint
from sqlalchemy.sql import func

from app.database import Base

APPLICATION_STATUSES = ("pending", "reviewing", "shortlisted", "interviewed", "hired", "rejected")


class CareerApplication(Base):
    """Job application submitted through the careers page"""
    __tablename__ = "Career_Applications"
    __table_args__ = (
        CheckConstraint(
            f"application_status IN ({', '.join(repr(s) for s in APPLICATION_STATUSES)})",
            name="career_applications_status_check"
        ),
    )

    __insert_procedure__ = "insert_career_application"
    __procedure_arg__ = "application_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), nullable=False)
    location = Column(String(100), nullable=False)
    position = Column(String(50), nullable=False, index=True)
    experience = Column(String(10), nullable=False)
    qualification = Column(String(20), nullable=False)
    cover_letter = Column(Text)
    resume_url = Column(Text)
    resume_file_name = Column(String(255))
    consent_given = Column(Boolean, nullable=False, default=False, server_default="false")
    application_status = Column(String(20), nullable=False, default="pending", server_default="pending", index=True)
    # Internal notes for the HR team
    admin_notes = Column(Text)
    application_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<CareerApplication {self.id} - {self.position} - {self.application_status}>"
