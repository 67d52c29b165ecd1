"""
Contact form submission model
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, CheckConstraint
from sqlalchemy.sql import func

from app.database import Base

CONTACT_STATUSES = ("new", "read", "replied", "archived")


class ContactSubmission(Base):
    """A message posted through the website contact form"""
    __tablename__ = "Contact_Us"
    __table_args__ = (
        CheckConstraint(
            f"status IN ({', '.join(repr(s) for s in CONTACT_STATUSES)})",
            name="contact_us_status_check"
        ),
    )

    # Privileged insert used when row-level security rejects the public key
    __insert_procedure__ = "insert_contact_submission"
    __procedure_arg__ = "contact_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column("Full_Name", String(255), nullable=False)
    email = Column("Email_id", String(255), nullable=False, index=True)
    contact = Column("Contact", String(20), nullable=False)
    message = Column("Enter_Message", Text, nullable=False)
    status = Column(String(20), nullable=False, default="new", server_default="new")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ContactSubmission {self.id} - {self.email}>"
