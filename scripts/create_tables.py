#!/usr/bin/env python3
"""
Create the Supabase schema for the forms API:
- Contact_Us and Career_Applications tables
- row-level security policies for the anon / authenticated roles
- SECURITY DEFINER insert procedures used when a direct insert is denied

Usage:
    DATABASE_URL=postgresql://... python scripts/create_tables.py
"""
import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect, text

from app.database import get_engine, init_db
from app.models import CareerApplication, ContactSubmission

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

POLICY_STATEMENTS = [
    'ALTER TABLE "Contact_Us" ENABLE ROW LEVEL SECURITY',
    'ALTER TABLE "Career_Applications" ENABLE ROW LEVEL SECURITY',
    'DROP POLICY IF EXISTS "Anyone can submit contact forms" ON "Contact_Us"',
    'CREATE POLICY "Anyone can submit contact forms" ON "Contact_Us" FOR INSERT WITH CHECK (true)',
    'DROP POLICY IF EXISTS "Authenticated users can read contacts" ON "Contact_Us"',
    'CREATE POLICY "Authenticated users can read contacts" ON "Contact_Us" '
    "FOR SELECT USING (auth.role() = 'authenticated')",
    'DROP POLICY IF EXISTS "Anyone can submit career applications" ON "Career_Applications"',
    'CREATE POLICY "Anyone can submit career applications" ON "Career_Applications" '
    'FOR INSERT WITH CHECK (true)',
    'DROP POLICY IF EXISTS "Authenticated users can read applications" ON "Career_Applications"',
    'CREATE POLICY "Authenticated users can read applications" ON "Career_Applications" '
    "FOR SELECT USING (auth.role() = 'authenticated')",
    'DROP POLICY IF EXISTS "Authenticated users can update applications" ON "Career_Applications"',
    'CREATE POLICY "Authenticated users can update applications" ON "Career_Applications" '
    "FOR UPDATE USING (auth.role() = 'authenticated')",
    'GRANT SELECT, INSERT ON "Contact_Us", "Career_Applications" TO anon',
    'GRANT ALL ON "Contact_Us", "Career_Applications" TO authenticated',
    'GRANT USAGE, SELECT ON SEQUENCE "Contact_Us_id_seq", "Career_Applications_id_seq" TO anon, authenticated',
]

INSERT_CONTACT_PROCEDURE = """
CREATE OR REPLACE FUNCTION insert_contact_submission(contact_data jsonb)
RETURNS SETOF "Contact_Us"
SECURITY DEFINER
SET search_path = public
LANGUAGE plpgsql
AS $$
BEGIN
    RETURN QUERY
    INSERT INTO "Contact_Us" ("Full_Name", "Email_id", "Contact", "Enter_Message")
    VALUES (
        (contact_data->>'Full_Name')::varchar(255),
        (contact_data->>'Email_id')::varchar(255),
        (contact_data->>'Contact')::varchar(20),
        (contact_data->>'Enter_Message')::text
    )
    RETURNING *;
END;
$$
"""

INSERT_CAREER_PROCEDURE = """
CREATE OR REPLACE FUNCTION insert_career_application(application_data jsonb)
RETURNS SETOF "Career_Applications"
SECURITY DEFINER
SET search_path = public
LANGUAGE plpgsql
AS $$
BEGIN
    RETURN QUERY
    INSERT INTO "Career_Applications" (
        full_name, email, phone, location, position, experience,
        qualification, cover_letter, resume_url, resume_file_name,
        consent_given, application_status, application_date
    )
    VALUES (
        (application_data->>'full_name')::varchar(100),
        (application_data->>'email')::varchar(255),
        (application_data->>'phone')::varchar(20),
        (application_data->>'location')::varchar(100),
        (application_data->>'position')::varchar(50),
        (application_data->>'experience')::varchar(10),
        (application_data->>'qualification')::varchar(20),
        (application_data->>'cover_letter')::text,
        (application_data->>'resume_url')::text,
        (application_data->>'resume_file_name')::varchar(255),
        COALESCE((application_data->>'consent_given')::boolean, false),
        COALESCE((application_data->>'application_status')::varchar(20), 'pending'),
        COALESCE((application_data->>'application_date')::timestamptz, now())
    )
    RETURNING *;
END;
$$
"""

PROCEDURE_GRANTS = [
    "GRANT EXECUTE ON FUNCTION insert_contact_submission(jsonb) TO anon, authenticated",
    "GRANT EXECUTE ON FUNCTION insert_career_application(jsonb) TO anon, authenticated",
]


def create_tables() -> bool:
    """Create tables, policies and procedures; safe to run repeatedly"""
    engine = get_engine()

    try:
        init_db(engine)

        with engine.begin() as conn:
            for statement in POLICY_STATEMENTS:
                conn.execute(text(statement))
            conn.execute(text(INSERT_CONTACT_PROCEDURE))
            conn.execute(text(INSERT_CAREER_PROCEDURE))
            for statement in PROCEDURE_GRANTS:
                conn.execute(text(statement))

        inspector = inspect(engine)
        for model in (ContactSubmission, CareerApplication):
            columns = inspector.get_columns(model.__tablename__)
            logger.info(f"{model.__tablename__}: {', '.join(c['name'] for c in columns)}")

        logger.info("Schema created successfully")
        return True

    except Exception as e:
        logger.error(f"Error creating schema: {e}", exc_info=True)
        return False


if __name__ == "__main__":
    success = create_tables()
    sys.exit(0 if success else 1)
