"""
Schema metadata and engine management
The API itself talks to Supabase over HTTP; a direct engine is only needed
when creating the schema with scripts/create_tables.py
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from typing import Optional

from app.config import settings

# Base class for models
Base = declarative_base()


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create an engine for the Supabase Postgres database

    Args:
        database_url: Connection string, defaults to settings.DATABASE_URL

    Raises:
        RuntimeError: If no connection string is configured
    """
    url = database_url or settings.DATABASE_URL
    if not url:
        raise RuntimeError("DATABASE_URL is not configured")

    connect_args = {}
    if url.startswith("postgresql"):
        connect_args = {
            "connect_timeout": 10,
            "sslmode": "require",
            "options": "-c timezone=utc"
        }

    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


def init_db(engine: Engine):
    """Create all tables that don't exist yet"""
    # Import all models here to ensure they're registered
    from app.models import contact, career_application
    Base.metadata.create_all(bind=engine, checkfirst=True)
