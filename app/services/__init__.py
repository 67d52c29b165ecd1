"""
Services for Africure Pharma API
"""
from app.services.supabase_client import SupabaseClient, BackendError, BackendUnavailable
from app.services.persistence import PersistenceGateway, Page
from app.services.storage_service import ResumeStorage
from app.services.rate_limiter import RateLimiter, InMemoryCounterStore
from app.services.contact_service import ContactService
from app.services.career_service import CareerService
from app.services.health_service import HealthService

__all__ = [
    "SupabaseClient", "BackendError", "BackendUnavailable",
    "PersistenceGateway", "Page", "ResumeStorage",
    "RateLimiter", "InMemoryCounterStore",
    "ContactService", "CareerService", "HealthService"
]
