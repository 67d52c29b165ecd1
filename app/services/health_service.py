"""
Health Service
Reachability checks against the Supabase backend
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Tuple

from app.config import Settings
from app.models import ContactSubmission
from app.schemas.common import utc_now_iso
from app.services.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


class HealthService:
    """Report whether the API can reach its database"""

    def __init__(
        self,
        gateway: PersistenceGateway,
        settings: Settings,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.gateway = gateway
        self.settings = settings
        self.sleep = sleep

    async def check(self) -> Tuple[int, Dict[str, Any]]:
        """
        Single probe of the backend

        Returns:
            Tuple[int, Dict]: HTTP status (200 or 503) and the health report
        """
        connected = await self.gateway.ping(ContactSubmission)
        report = {
            "status": "healthy" if connected else "degraded",
            "timestamp": utc_now_iso(),
            "services": {
                "database": "up" if connected else "down",
                "api": "up"
            },
            "environment": self.settings.ENVIRONMENT,
            "version": self.settings.VERSION
        }
        return (200 if connected else 503), report

    async def test_connection(self) -> Dict[str, Any]:
        """
        Probe the backend, retrying a few times before giving up

        Returns:
            Dict: {connected, timestamp, database}
        """
        attempts = max(1, self.settings.CONNECTION_RETRIES)
        connected = False
        for attempt in range(1, attempts + 1):
            connected = await self.gateway.ping(ContactSubmission)
            if connected:
                logger.info("Supabase connection successful")
                break
            if attempt < attempts:
                logger.warning(f"Retrying Supabase connection... ({attempt}/{attempts})")
                await self.sleep(self.settings.CONNECTION_RETRY_DELAY_SECONDS)

        return {
            "connected": connected,
            "timestamp": utc_now_iso(),
            "database": "Supabase"
        }
