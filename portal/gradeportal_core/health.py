import asyncio
import logging

from .errors import GradePortalError
from .notifications import NotificationCenter

logger = logging.getLogger(__name__)

UNREACHABLE_WARNING = "Warning: Unable to connect to backend. Some features may be unavailable."


class HealthProbe:
    """Best-effort startup check. Only ever warns; never blocks the form."""

    def __init__(self, client, notifications: NotificationCenter):
        self.client = client
        self.notifications = notifications

    async def run(self) -> bool:
        try:
            health = await asyncio.to_thread(self.client.check_health)
        except GradePortalError as e:
            logger.warning(f"Backend health check failed: {e.message}")
            self.notifications.error(UNREACHABLE_WARNING)
            return False

        if not health.healthy:
            logger.warning(f"Backend reported status {health.status!r}")
            self.notifications.error(UNREACHABLE_WARNING)
            return False

        logger.info("Backend connection healthy")
        logger.info(f"Features available: {health.features}")
        return True
