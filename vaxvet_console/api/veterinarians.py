"""Veterinarian endpoints."""

from loguru import logger

from ..schemas.veterinarian import Veterinarian
from .base import ResourceClient


class VeterinariansClient(ResourceClient[Veterinarian]):
    """
    Client for /Veterinarians.

    Veterinarian accounts are created through /Account/Register, so the
    console never calls `create` on this resource.
    """

    path = "/Veterinarians"
    model = Veterinarian

    async def activate(self, veterinarian_id: str) -> None:
        """Re-enable a veterinarian account."""
        await self.transport.request("POST", f"{self.path}/{veterinarian_id}/Activate")
        logger.info(f"Activated veterinarian {veterinarian_id}")

    async def deactivate(self, veterinarian_id: str) -> None:
        """Disable a veterinarian account."""
        await self.transport.request("POST", f"{self.path}/{veterinarian_id}/Deactivate")
        logger.info(f"Deactivated veterinarian {veterinarian_id}")
