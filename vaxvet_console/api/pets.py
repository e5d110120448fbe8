"""Pet endpoints."""

from typing import List

from ..schemas.pet import Pet
from .base import ResourceClient


class PetsClient(ResourceClient[Pet]):
    """Client for /Pets."""

    path = "/Pets"
    model = Pet

    async def get_by_owner_id(self, owner_id: int) -> List[Pet]:
        """Get the pets belonging to one owner."""
        data = await self.transport.request("GET", f"{self.path}/OwnerId/{owner_id}")
        return self._parse_list(data)
