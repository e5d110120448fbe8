"""Code lookup endpoints, including the dropdown helpers."""

from typing import List

from ..schemas.code import Code, CodeSearch, CodeType, SelectOption
from .base import ResourceClient, parse_model

SPECIES_OPTIONS_PATH = "/Cache/Codes/Species/Options"


class CodesClient(ResourceClient[Code]):
    """Client for /Codes."""

    path = "/Codes"
    model = Code

    async def get_species_options(self) -> List[SelectOption]:
        """Get the species select list."""
        data = await self.transport.request("GET", SPECIES_OPTIONS_PATH)
        return [parse_model(SelectOption, item, SPECIES_OPTIONS_PATH) for item in data or []]

    async def get_breeds_by_species(self, species_id: int) -> List[Code]:
        """Get the breeds whose parent is the given species."""
        criteria = CodeSearch(code_type=CodeType.BREED.value, parent_id=species_id)
        return await self.search(criteria)
