"""
Clients for the clinic REST API, one module per entity.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import Settings
from .auth import AuthClient
from .base import ApiError, ApiTransport, ResourceClient, TokenProvider, unwrap_envelope
from .codes import CodesClient
from .owners import OwnersClient
from .pets import PetsClient
from .vaccine_records import VaccineRecordsClient
from .vaccine_stocks import VaccineStocksClient
from .vaccines import VaccinesClient
from .veterinarians import VeterinariansClient


@dataclass
class ApiClients:
    """Every entity client sharing one transport."""

    transport: ApiTransport
    auth: AuthClient
    owners: OwnersClient
    pets: PetsClient
    codes: CodesClient
    vaccines: VaccinesClient
    vaccine_stocks: VaccineStocksClient
    vaccine_records: VaccineRecordsClient
    veterinarians: VeterinariansClient

    @classmethod
    def create(
        cls,
        settings: Settings,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ApiClients":
        api = ApiTransport(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout,
            token_provider=token_provider,
            transport=transport,
        )
        return cls(
            transport=api,
            auth=AuthClient(api),
            owners=OwnersClient(api),
            pets=PetsClient(api),
            codes=CodesClient(api),
            vaccines=VaccinesClient(api),
            vaccine_stocks=VaccineStocksClient(api),
            vaccine_records=VaccineRecordsClient(api),
            veterinarians=VeterinariansClient(api),
        )

    async def aclose(self) -> None:
        await self.transport.aclose()


__all__ = [
    "ApiClients",
    "ApiError",
    "ApiTransport",
    "AuthClient",
    "CodesClient",
    "OwnersClient",
    "PetsClient",
    "ResourceClient",
    "VaccineRecordsClient",
    "VaccineStocksClient",
    "VaccinesClient",
    "VeterinariansClient",
    "unwrap_envelope",
]
