"""Owner endpoints."""

from ..schemas.owner import Owner
from .base import ResourceClient


class OwnersClient(ResourceClient[Owner]):
    """Client for /Owners."""

    path = "/Owners"
    model = Owner
