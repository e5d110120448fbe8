"""Vaccine endpoints."""

from ..schemas.vaccine import Vaccine
from .base import ResourceClient


class VaccinesClient(ResourceClient[Vaccine]):
    """Client for /Vaccines."""

    path = "/Vaccines"
    model = Vaccine
