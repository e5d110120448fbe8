"""Vaccine record endpoints."""

from ..schemas.vaccine import VaccineRecord
from .base import ResourceClient


class VaccineRecordsClient(ResourceClient[VaccineRecord]):
    """Client for /VaccineRecords."""

    path = "/VaccineRecords"
    model = VaccineRecord
