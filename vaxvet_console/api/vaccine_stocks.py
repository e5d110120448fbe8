"""Vaccine stock endpoints."""

from ..schemas.vaccine import VaccineStock
from .base import ResourceClient


class VaccineStocksClient(ResourceClient[VaccineStock]):
    """Client for /VaccineStocks."""

    path = "/VaccineStocks"
    model = VaccineStock
