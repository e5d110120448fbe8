"""
VAXVET Console - administrative web console for a veterinary clinic.

Server-rendered screens for owners, pets, vaccines, vaccine stocks, vaccine
records, veterinarians and lookup codes, all backed by the clinic REST API.
"""

__version__ = "1.0.0"

from .main import create_app

__all__ = ["create_app"]
