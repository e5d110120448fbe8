"""Routers package for the VAXVET console screens."""

from .auth import router as auth_router
from .codes import router as codes_router
from .dashboard import router as dashboard_router
from .notifications import router as notifications_router
from .owners import router as owners_router
from .pets import router as pets_router
from .vaccine_records import router as vaccine_records_router
from .vaccine_stocks import router as vaccine_stocks_router
from .vaccines import router as vaccines_router
from .veterinarians import router as veterinarians_router

__all__ = [
    "auth_router",
    "codes_router",
    "dashboard_router",
    "notifications_router",
    "owners_router",
    "pets_router",
    "vaccine_records_router",
    "vaccine_stocks_router",
    "vaccines_router",
    "veterinarians_router",
]
