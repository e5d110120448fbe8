"""
Notification modal dismissal.
"""

from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Request

from ..state import ConsoleState
from .dependencies import get_console, redirect

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post("/dismiss")
async def dismiss_notifications(request: Request, console: ConsoleState = Depends(get_console)):
    """Acknowledge every pending notification and return to the previous page."""
    console.inbox.drain()
    referer = urlsplit(request.headers.get("referer", ""))
    return redirect(referer.path or "/dashboard")
