"""
Dashboard screen.
"""

from html import escape

from fastapi import APIRouter, Depends

from ..api.base import ApiError
from ..cache import QueryTag
from ..schemas.auth import CurrentUser
from ..state import ConsoleState
from .dependencies import get_console, redirect, render, require_user

router = APIRouter(tags=["Dashboard"])


@router.get("/")
async def root():
    return redirect("/dashboard")


@router.get("/dashboard")
async def dashboard(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Entity totals."""
    clients = console.clients
    sources = [
        ("Total Owners", QueryTag.OWNERS, clients.owners),
        ("Total Pets", QueryTag.PETS, clients.pets),
        ("Vaccines", QueryTag.VACCINES, clients.vaccines),
        ("Records", QueryTag.VACCINE_RECORDS, clients.vaccine_records),
    ]

    cards = []
    for title, tag, client in sources:
        try:
            count = str(len(await console.cache.fetch(tag, client.get_all)))
        except ApiError:
            count = "-"
        cards.append(
            f'<div class="card"><div>{escape(title)}</div><h2>{escape(count)}</h2></div>'
        )

    content = (
        "<p>Welcome to VAXVET Management System</p>"
        f'<div class="cards">{"".join(cards)}</div>'
        f"<p>Signed in as {escape(user.user_name)}. Select a menu item to get started.</p>"
    )
    return render(console, "Dashboard", content)
