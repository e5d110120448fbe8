"""
Veterinarian account screens.

Accounts are created through registration; here they can be searched,
viewed, edited, activated or deactivated and deleted.
"""

from typing import Mapping, Optional

from fastapi import APIRouter, Depends, Request, status

from ..cache import QueryTag
from ..forms import VETERINARIAN_RULES, build_search, model_to_form, process_form
from ..schemas.auth import CurrentUser
from ..schemas.veterinarian import Veterinarian, VeterinarianSearch, VeterinarianUpdate
from ..search import search_or_get_all
from ..state import ConsoleState
from ..utils.helpers import format_date
from ..views import components
from .dependencies import (
    get_console,
    get_entity,
    load_or_error,
    read_form,
    redirect,
    render,
    require_user,
    run_mutation,
)

router = APIRouter(prefix="/veterinarians", tags=["Veterinarians"])

VETERINARIAN_TAGS = (QueryTag.VETERINARIANS,)


def status_label(veterinarian: Veterinarian) -> str:
    if veterinarian.is_active is None:
        return "-"
    return "Active" if veterinarian.is_active else "Inactive"


def toggle_button(veterinarian: Veterinarian) -> str:
    """Activate/deactivate button for a list row."""
    if veterinarian.is_active is False:
        action, label = "activate", "Activate"
    else:
        action, label = "deactivate", "Deactivate"
    return (
        f'<form method="post" action="/veterinarians/{components.escape(veterinarian.id)}/{action}" '
        f'style="display:inline"><button type="submit">{label}</button></form>'
    )


def veterinarian_form(
    action: str,
    values: Mapping[str, str],
    errors: Mapping[str, str],
    error: Optional[str] = None,
) -> str:
    fields = (
        components.text_input("firstName", "First Name", values, errors, required=True)
        + components.text_input("lastName", "Last Name", values, errors, required=True)
        + components.text_input("licenseNumber", "License Number", values, errors)
        + components.hidden_input("version", values.get("version", "0"))
    )
    return (
        components.alert(error or errors.get("__all__"))
        + components.form(action, fields, "Update", cancel_href="/veterinarians")
    )


def veterinarian_row(veterinarian: Veterinarian) -> list:
    label = status_label(veterinarian)
    return [
        components.link(f"/veterinarians/{veterinarian.id}", veterinarian.user_name),
        components.escape(veterinarian.full_name),
        components.escape(veterinarian.license_number or "-"),
        components.chip(label) if label != "-" else "-",
        components.escape(format_date(veterinarian.created_at)),
        components.row_actions("/veterinarians", veterinarian.id, detail=True) + " " + toggle_button(veterinarian),
    ]


@router.get("")
async def list_veterinarians(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    search = console.searches.get(QueryTag.VETERINARIANS, VeterinarianSearch)
    veterinarians, error = await load_or_error(
        lambda: search_or_get_all(
            console.clients.veterinarians, console.cache, QueryTag.VETERINARIANS, search.active
        ),
        default=[],
    )

    values = model_to_form(search.draft)
    filters = (
        components.text_input("userName", "Username", values, {})
        + components.text_input("firstName", "First Name", values, {})
        + components.text_input("lastName", "Last Name", values, {})
        + components.text_input("licenseNumber", "License Number", values, {})
    )
    content = (
        components.alert(error)
        + components.search_form("/veterinarians/search", filters)
        + components.table(
            ["Username", "Name", "License", "Status", "Created", "Actions"],
            [veterinarian_row(veterinarian) for veterinarian in veterinarians],
        )
    )
    return render(console, "Veterinarians", content)


@router.post("/search")
async def search_veterinarians(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    search = console.searches.get(QueryTag.VETERINARIANS, VeterinarianSearch)
    search.update_draft(build_search(VeterinarianSearch, await read_form(request)))
    search.submit()
    return redirect("/veterinarians")


@router.post("/search/clear")
async def clear_veterinarian_search(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    console.searches.get(QueryTag.VETERINARIANS, VeterinarianSearch).clear()
    return redirect("/veterinarians")


@router.get("/edit/{veterinarian_id}")
async def edit_veterinarian_page(
    veterinarian_id: str,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    veterinarian, error = await load_or_error(
        lambda: get_entity(console, QueryTag.VETERINARIANS, console.clients.veterinarians, veterinarian_id)
    )
    if veterinarian is None:
        return render(
            console, "Edit Veterinarian", components.alert(error or "Veterinarian not found"),
            status.HTTP_404_NOT_FOUND,
        )

    action = f"/veterinarians/edit/{veterinarian_id}"
    return render(console, "Edit Veterinarian", veterinarian_form(action, model_to_form(veterinarian), {}))


@router.post("/edit/{veterinarian_id}")
async def update_veterinarian(
    veterinarian_id: str,
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    data = await read_form(request)
    action = f"/veterinarians/edit/{veterinarian_id}"
    payload, errors = process_form(VeterinarianUpdate, data, VETERINARIAN_RULES)
    if payload is None:
        return render(
            console,
            "Edit Veterinarian",
            veterinarian_form(action, data, errors),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.veterinarians.update(veterinarian_id, payload),
        VETERINARIAN_TAGS,
        "Failed to update veterinarian. Please try again.",
    )
    if error:
        return render(console, "Edit Veterinarian", veterinarian_form(action, data, {}, error))
    return redirect("/veterinarians")


@router.post("/{veterinarian_id}/activate")
async def activate_veterinarian(
    veterinarian_id: str,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    error = await run_mutation(
        console,
        lambda: console.clients.veterinarians.activate(veterinarian_id),
        VETERINARIAN_TAGS,
        "Failed to activate veterinarian.",
    )
    if error:
        return render(console, "Veterinarians", components.alert(error) + components.link("/veterinarians", "Back"))
    return redirect("/veterinarians")


@router.post("/{veterinarian_id}/deactivate")
async def deactivate_veterinarian(
    veterinarian_id: str,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    error = await run_mutation(
        console,
        lambda: console.clients.veterinarians.deactivate(veterinarian_id),
        VETERINARIAN_TAGS,
        "Failed to deactivate veterinarian.",
    )
    if error:
        return render(console, "Veterinarians", components.alert(error) + components.link("/veterinarians", "Back"))
    return redirect("/veterinarians")


@router.get("/{veterinarian_id}/delete")
async def confirm_delete_veterinarian(
    veterinarian_id: str,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    veterinarian, error = await load_or_error(
        lambda: get_entity(console, QueryTag.VETERINARIANS, console.clients.veterinarians, veterinarian_id)
    )
    name = (veterinarian.full_name or veterinarian.user_name) if veterinarian else veterinarian_id
    content = components.confirm_delete(
        "veterinarian", name, f"/veterinarians/{veterinarian_id}/delete", "/veterinarians", error
    )
    return render(console, "Delete Veterinarian", content)


@router.post("/{veterinarian_id}/delete")
async def delete_veterinarian(
    veterinarian_id: str,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    error = await run_mutation(
        console,
        lambda: console.clients.veterinarians.delete(veterinarian_id),
        VETERINARIAN_TAGS,
        "Failed to delete veterinarian. Please try again.",
    )
    if error:
        content = components.confirm_delete(
            "veterinarian", veterinarian_id, f"/veterinarians/{veterinarian_id}/delete", "/veterinarians", error
        )
        return render(console, "Delete Veterinarian", content)
    return redirect("/veterinarians")


@router.get("/{veterinarian_id}")
async def veterinarian_detail(
    veterinarian_id: str,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    veterinarian, error = await load_or_error(
        lambda: get_entity(console, QueryTag.VETERINARIANS, console.clients.veterinarians, veterinarian_id)
    )
    if veterinarian is None:
        return render(
            console, "Veterinarian", components.alert(error or "Veterinarian not found"),
            status.HTTP_404_NOT_FOUND,
        )

    info = components.details([
        ("Username", veterinarian.user_name),
        ("First Name", veterinarian.first_name),
        ("Last Name", veterinarian.last_name),
        ("License Number", veterinarian.license_number or ""),
        ("Status", status_label(veterinarian)),
        ("Created", format_date(veterinarian.created_at)),
    ])
    content = (
        f"<p>{components.link(f'/veterinarians/edit/{veterinarian_id}', 'Edit')} | "
        f"{components.link('/veterinarians', 'Back')}</p>"
        + info
    )
    return render(console, veterinarian.full_name or veterinarian.user_name, content)
