"""
Owner screens: list/search, detail with pets, create, edit and delete.
"""

from typing import Mapping, Optional

from fastapi import APIRouter, Depends, Request, status

from ..cache import QueryTag
from ..forms import OWNER_RULES, build_search, model_to_form, process_form
from ..schemas.auth import CurrentUser
from ..schemas.owner import Owner, OwnerCreate, OwnerSearch, OwnerUpdate
from ..search import search_or_get_all
from ..state import ConsoleState
from ..utils.helpers import format_date, gender_label, truncate
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

router = APIRouter(prefix="/owners", tags=["Owners"])

# Pet and record rows show owner names.
OWNER_TAGS = (QueryTag.OWNERS, QueryTag.PETS, QueryTag.VACCINE_RECORDS)
DELETE_TAGS = (QueryTag.OWNERS, QueryTag.PETS, QueryTag.PETS_BY_OWNER, QueryTag.VACCINE_RECORDS)


def owner_fields(values: Mapping[str, str], errors: Mapping[str, str]) -> str:
    return (
        components.text_input("firstName", "First Name", values, errors, required=True)
        + components.text_input("lastName", "Last Name", values, errors, required=True)
        + components.text_input("tcKimlikNo", "TC Kimlik No", values, errors, required=True)
        + components.text_input("phoneNumber", "Phone Number", values, errors, required=True)
        + components.text_input("address", "Address", values, errors, required=True)
        + components.text_input("emergencyPerson", "Emergency Contact", values, errors)
        + components.text_input("emergencyPhone", "Emergency Phone", values, errors)
    )


def owner_form(
    action: str,
    values: Mapping[str, str],
    errors: Mapping[str, str],
    submit_label: str,
    error: Optional[str] = None,
) -> str:
    fields = owner_fields(values, errors)
    if "version" in values:
        fields += components.hidden_input("version", values["version"])
    return (
        components.alert(error or errors.get("__all__"))
        + components.form(action, fields, submit_label, cancel_href="/owners")
    )


def owner_row(owner: Owner) -> list:
    return [
        components.link(f"/owners/{owner.id}", owner.full_name),
        components.escape(owner.national_id),
        components.escape(owner.phone_number),
        components.escape(truncate(owner.address)),
        components.escape(format_date(owner.created_at)),
        components.row_actions("/owners", owner.id, detail=True),
    ]


@router.get("")
async def list_owners(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Owner list filtered by the active search."""
    search = console.searches.get(QueryTag.OWNERS, OwnerSearch)
    owners, error = await load_or_error(
        lambda: search_or_get_all(console.clients.owners, console.cache, QueryTag.OWNERS, search.active),
        default=[],
    )

    values = model_to_form(search.draft)
    filters = (
        components.text_input("firstName", "First Name", values, {})
        + components.text_input("lastName", "Last Name", values, {})
        + components.text_input("tcKimlikNo", "TC Kimlik No", values, {})
        + components.text_input("phoneNumber", "Phone", values, {})
    )
    content = (
        components.alert(error)
        + f"<p>{components.link('/owners/create', 'Add Owner')}</p>"
        + components.search_form("/owners/search", filters)
        + components.table(
            ["Name", "TC Kimlik No", "Phone", "Address", "Created", "Actions"],
            [owner_row(owner) for owner in owners],
        )
    )
    return render(console, "Owners", content)


@router.post("/search")
async def search_owners(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    search = console.searches.get(QueryTag.OWNERS, OwnerSearch)
    search.update_draft(build_search(OwnerSearch, await read_form(request)))
    search.submit()
    return redirect("/owners")


@router.post("/search/clear")
async def clear_owner_search(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    console.searches.get(QueryTag.OWNERS, OwnerSearch).clear()
    return redirect("/owners")


@router.get("/create")
async def create_owner_page(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    return render(console, "Add Owner", owner_form("/owners/create", {}, {}, "Create"))


@router.post("/create")
async def create_owner(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Validate and create an owner."""
    data = await read_form(request)
    payload, errors = process_form(OwnerCreate, data, OWNER_RULES)
    if payload is None:
        return render(
            console,
            "Add Owner",
            owner_form("/owners/create", data, errors, "Create"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.owners.create(payload),
        OWNER_TAGS,
        "Failed to create owner. Please try again.",
    )
    if error:
        return render(console, "Add Owner", owner_form("/owners/create", data, {}, "Create", error))
    return redirect("/owners")


@router.get("/edit/{owner_id}")
async def edit_owner_page(
    owner_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    owner, error = await load_or_error(
        lambda: get_entity(console, QueryTag.OWNERS, console.clients.owners, owner_id)
    )
    if owner is None:
        return render(console, "Edit Owner", components.alert(error or "Owner not found"), status.HTTP_404_NOT_FOUND)

    action = f"/owners/edit/{owner_id}"
    return render(console, "Edit Owner", owner_form(action, model_to_form(owner), {}, "Update"))


@router.post("/edit/{owner_id}")
async def update_owner(
    owner_id: int,
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Validate and update an owner."""
    data = await read_form(request)
    action = f"/owners/edit/{owner_id}"
    payload, errors = process_form(OwnerUpdate, data, OWNER_RULES)
    if payload is None:
        return render(
            console,
            "Edit Owner",
            owner_form(action, data, errors, "Update"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.owners.update(owner_id, payload),
        OWNER_TAGS,
        "Failed to update owner. Please try again.",
    )
    if error:
        return render(console, "Edit Owner", owner_form(action, data, {}, "Update", error))
    return redirect("/owners")


@router.get("/{owner_id}/delete")
async def confirm_delete_owner(
    owner_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    owner, error = await load_or_error(
        lambda: get_entity(console, QueryTag.OWNERS, console.clients.owners, owner_id)
    )
    name = owner.full_name if owner else f"#{owner_id}"
    content = components.confirm_delete("owner", name, f"/owners/{owner_id}/delete", "/owners", error)
    return render(console, "Delete Owner", content)


@router.post("/{owner_id}/delete")
async def delete_owner(
    owner_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    error = await run_mutation(
        console,
        lambda: console.clients.owners.delete(owner_id),
        DELETE_TAGS,
        "Failed to delete owner. Please try again.",
    )
    if error:
        content = components.confirm_delete("owner", f"#{owner_id}", f"/owners/{owner_id}/delete", "/owners", error)
        return render(console, "Delete Owner", content)
    return redirect("/owners")


@router.get("/{owner_id}")
async def owner_detail(
    owner_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Owner details with their pets."""
    owner, error = await load_or_error(
        lambda: get_entity(console, QueryTag.OWNERS, console.clients.owners, owner_id)
    )
    if owner is None:
        return render(console, "Owner", components.alert(error or "Owner not found"), status.HTTP_404_NOT_FOUND)

    pets, pets_error = await load_or_error(
        lambda: console.cache.fetch(
            QueryTag.PETS_BY_OWNER,
            lambda: console.clients.pets.get_by_owner_id(owner_id),
            criteria={"ownerId": owner_id},
        ),
        default=[],
    )

    info = components.details([
        ("TC Kimlik No", owner.national_id),
        ("Phone", owner.phone_number),
        ("Address", owner.address),
        ("Emergency Contact", owner.emergency_person or ""),
        ("Emergency Phone", owner.emergency_phone or ""),
        ("Created", format_date(owner.created_at)),
    ])
    pet_rows = [
        [
            components.link(f"/pets/{pet.id}", pet.name),
            components.escape(pet.species.code_name if pet.species else "-"),
            components.escape(pet.breed.code_name if pet.breed else "-"),
            components.chip(gender_label(pet.gender)),
            components.escape(pet.microchip_number),
        ]
        for pet in pets
    ]
    content = (
        f"<p>{components.link(f'/owners/edit/{owner_id}', 'Edit')} | {components.link('/owners', 'Back')}</p>"
        + info
        + "<h2>Pets</h2>"
        + components.alert(pets_error)
        + components.table(["Name", "Species", "Breed", "Gender", "Microchip"], pet_rows, "No pets registered")
    )
    return render(console, owner.full_name, content)
