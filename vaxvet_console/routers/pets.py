"""
Pet screens, including the species -> breed cascade on the pet form and the
pet search filters.
"""

from datetime import date
from typing import Dict, List, Mapping, Optional, Tuple

from fastapi import APIRouter, Depends, Request, status
from loguru import logger

from ..cache import QueryTag
from ..forms import PET_RULES, build_search, is_refresh, model_to_form, process_form
from ..schemas.auth import CurrentUser
from ..schemas.pet import Gender, Pet, PetCreate, PetSearch, PetUpdate
from ..search import search_or_get_all
from ..state import ConsoleState
from ..utils.helpers import classify_vaccination, format_date, gender_label
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

router = APIRouter(prefix="/pets", tags=["Pets"])

# Record rows show pet names.
PET_TAGS = (QueryTag.PETS, QueryTag.PETS_BY_OWNER, QueryTag.VACCINE_RECORDS)

PREVIOUS_SPECIES_FIELD = "previousSpeciesId"

GENDER_OPTIONS = [(str(gender.value), gender.label) for gender in Gender]


def selected_id(values: Mapping[str, str], name: str) -> int:
    """Integer value of a select, 0 when nothing valid is selected."""
    try:
        return int(values.get(name) or 0)
    except ValueError:
        return 0


def reset_breed_on_species_change(values: Dict[str, str], previous_species_id: int) -> bool:
    """
    Clear the chosen breed when the species differs from the previous one.

    Returns:
        True if the breed was cleared
    """
    if selected_id(values, "speciesId") == previous_species_id:
        return False
    if values.get("breedId"):
        logger.debug(f"Species changed from {previous_species_id}, clearing breed {values['breedId']}")
    values["breedId"] = ""
    return True


async def load_breed_options(console: ConsoleState, species_id: int) -> List[Tuple[str, str]]:
    """Breeds of a species; nothing is fetched while no species is chosen."""
    breeds = await console.cache.fetch(
        QueryTag.BREEDS,
        lambda: console.clients.codes.get_breeds_by_species(species_id),
        criteria={"speciesId": species_id},
        enabled=species_id > 0,
        default=[],
    )
    return [(str(breed.id), breed.code_name) for breed in breeds]


async def load_species_options(console: ConsoleState) -> List[Tuple[str, str]]:
    options = await console.cache.fetch(
        QueryTag.SPECIES_OPTIONS,
        console.clients.codes.get_species_options,
    )
    return [(str(option.value), option.label) for option in options]


async def load_owner_options(console: ConsoleState) -> List[Tuple[str, str]]:
    owners = await console.cache.fetch(QueryTag.OWNERS, console.clients.owners.get_all)
    return [(str(owner.id), owner.full_name) for owner in owners]


async def pet_form(
    console: ConsoleState,
    action: str,
    values: Mapping[str, str],
    errors: Mapping[str, str],
    submit_label: str,
    error: Optional[str] = None,
) -> str:
    """Pet form with owner, species and dependent breed selects."""
    species_id = selected_id(values, "speciesId")
    lookups, lookup_error = await load_or_error(
        lambda: _load_pet_lookups(console, species_id),
        default=([], [], []),
    )
    owner_options, species_options, breed_options = lookups

    fields = (
        components.text_input("name", "Pet Name", values, errors, required=True)
        + components.text_input("microchipNumber", "Microchip Number", values, errors, required=True)
        + components.text_input("petPassportNumber", "Passport Number", values, errors)
        + components.select_input("gender", "Gender", GENDER_OPTIONS, values, errors, required=True)
        + components.text_input("color", "Color", values, errors)
        + components.select_input("ownerId", "Owner", owner_options, values, errors, required=True)
        + components.select_input(
            "speciesId", "Species", species_options, values, errors,
            required=True, refresh_on_change=True,
        )
        + components.select_input(
            "breedId", "Breed", breed_options, values, errors,
            required=True, disabled=species_id <= 0,
            placeholder="Select..." if species_id > 0 else "Select a species first",
        )
        + components.hidden_input(PREVIOUS_SPECIES_FIELD, species_id or "")
    )
    if values.get("version"):
        fields += components.hidden_input("version", values["version"])

    return (
        components.alert(error or lookup_error or errors.get("__all__"))
        + components.form(action, fields, submit_label, cancel_href="/pets")
    )


async def _load_pet_lookups(console: ConsoleState, species_id: int):
    return (
        await load_owner_options(console),
        await load_species_options(console),
        await load_breed_options(console, species_id),
    )


def pet_row(pet: Pet) -> list:
    owner_name = pet.owner.full_name if pet.owner else "-"
    return [
        components.link(f"/pets/{pet.id}", pet.name),
        components.escape(pet.species.code_name if pet.species else "-"),
        components.escape(pet.breed.code_name if pet.breed else "-"),
        components.chip(gender_label(pet.gender)),
        components.escape(owner_name),
        components.escape(pet.microchip_number),
        components.row_actions("/pets", pet.id, detail=True),
    ]


@router.get("")
async def list_pets(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Pet list with species/breed filters."""
    search = console.searches.get(QueryTag.PETS, PetSearch)
    pets, error = await load_or_error(
        lambda: search_or_get_all(console.clients.pets, console.cache, QueryTag.PETS, search.active),
        default=[],
    )

    values = model_to_form(search.draft)
    species_id = selected_id(values, "speciesId")
    lookups, lookup_error = await load_or_error(
        lambda: _load_pet_lookups(console, species_id),
        default=([], [], []),
    )
    owner_options, species_options, breed_options = lookups

    filters = (
        components.text_input("name", "Name", values, {})
        + components.text_input("microchipNumber", "Microchip", values, {})
        + components.select_input("ownerId", "Owner", owner_options, values, {}, placeholder="All")
        + components.select_input(
            "speciesId", "Species", species_options, values, {},
            placeholder="All", refresh_on_change=True,
        )
        + components.select_input(
            "breedId", "Breed", breed_options, values, {},
            placeholder="All", disabled=species_id <= 0,
        )
    )
    content = (
        components.alert(error or lookup_error)
        + f"<p>{components.link('/pets/create', 'Add Pet')}</p>"
        + components.search_form("/pets/search", filters)
        + components.table(
            ["Name", "Species", "Breed", "Gender", "Owner", "Microchip", "Actions"],
            [pet_row(pet) for pet in pets],
        )
    )
    return render(console, "Pets", content)


@router.post("/search")
async def search_pets(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Apply the pet filters, or only reload the breed filter on refresh."""
    search = console.searches.get(QueryTag.PETS, PetSearch)
    data = await read_form(request)
    reset_breed_on_species_change(data, search.draft.species_id or 0)
    search.update_draft(build_search(PetSearch, data))

    if not is_refresh(data):
        search.submit()
    return redirect("/pets")


@router.post("/search/clear")
async def clear_pet_search(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    console.searches.get(QueryTag.PETS, PetSearch).clear()
    return redirect("/pets")


@router.get("/create")
async def create_pet_page(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    return render(console, "Add Pet", await pet_form(console, "/pets/create", {}, {}, "Create"))


@router.post("/create")
async def create_pet(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Create a pet; a refresh submit only reloads the breed select."""
    data = await read_form(request)
    reset_breed_on_species_change(data, selected_id(data, PREVIOUS_SPECIES_FIELD))

    if is_refresh(data):
        return render(console, "Add Pet", await pet_form(console, "/pets/create", data, {}, "Create"))

    payload, errors = process_form(PetCreate, data, PET_RULES)
    if payload is None:
        return render(
            console,
            "Add Pet",
            await pet_form(console, "/pets/create", data, errors, "Create"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.pets.create(payload),
        PET_TAGS,
        "Failed to create pet. Please try again.",
    )
    if error:
        return render(console, "Add Pet", await pet_form(console, "/pets/create", data, {}, "Create", error))
    return redirect("/pets")


@router.get("/edit/{pet_id}")
async def edit_pet_page(
    pet_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    pet, error = await load_or_error(
        lambda: get_entity(console, QueryTag.PETS, console.clients.pets, pet_id)
    )
    if pet is None:
        return render(console, "Edit Pet", components.alert(error or "Pet not found"), status.HTTP_404_NOT_FOUND)

    values = model_to_form(pet)
    return render(console, "Edit Pet", await pet_form(console, f"/pets/edit/{pet_id}", values, {}, "Update"))


@router.post("/edit/{pet_id}")
async def update_pet(
    pet_id: int,
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Update a pet; a refresh submit only reloads the breed select."""
    data = await read_form(request)
    action = f"/pets/edit/{pet_id}"
    reset_breed_on_species_change(data, selected_id(data, PREVIOUS_SPECIES_FIELD))

    if is_refresh(data):
        return render(console, "Edit Pet", await pet_form(console, action, data, {}, "Update"))

    payload, errors = process_form(PetUpdate, data, PET_RULES)
    if payload is None:
        return render(
            console,
            "Edit Pet",
            await pet_form(console, action, data, errors, "Update"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.pets.update(pet_id, payload),
        PET_TAGS,
        "Failed to update pet. Please try again.",
    )
    if error:
        return render(console, "Edit Pet", await pet_form(console, action, data, {}, "Update", error))
    return redirect("/pets")


@router.get("/{pet_id}/delete")
async def confirm_delete_pet(
    pet_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    pet, error = await load_or_error(
        lambda: get_entity(console, QueryTag.PETS, console.clients.pets, pet_id)
    )
    name = pet.name if pet else f"#{pet_id}"
    content = components.confirm_delete("pet", name, f"/pets/{pet_id}/delete", "/pets", error)
    return render(console, "Delete Pet", content)


@router.post("/{pet_id}/delete")
async def delete_pet(
    pet_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    error = await run_mutation(
        console,
        lambda: console.clients.pets.delete(pet_id),
        PET_TAGS,
        "Failed to delete pet. Please try again.",
    )
    if error:
        content = components.confirm_delete("pet", f"#{pet_id}", f"/pets/{pet_id}/delete", "/pets", error)
        return render(console, "Delete Pet", content)
    return redirect("/pets")


@router.get("/{pet_id}")
async def pet_detail(
    pet_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Pet details with its vaccination history."""
    pet, error = await load_or_error(
        lambda: get_entity(console, QueryTag.PETS, console.clients.pets, pet_id)
    )
    if pet is None:
        return render(console, "Pet", components.alert(error or "Pet not found"), status.HTTP_404_NOT_FOUND)

    records, records_error = await load_or_error(
        lambda: console.cache.fetch(QueryTag.VACCINE_RECORDS, console.clients.vaccine_records.get_all),
        default=[],
    )
    today = date.today()
    due_soon_days = console.settings.due_soon_days
    record_rows = [
        [
            components.escape(record.vaccine.name if record.vaccine else "-"),
            components.escape(format_date(record.vaccination_date)),
            components.escape(record.veterinarian.full_name if record.veterinarian else "-"),
            components.escape(format_date(record.next_due_date)),
            components.chip(classify_vaccination(record.next_due_date, today, due_soon_days).value),
        ]
        for record in records
        if record.pet_id == pet_id
    ]

    owner_name = pet.owner.full_name if pet.owner else "-"
    info = components.details([
        ("Species", pet.species.code_name if pet.species else "-"),
        ("Breed", pet.breed.code_name if pet.breed else "-"),
        ("Gender", gender_label(pet.gender)),
        ("Color", pet.color or ""),
        ("Microchip", pet.microchip_number),
        ("Passport", pet.pet_passport_number or ""),
        ("Owner", owner_name),
        ("Created", format_date(pet.created_at)),
    ])
    content = (
        f"<p>{components.link(f'/pets/edit/{pet_id}', 'Edit')} | {components.link('/pets', 'Back')}</p>"
        + info
        + "<h2>Vaccination History</h2>"
        + components.alert(records_error)
        + components.table(
            ["Vaccine", "Date", "Veterinarian", "Next Due", "Status"],
            record_rows,
            "No vaccination records",
        )
    )
    return render(console, pet.name, content)
