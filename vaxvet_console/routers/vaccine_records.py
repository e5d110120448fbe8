"""
Vaccine record screens with follow-up status.
"""

from datetime import date
from typing import List, Mapping, Optional, Tuple

from fastapi import APIRouter, Depends, Request, status

from ..cache import QueryTag
from ..forms import VACCINE_RECORD_RULES, build_search, model_to_form, process_form
from ..schemas.auth import CurrentUser
from ..schemas.vaccine import (
    VaccineRecord,
    VaccineRecordCreate,
    VaccineRecordSearch,
    VaccineRecordUpdate,
)
from ..search import search_or_get_all
from ..state import ConsoleState
from ..utils.helpers import classify_vaccination, format_date
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

router = APIRouter(prefix="/vaccine-records", tags=["Vaccine Records"])

RECORD_TAGS = (QueryTag.VACCINE_RECORDS, QueryTag.VACCINE_STOCKS)
DATE_FIELDS = ("vaccinationDate", "nextDueDate")

Options = List[Tuple[str, str]]


async def load_record_lookups(console: ConsoleState) -> Tuple[Options, Options, Options, Options]:
    """Pets, vaccines, veterinarians and stocks offered by the record form."""
    cache = console.cache
    clients = console.clients
    pets = await cache.fetch(QueryTag.PETS, clients.pets.get_all)
    vaccines = await cache.fetch(QueryTag.VACCINES, clients.vaccines.get_all)
    veterinarians = await cache.fetch(QueryTag.VETERINARIANS, clients.veterinarians.get_all)
    stocks = await cache.fetch(QueryTag.VACCINE_STOCKS, clients.vaccine_stocks.get_all)

    vaccine_names = {vaccine.id: vaccine.name for vaccine in vaccines}
    return (
        [(str(pet.id), pet.name) for pet in pets],
        [(str(vaccine.id), vaccine.name) for vaccine in vaccines],
        [(vet.id, vet.full_name or vet.user_name) for vet in veterinarians],
        [
            (str(stock.id), f"{stock.serial_id} ({vaccine_names.get(stock.vaccine_id, stock.vaccine_id)})")
            for stock in stocks
        ],
    )


async def record_form(
    console: ConsoleState,
    action: str,
    values: Mapping[str, str],
    errors: Mapping[str, str],
    submit_label: str,
    error: Optional[str] = None,
) -> str:
    lookups, lookup_error = await load_or_error(
        lambda: load_record_lookups(console),
        default=([], [], [], []),
    )
    pets, vaccines, veterinarians, stocks = lookups

    fields = (
        components.select_input("petId", "Pet", pets, values, errors, required=True)
        + components.select_input("vaccineId", "Vaccine", vaccines, values, errors, required=True)
        + components.select_input("veterinarianId", "Veterinarian", veterinarians, values, errors, required=True)
        + components.select_input("vaccineStockId", "Vaccine Stock", stocks, values, errors, required=True)
        + components.text_input(
            "vaccinationDate", "Vaccination Date", values, errors, input_type="date", required=True
        )
        + components.text_input("nextDueDate", "Next Due Date", values, errors, input_type="date")
    )
    if values.get("version"):
        fields += components.hidden_input("version", values["version"])
    return (
        components.alert(error or lookup_error or errors.get("__all__"))
        + components.form(action, fields, submit_label, cancel_href="/vaccine-records")
    )


def record_row(record: VaccineRecord, today: date, due_soon_days: int) -> list:
    pet = record.pet
    owner_name = pet.owner.full_name if pet and pet.owner else "-"
    return [
        components.escape(pet.name if pet else str(record.pet_id)),
        components.escape(owner_name),
        components.escape(record.vaccine.name if record.vaccine else str(record.vaccine_id)),
        components.escape(record.veterinarian.full_name if record.veterinarian else record.veterinarian_id),
        components.escape(format_date(record.vaccination_date)),
        components.escape(format_date(record.next_due_date)),
        components.chip(classify_vaccination(record.next_due_date, today, due_soon_days).value),
        components.row_actions("/vaccine-records", record.id),
    ]


@router.get("")
async def list_records(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Vaccination records with Overdue / Due Soon / Up to Date chips."""
    search = console.searches.get(QueryTag.VACCINE_RECORDS, VaccineRecordSearch)
    records, error = await load_or_error(
        lambda: search_or_get_all(
            console.clients.vaccine_records, console.cache, QueryTag.VACCINE_RECORDS, search.active
        ),
        default=[],
    )
    lookups, _ = await load_or_error(lambda: load_record_lookups(console), default=([], [], [], []))
    pets, vaccines, veterinarians, _ = lookups

    values = model_to_form(search.draft)
    filters = (
        components.select_input("petId", "Pet", pets, values, {}, placeholder="All")
        + components.select_input("vaccineId", "Vaccine", vaccines, values, {}, placeholder="All")
        + components.select_input("veterinarianId", "Veterinarian", veterinarians, values, {}, placeholder="All")
    )

    today = date.today()
    due_soon_days = console.settings.due_soon_days
    content = (
        components.alert(error)
        + f"<p>{components.link('/vaccine-records/create', 'Add Record')}</p>"
        + components.search_form("/vaccine-records/search", filters)
        + components.table(
            ["Pet", "Owner", "Vaccine", "Veterinarian", "Date", "Next Due", "Status", "Actions"],
            [record_row(record, today, due_soon_days) for record in records],
        )
    )
    return render(console, "Vaccine Records", content)


@router.post("/search")
async def search_records(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    search = console.searches.get(QueryTag.VACCINE_RECORDS, VaccineRecordSearch)
    search.update_draft(build_search(VaccineRecordSearch, await read_form(request)))
    search.submit()
    return redirect("/vaccine-records")


@router.post("/search/clear")
async def clear_record_search(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    console.searches.get(QueryTag.VACCINE_RECORDS, VaccineRecordSearch).clear()
    return redirect("/vaccine-records")


@router.get("/create")
async def create_record_page(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    content = await record_form(console, "/vaccine-records/create", {}, {}, "Create")
    return render(console, "Add Vaccine Record", content)


@router.post("/create")
async def create_record(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    data = await read_form(request)
    action = "/vaccine-records/create"
    payload, errors = process_form(VaccineRecordCreate, data, VACCINE_RECORD_RULES)
    if payload is None:
        return render(
            console,
            "Add Vaccine Record",
            await record_form(console, action, data, errors, "Create"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.vaccine_records.create(payload),
        RECORD_TAGS,
        "Failed to create vaccine record. Please try again.",
    )
    if error:
        return render(console, "Add Vaccine Record", await record_form(console, action, data, {}, "Create", error))
    return redirect("/vaccine-records")


@router.get("/edit/{record_id}")
async def edit_record_page(
    record_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    record, error = await load_or_error(
        lambda: get_entity(console, QueryTag.VACCINE_RECORDS, console.clients.vaccine_records, record_id)
    )
    if record is None:
        return render(
            console, "Edit Vaccine Record", components.alert(error or "Vaccine record not found"),
            status.HTTP_404_NOT_FOUND,
        )

    values = model_to_form(record, DATE_FIELDS)
    content = await record_form(console, f"/vaccine-records/edit/{record_id}", values, {}, "Update")
    return render(console, "Edit Vaccine Record", content)


@router.post("/edit/{record_id}")
async def update_record(
    record_id: int,
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    data = await read_form(request)
    action = f"/vaccine-records/edit/{record_id}"
    payload, errors = process_form(VaccineRecordUpdate, data, VACCINE_RECORD_RULES)
    if payload is None:
        return render(
            console,
            "Edit Vaccine Record",
            await record_form(console, action, data, errors, "Update"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.vaccine_records.update(record_id, payload),
        RECORD_TAGS,
        "Failed to update vaccine record. Please try again.",
    )
    if error:
        return render(console, "Edit Vaccine Record", await record_form(console, action, data, {}, "Update", error))
    return redirect("/vaccine-records")


@router.get("/{record_id}/delete")
async def confirm_delete_record(
    record_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    record, error = await load_or_error(
        lambda: get_entity(console, QueryTag.VACCINE_RECORDS, console.clients.vaccine_records, record_id)
    )
    name = f"#{record_id}"
    if record is not None and record.pet is not None:
        name = f"#{record_id} ({record.pet.name})"
    content = components.confirm_delete(
        "vaccine record", name, f"/vaccine-records/{record_id}/delete", "/vaccine-records", error
    )
    return render(console, "Delete Vaccine Record", content)


@router.post("/{record_id}/delete")
async def delete_record(
    record_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    error = await run_mutation(
        console,
        lambda: console.clients.vaccine_records.delete(record_id),
        RECORD_TAGS,
        "Failed to delete vaccine record. Please try again.",
    )
    if error:
        content = components.confirm_delete(
            "vaccine record", f"#{record_id}", f"/vaccine-records/{record_id}/delete", "/vaccine-records", error
        )
        return render(console, "Delete Vaccine Record", content)
    return redirect("/vaccine-records")
