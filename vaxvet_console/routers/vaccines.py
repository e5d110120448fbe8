"""
Vaccine product screens.
"""

from typing import Mapping, Optional

from fastapi import APIRouter, Depends, Request, status

from ..cache import QueryTag
from ..forms import VACCINE_RULES, build_search, model_to_form, process_form
from ..schemas.auth import CurrentUser
from ..schemas.vaccine import Vaccine, VaccineCreate, VaccineSearch, VaccineUpdate
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

router = APIRouter(prefix="/vaccines", tags=["Vaccines"])

VACCINE_TAGS = (QueryTag.VACCINES,)


def vaccine_form(
    action: str,
    values: Mapping[str, str],
    errors: Mapping[str, str],
    submit_label: str,
    error: Optional[str] = None,
) -> str:
    fields = (
        components.text_input("name", "Vaccine Name", values, errors, required=True)
        + components.text_input("manufacturer", "Manufacturer", values, errors, required=True)
    )
    if values.get("version"):
        fields += components.hidden_input("version", values["version"])
    return (
        components.alert(error or errors.get("__all__"))
        + components.form(action, fields, submit_label, cancel_href="/vaccines")
    )


def vaccine_row(vaccine: Vaccine) -> list:
    return [
        components.escape(str(vaccine.id)),
        components.escape(vaccine.name),
        components.escape(vaccine.manufacturer),
        components.escape(format_date(vaccine.created_at)),
        components.row_actions("/vaccines", vaccine.id),
    ]


@router.get("")
async def list_vaccines(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    search = console.searches.get(QueryTag.VACCINES, VaccineSearch)
    vaccines, error = await load_or_error(
        lambda: search_or_get_all(console.clients.vaccines, console.cache, QueryTag.VACCINES, search.active),
        default=[],
    )

    values = model_to_form(search.draft)
    filters = (
        components.text_input("name", "Name", values, {})
        + components.text_input("manufacturer", "Manufacturer", values, {})
    )
    content = (
        components.alert(error)
        + f"<p>{components.link('/vaccines/create', 'Add Vaccine')}</p>"
        + components.search_form("/vaccines/search", filters)
        + components.table(
            ["ID", "Name", "Manufacturer", "Created", "Actions"],
            [vaccine_row(vaccine) for vaccine in vaccines],
        )
    )
    return render(console, "Vaccines", content)


@router.post("/search")
async def search_vaccines(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    search = console.searches.get(QueryTag.VACCINES, VaccineSearch)
    search.update_draft(build_search(VaccineSearch, await read_form(request)))
    search.submit()
    return redirect("/vaccines")


@router.post("/search/clear")
async def clear_vaccine_search(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    console.searches.get(QueryTag.VACCINES, VaccineSearch).clear()
    return redirect("/vaccines")


@router.get("/create")
async def create_vaccine_page(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    return render(console, "Add Vaccine", vaccine_form("/vaccines/create", {}, {}, "Create"))


@router.post("/create")
async def create_vaccine(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    data = await read_form(request)
    payload, errors = process_form(VaccineCreate, data, VACCINE_RULES)
    if payload is None:
        return render(
            console,
            "Add Vaccine",
            vaccine_form("/vaccines/create", data, errors, "Create"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.vaccines.create(payload),
        VACCINE_TAGS,
        "Failed to create vaccine. Please try again.",
    )
    if error:
        return render(console, "Add Vaccine", vaccine_form("/vaccines/create", data, {}, "Create", error))
    return redirect("/vaccines")


@router.get("/edit/{vaccine_id}")
async def edit_vaccine_page(
    vaccine_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    vaccine, error = await load_or_error(
        lambda: get_entity(console, QueryTag.VACCINES, console.clients.vaccines, vaccine_id)
    )
    if vaccine is None:
        return render(console, "Edit Vaccine", components.alert(error or "Vaccine not found"), status.HTTP_404_NOT_FOUND)

    action = f"/vaccines/edit/{vaccine_id}"
    return render(console, "Edit Vaccine", vaccine_form(action, model_to_form(vaccine), {}, "Update"))


@router.post("/edit/{vaccine_id}")
async def update_vaccine(
    vaccine_id: int,
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    data = await read_form(request)
    action = f"/vaccines/edit/{vaccine_id}"
    payload, errors = process_form(VaccineUpdate, data, VACCINE_RULES)
    if payload is None:
        return render(
            console,
            "Edit Vaccine",
            vaccine_form(action, data, errors, "Update"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.vaccines.update(vaccine_id, payload),
        VACCINE_TAGS,
        "Failed to update vaccine. Please try again.",
    )
    if error:
        return render(console, "Edit Vaccine", vaccine_form(action, data, {}, "Update", error))
    return redirect("/vaccines")


@router.get("/{vaccine_id}/delete")
async def confirm_delete_vaccine(
    vaccine_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    vaccine, error = await load_or_error(
        lambda: get_entity(console, QueryTag.VACCINES, console.clients.vaccines, vaccine_id)
    )
    name = vaccine.name if vaccine else f"#{vaccine_id}"
    content = components.confirm_delete("vaccine", name, f"/vaccines/{vaccine_id}/delete", "/vaccines", error)
    return render(console, "Delete Vaccine", content)


@router.post("/{vaccine_id}/delete")
async def delete_vaccine(
    vaccine_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    error = await run_mutation(
        console,
        lambda: console.clients.vaccines.delete(vaccine_id),
        VACCINE_TAGS,
        "Failed to delete vaccine. Please try again.",
    )
    if error:
        content = components.confirm_delete(
            "vaccine", f"#{vaccine_id}", f"/vaccines/{vaccine_id}/delete", "/vaccines", error
        )
        return render(console, "Delete Vaccine", content)
    return redirect("/vaccines")
