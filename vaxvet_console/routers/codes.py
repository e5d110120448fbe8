"""
Code lookup screens (Species, Breed, Gender).
"""

from typing import Dict, List, Mapping, Optional, Tuple

from fastapi import APIRouter, Depends, Request, status

from ..cache import QueryTag
from ..forms import build_search, code_rules, is_refresh, model_to_form, process_form
from ..schemas.auth import CurrentUser
from ..schemas.code import Code, CodeCreate, CodeSearch, CodeType, CodeUpdate
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

router = APIRouter(prefix="/codes", tags=["Codes"])

CODE_TAGS = (QueryTag.CODES, QueryTag.SPECIES_OPTIONS, QueryTag.BREEDS)

CODE_TYPE_OPTIONS = [(code_type.value, code_type.value) for code_type in CodeType]


async def load_species(console: ConsoleState) -> List[Tuple[str, str]]:
    options = await console.cache.fetch(
        QueryTag.SPECIES_OPTIONS,
        console.clients.codes.get_species_options,
    )
    return [(str(option.value), option.label) for option in options]


async def code_form(
    console: ConsoleState,
    action: str,
    values: Mapping[str, str],
    errors: Mapping[str, str],
    submit_label: str,
    error: Optional[str] = None,
) -> str:
    """Code form; the parent species select is only offered for breeds."""
    fields = (
        components.select_input(
            "codeType", "Code Type", CODE_TYPE_OPTIONS, values, errors,
            required=True, refresh_on_change=True,
        )
        + components.text_input("codeName", "Code Name", values, errors, required=True)
    )

    lookup_error = None
    if values.get("codeType") == CodeType.BREED.value:
        species, lookup_error = await load_or_error(lambda: load_species(console), default=[])
        fields += components.select_input(
            "parentId", "Parent Species", species, values, errors, required=True
        )
    if values.get("version"):
        fields += components.hidden_input("version", values["version"])

    return (
        components.alert(error or lookup_error or errors.get("__all__"))
        + components.form(action, fields, submit_label, cancel_href="/codes")
    )


def code_row(code: Code, species_names: Dict[int, str]) -> list:
    parent = species_names.get(code.parent_id, str(code.parent_id)) if code.parent_id else "-"
    return [
        components.escape(str(code.id)),
        components.chip(code.code_type),
        components.escape(code.code_name),
        components.escape(parent),
        components.escape(format_date(code.created_at)),
        components.row_actions("/codes", code.id),
    ]


@router.get("")
async def list_codes(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Code list filtered by the active search."""
    search = console.searches.get(QueryTag.CODES, CodeSearch)
    codes, error = await load_or_error(
        lambda: search_or_get_all(console.clients.codes, console.cache, QueryTag.CODES, search.active),
        default=[],
    )
    species, _ = await load_or_error(lambda: load_species(console), default=[])
    species_names = {int(value): label for value, label in species}

    values = model_to_form(search.draft)
    filters = (
        components.select_input("codeType", "Code Type", CODE_TYPE_OPTIONS, values, {}, placeholder="All")
        + components.text_input("codeName", "Code Name", values, {})
    )
    content = (
        components.alert(error)
        + f"<p>{components.link('/codes/create', 'Add Code')}</p>"
        + components.search_form("/codes/search", filters)
        + components.table(
            ["ID", "Type", "Name", "Parent", "Created", "Actions"],
            [code_row(code, species_names) for code in codes],
        )
    )
    return render(console, "Codes", content)


@router.post("/search")
async def search_codes(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    search = console.searches.get(QueryTag.CODES, CodeSearch)
    search.update_draft(build_search(CodeSearch, await read_form(request)))
    search.submit()
    return redirect("/codes")


@router.post("/search/clear")
async def clear_code_search(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    console.searches.get(QueryTag.CODES, CodeSearch).clear()
    return redirect("/codes")


@router.get("/create")
async def create_code_page(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    return render(console, "Add Code", await code_form(console, "/codes/create", {}, {}, "Create"))


@router.post("/create")
async def create_code(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Create a code; breeds must name their parent species."""
    data = await read_form(request)
    if is_refresh(data):
        return render(console, "Add Code", await code_form(console, "/codes/create", data, {}, "Create"))

    payload, errors = process_form(CodeCreate, data, code_rules(data))
    if payload is None:
        return render(
            console,
            "Add Code",
            await code_form(console, "/codes/create", data, errors, "Create"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.codes.create(payload),
        CODE_TAGS,
        "Failed to create code. Please try again.",
    )
    if error:
        return render(console, "Add Code", await code_form(console, "/codes/create", data, {}, "Create", error))
    return redirect("/codes")


@router.get("/edit/{code_id}")
async def edit_code_page(
    code_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    code, error = await load_or_error(
        lambda: get_entity(console, QueryTag.CODES, console.clients.codes, code_id)
    )
    if code is None:
        return render(console, "Edit Code", components.alert(error or "Code not found"), status.HTTP_404_NOT_FOUND)

    action = f"/codes/edit/{code_id}"
    return render(console, "Edit Code", await code_form(console, action, model_to_form(code), {}, "Update"))


@router.post("/edit/{code_id}")
async def update_code(
    code_id: int,
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    data = await read_form(request)
    action = f"/codes/edit/{code_id}"
    if is_refresh(data):
        return render(console, "Edit Code", await code_form(console, action, data, {}, "Update"))

    payload, errors = process_form(CodeUpdate, data, code_rules(data))
    if payload is None:
        return render(
            console,
            "Edit Code",
            await code_form(console, action, data, errors, "Update"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.codes.update(code_id, payload),
        CODE_TAGS,
        "Failed to update code. Please try again.",
    )
    if error:
        return render(console, "Edit Code", await code_form(console, action, data, {}, "Update", error))
    return redirect("/codes")


@router.get("/{code_id}/delete")
async def confirm_delete_code(
    code_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    code, error = await load_or_error(
        lambda: get_entity(console, QueryTag.CODES, console.clients.codes, code_id)
    )
    name = code.code_name if code else f"#{code_id}"
    content = components.confirm_delete("code", name, f"/codes/{code_id}/delete", "/codes", error)
    return render(console, "Delete Code", content)


@router.post("/{code_id}/delete")
async def delete_code(
    code_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    error = await run_mutation(
        console,
        lambda: console.clients.codes.delete(code_id),
        CODE_TAGS,
        "Failed to delete code. Please try again.",
    )
    if error:
        content = components.confirm_delete("code", f"#{code_id}", f"/codes/{code_id}/delete", "/codes", error)
        return render(console, "Delete Code", content)
    return redirect("/codes")
