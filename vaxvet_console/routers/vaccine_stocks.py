"""
Vaccine stock screens with expiration status.
"""

from datetime import date
from typing import List, Mapping, Optional, Tuple

from fastapi import APIRouter, Depends, Request, status

from ..cache import QueryTag
from ..forms import VACCINE_STOCK_RULES, build_search, model_to_form, process_form
from ..schemas.auth import CurrentUser
from ..schemas.vaccine import (
    VaccineStock,
    VaccineStockCreate,
    VaccineStockSearch,
    VaccineStockUpdate,
)
from ..search import search_or_get_all
from ..state import ConsoleState
from ..utils.helpers import classify_stock, format_date, format_price
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

router = APIRouter(prefix="/vaccine-stocks", tags=["Vaccine Stocks"])

STOCK_TAGS = (QueryTag.VACCINE_STOCKS,)
DATE_FIELDS = ("stockDate", "expirationDate")


async def load_vaccine_options(console: ConsoleState) -> List[Tuple[str, str]]:
    vaccines = await console.cache.fetch(QueryTag.VACCINES, console.clients.vaccines.get_all)
    return [(str(vaccine.id), vaccine.name) for vaccine in vaccines]


async def stock_form(
    console: ConsoleState,
    action: str,
    values: Mapping[str, str],
    errors: Mapping[str, str],
    submit_label: str,
    error: Optional[str] = None,
) -> str:
    vaccines, lookup_error = await load_or_error(lambda: load_vaccine_options(console), default=[])
    fields = (
        components.select_input("vaccineId", "Vaccine", vaccines, values, errors, required=True)
        + components.text_input("serialId", "Serial ID", values, errors, required=True)
        + components.text_input("quantity", "Quantity", values, errors, input_type="number", required=True)
        + components.text_input("unitPrice", "Unit Price", values, errors, input_type="number", required=True)
        + components.text_input("stockDate", "Stock Date", values, errors, input_type="date", required=True)
        + components.text_input(
            "expirationDate", "Expiration Date", values, errors, input_type="date", required=True
        )
    )
    if values.get("version"):
        fields += components.hidden_input("version", values["version"])
    return (
        components.alert(error or lookup_error or errors.get("__all__"))
        + components.form(action, fields, submit_label, cancel_href="/vaccine-stocks")
    )


def stock_row(stock: VaccineStock, today: date, expiring_soon_days: int) -> list:
    return [
        components.escape(stock.vaccine.name if stock.vaccine else str(stock.vaccine_id)),
        components.escape(stock.serial_id),
        components.escape(str(stock.quantity)),
        components.escape(format_price(stock.unit_price)),
        components.escape(format_date(stock.stock_date)),
        components.escape(format_date(stock.expiration_date)),
        components.chip(classify_stock(stock.expiration_date, today, expiring_soon_days).value),
        components.row_actions("/vaccine-stocks", stock.id),
    ]


@router.get("")
async def list_stocks(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    """Stock list with Expired / Expiring Soon / Active chips."""
    search = console.searches.get(QueryTag.VACCINE_STOCKS, VaccineStockSearch)
    stocks, error = await load_or_error(
        lambda: search_or_get_all(
            console.clients.vaccine_stocks, console.cache, QueryTag.VACCINE_STOCKS, search.active
        ),
        default=[],
    )
    vaccines, _ = await load_or_error(lambda: load_vaccine_options(console), default=[])

    values = model_to_form(search.draft, DATE_FIELDS)
    filters = (
        components.select_input("vaccineId", "Vaccine", vaccines, values, {}, placeholder="All")
        + components.text_input("serialId", "Serial ID", values, {})
        + components.text_input("expirationDate", "Expiration Date", values, {}, input_type="date")
    )

    today = date.today()
    expiring_soon_days = console.settings.expiring_soon_days
    content = (
        components.alert(error)
        + f"<p>{components.link('/vaccine-stocks/create', 'Add Stock')}</p>"
        + components.search_form("/vaccine-stocks/search", filters)
        + components.table(
            ["Vaccine", "Serial ID", "Quantity", "Unit Price", "Stock Date", "Expiration", "Status", "Actions"],
            [stock_row(stock, today, expiring_soon_days) for stock in stocks],
        )
    )
    return render(console, "Vaccine Stocks", content)


@router.post("/search")
async def search_stocks(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    search = console.searches.get(QueryTag.VACCINE_STOCKS, VaccineStockSearch)
    search.update_draft(build_search(VaccineStockSearch, await read_form(request)))
    search.submit()
    return redirect("/vaccine-stocks")


@router.post("/search/clear")
async def clear_stock_search(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    console.searches.get(QueryTag.VACCINE_STOCKS, VaccineStockSearch).clear()
    return redirect("/vaccine-stocks")


@router.get("/create")
async def create_stock_page(
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    content = await stock_form(console, "/vaccine-stocks/create", {}, {}, "Create")
    return render(console, "Add Vaccine Stock", content)


@router.post("/create")
async def create_stock(
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    data = await read_form(request)
    action = "/vaccine-stocks/create"
    payload, errors = process_form(VaccineStockCreate, data, VACCINE_STOCK_RULES)
    if payload is None:
        return render(
            console,
            "Add Vaccine Stock",
            await stock_form(console, action, data, errors, "Create"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.vaccine_stocks.create(payload),
        STOCK_TAGS,
        "Failed to create vaccine stock. Please try again.",
    )
    if error:
        return render(console, "Add Vaccine Stock", await stock_form(console, action, data, {}, "Create", error))
    return redirect("/vaccine-stocks")


@router.get("/edit/{stock_id}")
async def edit_stock_page(
    stock_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    stock, error = await load_or_error(
        lambda: get_entity(console, QueryTag.VACCINE_STOCKS, console.clients.vaccine_stocks, stock_id)
    )
    if stock is None:
        return render(
            console, "Edit Vaccine Stock", components.alert(error or "Vaccine stock not found"),
            status.HTTP_404_NOT_FOUND,
        )

    values = model_to_form(stock, DATE_FIELDS)
    content = await stock_form(console, f"/vaccine-stocks/edit/{stock_id}", values, {}, "Update")
    return render(console, "Edit Vaccine Stock", content)


@router.post("/edit/{stock_id}")
async def update_stock(
    stock_id: int,
    request: Request,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    data = await read_form(request)
    action = f"/vaccine-stocks/edit/{stock_id}"
    payload, errors = process_form(VaccineStockUpdate, data, VACCINE_STOCK_RULES)
    if payload is None:
        return render(
            console,
            "Edit Vaccine Stock",
            await stock_form(console, action, data, errors, "Update"),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    error = await run_mutation(
        console,
        lambda: console.clients.vaccine_stocks.update(stock_id, payload),
        STOCK_TAGS,
        "Failed to update vaccine stock. Please try again.",
    )
    if error:
        return render(console, "Edit Vaccine Stock", await stock_form(console, action, data, {}, "Update", error))
    return redirect("/vaccine-stocks")


@router.get("/{stock_id}/delete")
async def confirm_delete_stock(
    stock_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    stock, error = await load_or_error(
        lambda: get_entity(console, QueryTag.VACCINE_STOCKS, console.clients.vaccine_stocks, stock_id)
    )
    name = stock.serial_id if stock else f"#{stock_id}"
    content = components.confirm_delete(
        "vaccine stock", name, f"/vaccine-stocks/{stock_id}/delete", "/vaccine-stocks", error
    )
    return render(console, "Delete Vaccine Stock", content)


@router.post("/{stock_id}/delete")
async def delete_stock(
    stock_id: int,
    console: ConsoleState = Depends(get_console),
    user: CurrentUser = Depends(require_user),
):
    error = await run_mutation(
        console,
        lambda: console.clients.vaccine_stocks.delete(stock_id),
        STOCK_TAGS,
        "Failed to delete vaccine stock. Please try again.",
    )
    if error:
        content = components.confirm_delete(
            "vaccine stock", f"#{stock_id}", f"/vaccine-stocks/{stock_id}/delete", "/vaccine-stocks", error
        )
        return render(console, "Delete Vaccine Stock", content)
    return redirect("/vaccine-stocks")
