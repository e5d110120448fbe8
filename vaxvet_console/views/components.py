"""
HTML building blocks for the console screens.

Every helper returns an HTML string. Values coming from the API or from the
operator are escaped here; callers pass already-built HTML only through the
`content`/`cells` arguments.
"""

from html import escape
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from ..schemas.auth import CurrentUser

Option = Tuple[str, str]

VETERINARIAN_ROLE = "veterinarian"

# (label, href, hidden from veterinarians)
MENU_ITEMS = [
    ("Dashboard", "/dashboard", False),
    ("Owners", "/owners", False),
    ("Pets", "/pets", False),
    ("Vaccines", "/vaccines", False),
    ("Vaccine Stocks", "/vaccine-stocks", False),
    ("Vaccine Records", "/vaccine-records", False),
    ("Veterinarians", "/veterinarians", True),
    ("Codes", "/codes", True),
]

CHIP_COLORS = {
    "Overdue": "#d32f2f",
    "Expired": "#d32f2f",
    "Due Soon": "#ed6c02",
    "Expiring Soon": "#ed6c02",
    "Up to Date": "#2e7d32",
    "Active": "#2e7d32",
    "Inactive": "#757575",
    "No Follow-up": "#757575",
}

STYLE = """
body { font-family: sans-serif; margin: 0; }
nav { background: #1976d2; padding: 8px 16px; }
nav a { color: #fff; margin-right: 16px; text-decoration: none; }
nav .user { float: right; color: #fff; }
main { padding: 16px 24px; }
table { border-collapse: collapse; width: 100%; }
th, td { border-bottom: 1px solid #ddd; padding: 6px 8px; text-align: left; }
.field { margin-bottom: 10px; }
.field label { display: block; font-weight: bold; }
.field-error { color: #d32f2f; font-size: 0.9em; }
.alert { padding: 10px; margin-bottom: 12px; border-radius: 4px; }
.alert-error { background: #fdecea; color: #611a15; }
.alert-success { background: #edf7ed; color: #1e4620; }
.chip { color: #fff; border-radius: 12px; padding: 2px 10px; font-size: 0.85em; }
.search { background: #f5f5f5; padding: 8px; margin-bottom: 12px; }
.search .field { display: inline-block; margin-right: 12px; }
dialog { border: 2px solid #1976d2; }
.default-submit { position: absolute; left: -9999px; }
"""

# Leads every form so Enter submits it rather than a refresh button.
DEFAULT_SUBMIT = '<button type="submit" class="default-submit" tabindex="-1" aria-hidden="true"></button>'


def visible_menu(user: Optional[CurrentUser]) -> List[Tuple[str, str]]:
    """Menu entries for the signed-in user's role."""
    is_vet = bool(user and (user.role or "").lower() == VETERINARIAN_ROLE)
    return [(label, href) for label, href, vet_hidden in MENU_ITEMS if not (is_vet and vet_hidden)]


def navigation(user: Optional[CurrentUser]) -> str:
    if user is None:
        return ""
    links = "".join(f'<a href="{href}">{escape(label)}</a>' for label, href in visible_menu(user))
    return (
        f"<nav>{links}"
        f'<span class="user">{escape(user.user_name)} '
        f'<a href="/logout">Logout</a></span></nav>'
    )


def notification_modal(messages: Sequence[str]) -> str:
    """Blocking alert listing pending notifications."""
    if not messages:
        return ""
    items = "".join(f"<li>{escape(message)}</li>" for message in messages)
    return (
        '<dialog id="notifications">'
        f"<h3>Notification</h3><ul>{items}</ul>"
        '<form method="post" action="/notifications/dismiss">'
        '<button type="submit">OK</button></form>'
        "</dialog>"
        '<script>document.getElementById("notifications").showModal();</script>'
    )


def page(
    title: str,
    content: str,
    user: Optional[CurrentUser] = None,
    notifications: Sequence[str] = (),
) -> str:
    """Wrap screen content in the console layout."""
    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{escape(title)} - VAXVET</title>
<style>{STYLE}</style>
</head>
<body>
{navigation(user)}
<main>
<h1>{escape(title)}</h1>
{content}
</main>
{notification_modal(notifications)}
</body>
</html>"""


def alert(message: Optional[str], kind: str = "error") -> str:
    if not message:
        return ""
    return f'<div class="alert alert-{kind}" role="alert">{escape(message)}</div>'


def link(href: str, text: str) -> str:
    return f'<a href="{escape(href)}">{escape(text)}</a>'


def chip(label: str) -> str:
    color = CHIP_COLORS.get(label, "#1976d2")
    return f'<span class="chip" style="background:{color}">{escape(label)}</span>'


def field_error(errors: Mapping[str, str], name: str) -> str:
    message = errors.get(name)
    return f'<div class="field-error">{escape(message)}</div>' if message else ""


def text_input(
    name: str,
    label: str,
    values: Mapping[str, str],
    errors: Mapping[str, str],
    input_type: str = "text",
    required: bool = False,
) -> str:
    """Labeled input with its validation message."""
    marker = " *" if required else ""
    value = escape(str(values.get(name, "") or ""))
    return (
        f'<div class="field"><label for="{name}">{escape(label)}{marker}</label>'
        f'<input id="{name}" name="{name}" type="{input_type}" value="{value}">'
        f"{field_error(errors, name)}</div>"
    )


def select_input(
    name: str,
    label: str,
    options: Iterable[Option],
    values: Mapping[str, str],
    errors: Mapping[str, str],
    required: bool = False,
    disabled: bool = False,
    placeholder: str = "Select...",
    refresh_on_change: bool = False,
) -> str:
    """
    Labeled select.

    With `refresh_on_change` the form is re-submitted as a refresh whenever
    the selection changes, so dependent selects can be reloaded.
    """
    selected = str(values.get(name, "") or "")
    rendered = [f'<option value="">{escape(placeholder)}</option>']
    for value, text in options:
        is_selected = " selected" if str(value) == selected else ""
        rendered.append(f'<option value="{escape(str(value))}"{is_selected}>{escape(text)}</option>')

    marker = " *" if required else ""
    attrs = " disabled" if disabled else ""
    if refresh_on_change:
        attrs += " onchange=\"this.form.querySelector('[name=_refresh]').click()\""

    refresh_button = (
        '<button type="submit" name="_refresh" value="1">Reload</button>'
        if refresh_on_change
        else ""
    )
    return (
        f'<div class="field"><label for="{name}">{escape(label)}{marker}</label>'
        f'<select id="{name}" name="{name}"{attrs}>{"".join(rendered)}</select>'
        f"{refresh_button}{field_error(errors, name)}</div>"
    )


def hidden_input(name: str, value: object) -> str:
    return f'<input type="hidden" name="{name}" value="{escape(str(value if value is not None else ""))}">'


def form(action: str, fields: str, submit_label: str, cancel_href: Optional[str] = None) -> str:
    cancel = f' {link(cancel_href, "Cancel")}' if cancel_href else ""
    return (
        f'<form method="post" action="{escape(action)}" novalidate>{DEFAULT_SUBMIT}{fields}'
        f'<button type="submit">{escape(submit_label)}</button>{cancel}</form>'
    )


def search_form(action: str, fields: str) -> str:
    """Search filters with Search and Clear buttons."""
    return (
        f'<form class="search" method="post" action="{escape(action)}">{DEFAULT_SUBMIT}{fields}'
        '<button type="submit">Search</button> '
        f'<button type="submit" formaction="{escape(action)}/clear">Clear</button>'
        "</form>"
    )


def table(headers: Sequence[str], rows: Sequence[Sequence[str]], empty_text: str = "No records found") -> str:
    """Table whose cells are already-rendered HTML."""
    head = "".join(f"<th>{escape(header)}</th>" for header in headers)
    if not rows:
        body = f'<tr><td colspan="{len(headers)}">{escape(empty_text)}</td></tr>'
    else:
        body = "".join("<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in rows)
    return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


def row_actions(base: str, entity_id: object, detail: bool = False) -> str:
    links = []
    if detail:
        links.append(link(f"{base}/{entity_id}", "View"))
    links.append(link(f"{base}/edit/{entity_id}", "Edit"))
    links.append(link(f"{base}/{entity_id}/delete", "Delete"))
    return " | ".join(links)


def details(pairs: Sequence[Tuple[str, str]]) -> str:
    """Definition list of label/value pairs; values are escaped."""
    items = "".join(f"<dt>{escape(label)}</dt><dd>{escape(value or '-')}</dd>" for label, value in pairs)
    return f"<dl>{items}</dl>"


def confirm_delete(entity_label: str, name: str, action: str, cancel_href: str, error: Optional[str] = None) -> str:
    return (
        f"{alert(error)}"
        f"<p>Are you sure you want to delete {escape(entity_label)} "
        f"<strong>{escape(name)}</strong>? This action cannot be undone.</p>"
        f'<form method="post" action="{escape(action)}">'
        f'<button type="submit">Delete</button> {link(cancel_href, "Cancel")}</form>'
    )
