"""
Sign-in, registration and sign-out screens.
"""

from typing import Mapping, Optional

from fastapi import APIRouter, Depends, Request, status
from loguru import logger

from ..api.base import ApiError
from ..forms import LOGIN_RULES, REGISTER_RULES, process_form
from ..schemas.auth import CurrentUser, LoginRequest, RegisterRequest
from ..state import ConsoleState
from ..views import components
from .dependencies import get_console, read_form, redirect, render

router = APIRouter(tags=["Auth"])

REGISTERED_MESSAGE = "Registration successful! Please log in with your credentials."


def login_form(values: Mapping[str, str], errors: Mapping[str, str], error: Optional[str] = None, notice: Optional[str] = None) -> str:
    fields = (
        components.text_input("userName", "Username", values, errors, required=True)
        + components.text_input("password", "Password", {}, errors, input_type="password", required=True)
    )
    return (
        components.alert(notice, kind="success")
        + components.alert(error)
        + components.form("/login", fields, "Sign In")
        + f"<p>No account? {components.link('/register', 'Register')}</p>"
    )


def register_form(values: Mapping[str, str], errors: Mapping[str, str], error: Optional[str] = None) -> str:
    fields = (
        components.text_input("userName", "Username", values, errors, required=True)
        + components.text_input("firstName", "First Name", values, errors, required=True)
        + components.text_input("lastName", "Last Name", values, errors, required=True)
        + components.text_input("licenseNumber", "License Number", values, errors)
        + components.text_input("password", "Password", {}, errors, input_type="password", required=True)
        + components.text_input("confirmPassword", "Confirm Password", {}, errors, input_type="password", required=True)
    )
    return (
        components.alert(error)
        + components.form("/register", fields, "Register", cancel_href="/login")
    )


@router.get("/login")
async def login_page(registered: bool = False, console: ConsoleState = Depends(get_console)):
    """Sign-in form."""
    if console.auth.is_authenticated:
        return redirect("/dashboard")
    notice = REGISTERED_MESSAGE if registered else None
    return render(console, "Sign In", login_form({}, {}, notice=notice))


@router.post("/login")
async def login(request: Request, console: ConsoleState = Depends(get_console)):
    """Exchange credentials for a token and store the session."""
    data = await read_form(request)
    credentials, errors = process_form(LoginRequest, data, LOGIN_RULES)
    if credentials is None:
        return render(console, "Sign In", login_form(data, errors), status.HTTP_422_UNPROCESSABLE_ENTITY)

    try:
        response = await console.clients.auth.login(credentials)
    except ApiError as e:
        logger.warning(f"Sign-in failed for {credentials.user_name}: {e.message}")
        message = e.message or "Login failed. Please check your credentials."
        return render(console, "Sign In", login_form(data, {}, error=message))

    user = CurrentUser(id=response.user_id, user_name=response.user_name, role=response.role)
    console.auth.login(user, response.token)
    console.cache.clear()

    if console.listener is not None:
        console.listener.start()

    return redirect("/dashboard")


@router.get("/register")
async def register_page(console: ConsoleState = Depends(get_console)):
    """Veterinarian account registration form."""
    return render(console, "Register", register_form({}, {}))


@router.post("/register")
async def register(request: Request, console: ConsoleState = Depends(get_console)):
    """Register a veterinarian account, then go to sign-in."""
    data = await read_form(request)
    registration, errors = process_form(RegisterRequest, data, REGISTER_RULES)
    if registration is None:
        return render(console, "Register", register_form(data, errors), status.HTTP_422_UNPROCESSABLE_ENTITY)

    try:
        await console.clients.auth.register(registration)
    except ApiError as e:
        message = e.message or "Registration failed. Please try again."
        return render(console, "Register", register_form(data, {}, error=message))

    return redirect("/login?registered=true")


@router.get("/logout")
async def logout(console: ConsoleState = Depends(get_console)):
    """Clear the session and return to sign-in."""
    if console.listener is not None:
        await console.listener.stop()
    console.inbox.drain()
    console.auth.logout()
    console.cache.clear()
    return redirect("/login")
