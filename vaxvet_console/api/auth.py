"""Account endpoints."""

from loguru import logger

from ..schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from .base import ApiError, ApiTransport, parse_model

LOGIN_PATH = "/Account/Login"
REGISTER_PATH = "/Account/Register"


class AuthClient:
    """Client for /Account."""

    def __init__(self, transport: ApiTransport):
        self.transport = transport

    async def login(self, credentials: LoginRequest) -> LoginResponse:
        """Exchange credentials for a bearer token."""
        data = await self.transport.request("POST", LOGIN_PATH, json=credentials.to_payload())
        if not data:
            raise ApiError("Login failed. Please check your credentials.")
        response = parse_model(LoginResponse, data, LOGIN_PATH)
        logger.info(f"Signed in as {response.user_name} ({response.role or 'no role'})")
        return response

    async def register(self, request: RegisterRequest) -> None:
        """Register a new veterinarian account."""
        payload = request.to_payload()
        payload.setdefault("licenseNumber", None)
        await self.transport.request("POST", REGISTER_PATH, json=payload)
        logger.info(f"Registered account {request.user_name}")
