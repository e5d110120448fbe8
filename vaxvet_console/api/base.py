"""
HTTP transport and the generic resource client shared by every entity module.

Responses from the clinic API are not uniformly shaped: some endpoints return
the entity or array directly, others wrap it in `{success, data, message}`.
Everything leaving this module is normalized to the bare payload.
"""

from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar, Union

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..schemas.api import ApiModel

ModelT = TypeVar("ModelT", bound=ApiModel)
ParsedT = TypeVar("ParsedT", bound=BaseModel)
EntityId = Union[int, str]
TokenProvider = Callable[[], Optional[str]]


class ApiError(Exception):
    """A failed call against the clinic API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def extract_error_message(payload: Any) -> Optional[str]:
    """
    Pull the human-readable message out of an error body.

    Args:
        payload: Decoded response body (dict, string or None)

    Returns:
        The server's message, if one is present
    """
    if isinstance(payload, dict):
        for key in ("message", "Message", "detail", "title"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return None
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


def parse_model(model: Type[ParsedT], data: Any, source: str) -> ParsedT:
    """
    Validate one record from the API.

    Raises:
        ApiError: If the record does not match the expected shape
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Unexpected {model.__name__} data from {source}: {e}")
        raise ApiError(f"Received invalid {model.__name__} data from the server.", payload=data) from e


def is_envelope(payload: Any) -> bool:
    """Check whether a body uses the `{success, data, message}` wrapper."""
    return isinstance(payload, dict) and isinstance(payload.get("success"), bool)


def unwrap_envelope(payload: Any) -> Any:
    """
    Normalize a response body to its bare payload.

    Args:
        payload: Decoded response body

    Returns:
        The `data` member of an envelope, or the body itself

    Raises:
        ApiError: If the envelope reports `success: false`
    """
    if not is_envelope(payload):
        return payload

    if not payload["success"]:
        raise ApiError(
            extract_error_message(payload) or "The request was not successful",
            payload=payload,
        )
    return payload.get("data")


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiTransport:
    """Thin async HTTP wrapper around the clinic API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers with the current bearer token."""
        headers = {"Accept": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(self, method: str, path: str, json: Any = None) -> Any:
        """
        Issue a request and return the normalized payload.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            json: Optional JSON body

        Returns:
            Response payload with any envelope removed

        Raises:
            ApiError: On transport failures, non-2xx responses and
                unsuccessful envelopes
        """
        logger.debug(f"{method} {path} body={json}")

        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                headers=self._get_headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(f"Could not reach the server: {e}") from e

        payload = _decode(response)

        if response.is_error:
            message = (
                extract_error_message(payload)
                or f"Request failed with status {response.status_code}"
            )
            logger.error(
                f"API error: {method} {path} -> {response.status_code}, "
                f"message='{message}'"
            )
            raise ApiError(message, status_code=response.status_code, payload=payload)

        logger.debug(f"{method} {path} -> {response.status_code}")
        return unwrap_envelope(payload)

    async def aclose(self) -> None:
        await self._client.aclose()


class ResourceClient(Generic[ModelT]):
    """
    CRUD + search client for one REST resource.

    Subclasses set `path` (e.g. "/Owners") and `model`.
    """

    path: str = ""
    model: Type[ModelT]

    def __init__(self, transport: ApiTransport):
        self.transport = transport

    def _parse(self, data: Any) -> Optional[ModelT]:
        if data is None:
            return None
        return parse_model(self.model, data, self.path)

    def _parse_list(self, data: Any) -> List[ModelT]:
        if not data:
            return []
        if not isinstance(data, list):
            raise ApiError(f"Expected a list from {self.path}, got {type(data).__name__}")
        return [parse_model(self.model, item, self.path) for item in data]

    async def get_all(self) -> List[ModelT]:
        """Get every record of this resource."""
        data = await self.transport.request("GET", self.path)
        return self._parse_list(data)

    async def get_by_id(self, entity_id: EntityId) -> Optional[ModelT]:
        """Get a single record by ID."""
        data = await self.transport.request("GET", f"{self.path}/{entity_id}")
        return self._parse(data)

    async def create(self, payload: ApiModel) -> Optional[ModelT]:
        """Create a record."""
        data = await self.transport.request("POST", self.path, json=payload.to_payload())
        return self._parse(data) if isinstance(data, dict) else None

    async def update(self, entity_id: EntityId, payload: ApiModel) -> Optional[ModelT]:
        """Update a record; the payload carries the expected `version`."""
        data = await self.transport.request(
            "PUT", f"{self.path}/{entity_id}", json=payload.to_payload()
        )
        return self._parse(data) if isinstance(data, dict) else None

    async def delete(self, entity_id: EntityId) -> None:
        """Delete a record."""
        await self.transport.request("DELETE", f"{self.path}/{entity_id}")

    async def search(self, criteria: ApiModel) -> List[ModelT]:
        """Filter records with search criteria."""
        data = await self.transport.request(
            "POST", f"{self.path}/Search", json=criteria.to_payload()
        )
        return self._parse_list(data)
