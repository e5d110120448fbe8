"""
Unit tests for the REST clients against a mocked transport.
"""

import httpx
import pytest

from vaxvet_console.api import ApiClients
from vaxvet_console.api.base import ApiError, extract_error_message, unwrap_envelope
from vaxvet_console.schemas import (
    LoginRequest,
    OwnerSearch,
    RegisterRequest,
    VaccineCreate,
    VeterinarianUpdate,
)


class TestEnvelope:
    """Tests for response normalization."""

    def test_bare_payload_passes_through(self):
        assert unwrap_envelope([{"id": 1}]) == [{"id": 1}]
        assert unwrap_envelope({"id": 1, "name": "Rex"}) == {"id": 1, "name": "Rex"}
        assert unwrap_envelope(None) is None

    def test_successful_envelope_returns_data(self):
        assert unwrap_envelope({"success": True, "data": [1, 2], "message": None}) == [1, 2]

    def test_failed_envelope_raises_message(self):
        with pytest.raises(ApiError) as exc_info:
            unwrap_envelope({"success": False, "data": None, "message": "Owner has pets"})
        assert exc_info.value.message == "Owner has pets"

    @pytest.mark.parametrize("payload,expected", [
        ({"message": "Duplicate microchip"}, "Duplicate microchip"),
        ({"Message": "Version conflict"}, "Version conflict"),
        ({"title": "Bad Request"}, "Bad Request"),
        ("plain failure", "plain failure"),
        ({}, None),
        (None, None),
    ])
    def test_extract_error_message(self, payload, expected):
        assert extract_error_message(payload) == expected


class TestClients:
    """Tests for the entity clients."""

    @pytest.fixture
    def clients(self, test_settings, fake_api):
        return ApiClients.create(test_settings, token_provider=lambda: "tok", transport=fake_api.transport)

    @pytest.mark.asyncio
    async def test_get_all_sends_bearer_token(self, clients, fake_api, owner_json):
        fake_api.add("GET", "/Owners", json=[owner_json(1), owner_json(2)])

        owners = await clients.owners.get_all()

        assert [owner.id for owner in owners] == [1, 2]
        request = fake_api.calls("GET", "/Owners")[0]
        assert request.headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_enveloped_entity_is_unwrapped(self, clients, fake_api, owner_json):
        fake_api.add("GET", "/Owners/5", json={"success": True, "data": owner_json(5), "message": "ok"})

        owner = await clients.owners.get_by_id(5)

        assert owner.id == 5
        assert owner.national_id == "12345678901"

    @pytest.mark.asyncio
    async def test_search_posts_criteria(self, clients, fake_api):
        fake_api.add("POST", "/Owners/Search", json=[])

        await clients.owners.search(OwnerSearch(national_id="12345678901"))

        request = fake_api.calls("POST", "/Owners/Search")[0]
        assert fake_api.body(request) == {"tcKimlikNo": "12345678901"}

    @pytest.mark.asyncio
    async def test_error_status_raises_server_message(self, clients, fake_api):
        fake_api.add("DELETE", "/Owners/3", status_code=409, json={"message": "Owner has registered pets"})

        with pytest.raises(ApiError) as exc_info:
            await clients.owners.delete(3)

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "Owner has registered pets"

    @pytest.mark.asyncio
    async def test_error_without_body_uses_status(self, clients, fake_api):
        fake_api.add("GET", "/Vaccines", handler=lambda request: httpx.Response(500))

        with pytest.raises(ApiError, match="status 500"):
            await clients.vaccines.get_all()

    @pytest.mark.asyncio
    async def test_transport_failure_is_api_error(self, test_settings):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        clients = ApiClients.create(test_settings, transport=httpx.MockTransport(refuse))

        with pytest.raises(ApiError, match="Could not reach the server"):
            await clients.pets.get_all()

    @pytest.mark.asyncio
    async def test_pets_by_owner(self, clients, fake_api):
        fake_api.add("GET", "/Pets/OwnerId/4", json=[{"id": 9, "name": "Rex", "ownerId": 4}])

        pets = await clients.pets.get_by_owner_id(4)

        assert pets[0].name == "Rex"

    @pytest.mark.asyncio
    async def test_species_options_and_breeds(self, clients, fake_api):
        fake_api.add("GET", "/Cache/Codes/Species/Options", json=[{"value": 1, "label": "Dog"}])
        fake_api.add("POST", "/Codes/Search", json=[
            {"id": 11, "codeType": "Breed", "codeName": "Kangal", "parentId": 1},
        ])

        options = await clients.codes.get_species_options()
        breeds = await clients.codes.get_breeds_by_species(1)

        assert options[0].label == "Dog"
        assert breeds[0].code_name == "Kangal"
        body = fake_api.body(fake_api.calls("POST", "/Codes/Search")[0])
        assert body == {"codeType": "Breed", "parentId": 1}

    @pytest.mark.asyncio
    async def test_veterinarian_activation(self, clients, fake_api):
        fake_api.add("POST", "/Veterinarians/v-1/Activate", json={"success": True, "data": None})
        fake_api.add("POST", "/Veterinarians/v-1/Deactivate", json={"success": True, "data": None})

        await clients.veterinarians.activate("v-1")
        await clients.veterinarians.deactivate("v-1")

        assert len(fake_api.requests) == 2

    @pytest.mark.asyncio
    async def test_update_sends_version(self, clients, fake_api):
        fake_api.add("PUT", "/Veterinarians/v-1", json=None)

        await clients.veterinarians.update("v-1", VeterinarianUpdate(first_name="Can", last_name="Demir", version=4))

        body = fake_api.body(fake_api.calls("PUT", "/Veterinarians/v-1")[0])
        assert body == {"firstName": "Can", "lastName": "Demir", "version": 4}

    @pytest.mark.asyncio
    async def test_login(self, clients, fake_api):
        fake_api.add("POST", "/Account/Login", json={
            "userId": "u-1", "userName": "admin", "token": "jwt", "expiresIn": 3600, "role": "Admin",
        })

        response = await clients.auth.login(LoginRequest(user_name="admin", password="Secret1!"))

        assert response.token == "jwt"
        assert response.role == "Admin"

    @pytest.mark.asyncio
    async def test_login_without_data_fails(self, clients, fake_api):
        fake_api.add("POST", "/Account/Login", json={"success": True, "data": None})

        with pytest.raises(ApiError, match="Login failed"):
            await clients.auth.login(LoginRequest(user_name="admin", password="x"))

    @pytest.mark.asyncio
    async def test_register_sends_null_license(self, clients, fake_api):
        fake_api.add("POST", "/Account/Register", json={"success": True, "data": None})

        await clients.auth.register(RegisterRequest(
            user_name="drvet", password="Secret1!", first_name="Can", last_name="Demir",
        ))

        body = fake_api.body(fake_api.calls("POST", "/Account/Register")[0])
        assert body["licenseNumber"] is None
        assert body["userName"] == "drvet"

    @pytest.mark.asyncio
    async def test_malformed_row_is_api_error(self, clients, fake_api, owner_json):
        fake_api.add("GET", "/Owners", json=[owner_json(1, address=None)])

        with pytest.raises(ApiError, match="invalid Owner data"):
            await clients.owners.get_all()

    @pytest.mark.asyncio
    async def test_create_tolerates_non_entity_body(self, clients, fake_api):
        fake_api.add("POST", "/Vaccines", json={"success": True, "data": 12})

        created = await clients.vaccines.create(VaccineCreate(name="Rabies", manufacturer="Zoetis"))

        assert created is None
