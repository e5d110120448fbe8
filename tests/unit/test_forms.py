"""
Unit tests for building request payloads from submitted forms.
"""

from vaxvet_console.forms import (
    OWNER_RULES,
    build_model,
    build_search,
    model_to_form,
    process_form,
)
from vaxvet_console.schemas import (
    CodeCreate,
    OwnerCreate,
    PetCreate,
    PetSearch,
    VaccineStock,
    VaccineStockCreate,
)


class TestBuildModel:
    """Tests for build_model."""

    def test_owner_payload_uses_api_field_names(self):
        data = {
            "firstName": "Ayse",
            "lastName": "Yilmaz",
            "tcKimlikNo": "12345678901",
            "phoneNumber": "5551234567",
            "address": "Ataturk Cad. No 12, Ankara",
            "emergencyPerson": "",
            "emergencyPhone": "",
        }
        owner, errors = process_form(OwnerCreate, data, OWNER_RULES)

        assert errors == {}
        assert owner.to_payload() == {
            "firstName": "Ayse",
            "lastName": "Yilmaz",
            "tcKimlikNo": "12345678901",
            "phoneNumber": "5551234567",
            "address": "Ataturk Cad. No 12, Ankara",
        }

    def test_process_form_stops_at_field_rules(self):
        owner, errors = process_form(OwnerCreate, {"firstName": "A"}, OWNER_RULES)
        assert owner is None
        assert errors["firstName"] == "Minimum 2 characters"
        assert errors["tcKimlikNo"] == "TC Kimlik No is required"

    def test_form_strings_are_coerced(self):
        data = {
            "name": "Rex",
            "microchipNumber": "123456789012345",
            "gender": "1",
            "ownerId": "3",
            "speciesId": "1",
            "breedId": "4",
            "previousSpeciesId": "1",
            "_refresh": "",
        }
        pet, errors = build_model(PetCreate, data)

        assert errors == {}
        assert pet.gender == 1
        assert pet.to_payload()["breedId"] == 4
        assert "previousSpeciesId" not in pet.to_payload()

    def test_stock_dates_serialize_as_iso(self):
        data = {
            "vaccineId": "1",
            "serialId": "LOT-001",
            "quantity": "10",
            "unitPrice": "12.5",
            "stockDate": "2026-01-01",
            "expirationDate": "2027-06-30",
        }
        stock, _ = build_model(VaccineStockCreate, data)
        payload = stock.to_payload()

        assert payload["stockDate"] == "2026-01-01"
        assert payload["expirationDate"] == "2027-06-30"
        assert payload["unitPrice"] == 12.5

    def test_type_errors_keyed_by_field(self):
        _, errors = build_model(PetCreate, {"name": "Rex", "gender": "x"})
        assert "gender" in errors
        assert "microchipNumber" in errors

    def test_breed_without_parent_is_rejected(self):
        code, errors = build_model(CodeCreate, {"codeType": "Breed", "codeName": "Poodle"})
        assert code is None
        assert errors["__all__"] == "Parent species is required for breeds"

    def test_non_breed_drops_parent(self):
        code, _ = build_model(CodeCreate, {"codeType": "Species", "codeName": "Cat", "parentId": "2"})
        assert code.parent_id is None
        assert "parentId" not in code.to_payload()


class TestSearchAndPrefill:
    """Tests for search criteria and edit-form pre-population."""

    def test_build_search_ignores_unparseable_fields(self):
        criteria = build_search(PetSearch, {"name": "Rex", "speciesId": "dog"})
        assert criteria.name == "Rex"
        assert criteria.species_id is None

    def test_model_to_form_formats_dates(self):
        stock = VaccineStock.model_validate({
            "id": 7,
            "vaccineId": 1,
            "stockDate": "2026-01-01T00:00:00",
            "serialId": "LOT-001",
            "quantity": 10,
            "unitPrice": 12.5,
            "expirationDate": "2027-06-30T00:00:00",
            "version": 3,
            "vaccine": {"id": 1, "name": "Rabies"},
        })
        values = model_to_form(stock, ("stockDate", "expirationDate"))

        assert values["stockDate"] == "2026-01-01"
        assert values["expirationDate"] == "2027-06-30"
        assert values["version"] == "3"
        assert "vaccine" not in values

    def test_model_to_form_none(self):
        assert model_to_form(None) == {}
