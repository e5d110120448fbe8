"""
Unit tests for field rules and the form rule sets.
"""

import pytest

from vaxvet_console.forms import (
    OWNER_RULES,
    PET_RULES,
    REGISTER_RULES,
    VACCINE_STOCK_RULES,
    code_rules,
)
from vaxvet_console.utils.validators import (
    FieldRule,
    sanitize_string,
    validate_form,
    validate_microchip,
    validate_national_id,
    validate_password,
    validate_phone,
)


def valid_owner(**overrides):
    data = {
        "firstName": "Ayse",
        "lastName": "Yilmaz",
        "tcKimlikNo": "12345678901",
        "phoneNumber": "5551234567",
        "address": "Ataturk Cad. No 12, Ankara",
        "emergencyPhone": "",
    }
    data.update(overrides)
    return data


class TestSanitizeString:
    """Tests for sanitize_string."""

    def test_strips_whitespace_and_null_bytes(self):
        assert sanitize_string("  Rex\x00  ") == "Rex"

    def test_none_becomes_empty(self):
        assert sanitize_string(None) == ""

    def test_truncates(self):
        assert sanitize_string("a" * 20, max_length=5) == "aaaaa"


class TestPatterns:
    """Tests for the pattern validators."""

    @pytest.mark.parametrize("value,expected", [
        ("12345678901", True),
        ("1234567890", False),
        ("123456789012", False),
        ("1234567890a", False),
        ("", False),
    ])
    def test_national_id(self, value, expected):
        assert validate_national_id(value) is expected

    def test_phone_accepts_10_or_11_digits(self):
        assert validate_phone("5551234567")
        assert validate_phone("05551234567")
        assert not validate_phone("555123456")

    def test_microchip_needs_15_digits(self):
        assert validate_microchip("123456789012345")
        assert not validate_microchip("12345678901234")

    def test_password_strength(self):
        assert validate_password("Secret1!")
        assert not validate_password("secret1!")
        assert not validate_password("Secret12")


class TestFieldRule:
    """Tests for rule ordering and messages."""

    def test_required_message_for_empty_value(self):
        rule = FieldRule(required="Name is required", min_length=(2, "Too short"))
        assert rule.check("   ", {}) == "Name is required"

    def test_empty_optional_field_skips_rules(self):
        rule = FieldRule(pattern=(r"^[0-9]+$", "Digits only"))
        assert rule.check("", {}) is None

    def test_first_failing_rule_wins(self):
        rule = FieldRule(
            required="Required",
            min_length=(3, "Minimum 3 characters"),
            pattern=(r"^[0-9]+$", "Digits only"),
        )
        assert rule.check("a", {}) == "Minimum 3 characters"
        assert rule.check("abc", {}) == "Digits only"
        assert rule.check("123", {}) is None

    def test_min_value(self):
        rule = FieldRule(required="Required", min_value=(0.01, "Minimum price is 0.01"))
        assert rule.check("0", {}) == "Minimum price is 0.01"
        assert rule.check("abc", {}) == "Minimum price is 0.01"
        assert rule.check("0.01", {}) is None

    def test_matches_other_field(self):
        rule = FieldRule(required="Required", matches=("password", "Passwords do not match"))
        assert rule.check("Secret1!", {"password": "Secret2!"}) == "Passwords do not match"
        assert rule.check("Secret1!", {"password": "Secret1!"}) is None


class TestFormRules:
    """Tests for the rule sets of each form."""

    def test_valid_owner_passes(self):
        is_valid, errors = validate_form(valid_owner(), OWNER_RULES)
        assert is_valid
        assert errors == {}

    def test_invalid_national_id_reports_field_error(self):
        is_valid, errors = validate_form(valid_owner(tcKimlikNo="123"), OWNER_RULES)
        assert not is_valid
        assert errors == {"tcKimlikNo": "TC Kimlik No must be 11 digits"}

    def test_owner_address_minimum(self):
        _, errors = validate_form(valid_owner(address="Short"), OWNER_RULES)
        assert errors["address"] == "Minimum 10 characters"

    def test_optional_emergency_phone_validated_when_present(self):
        _, errors = validate_form(valid_owner(emergencyPhone="12"), OWNER_RULES)
        assert errors["emergencyPhone"] == "Phone must be 10-11 digits"

    def test_pet_requires_selected_breed(self):
        data = {
            "name": "Rex",
            "microchipNumber": "123456789012345",
            "gender": "2",
            "ownerId": "1",
            "speciesId": "1",
            "breedId": "0",
        }
        _, errors = validate_form(data, PET_RULES)
        assert errors == {"breedId": "Please select a breed"}

    def test_breed_code_requires_parent(self):
        data = {"codeType": "Breed", "codeName": "Golden Retriever", "parentId": ""}
        _, errors = validate_form(data, code_rules(data))
        assert errors == {"parentId": "Parent species is required for breeds"}

    def test_species_code_has_no_parent_rule(self):
        data = {"codeType": "Species", "codeName": "Dog"}
        assert "parentId" not in code_rules(data)

    def test_stock_quantity_minimum(self):
        data = {
            "vaccineId": "1",
            "serialId": "LOT-001",
            "quantity": "0",
            "unitPrice": "12.50",
            "stockDate": "2026-01-01",
            "expirationDate": "2027-01-01",
        }
        _, errors = validate_form(data, VACCINE_STOCK_RULES)
        assert errors == {"quantity": "Minimum quantity is 1"}

    def test_register_password_rules(self):
        data = {
            "userName": "drvet",
            "firstName": "Can",
            "lastName": "Demir",
            "password": "password1",
            "confirmPassword": "password2",
        }
        _, errors = validate_form(data, REGISTER_RULES)
        assert errors["password"] == "Password must contain uppercase, lowercase, number and special character"
        assert errors["confirmPassword"] == "Passwords do not match"
