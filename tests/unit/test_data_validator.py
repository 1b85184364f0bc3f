"""Unit tests for DataValidator."""

import pytest

from docsmith.interfaces import InvalidInputError
from docsmith.strategies.profiles import DataValidator


class TestDataValidator:
    """Test suite for DataValidator."""

    @pytest.fixture
    def validator(self):
        """Create a data validator."""
        return DataValidator()

    # =========================================================================
    # Email Tests
    # =========================================================================

    def test_valid_email(self, validator):
        """A well-formed common-domain email scores full confidence."""
        result = validator.validate({"email": "jane@example.com"}, "email")

        assert result.is_valid is True
        assert result.errors == []
        assert result.confidence == pytest.approx(1.0)

    def test_email_domain_typo_suggestion(self, validator):
        """Known domain typos produce a corrected suggestion."""
        result = validator.validate({"email": "jane@gmial.com"}, "email")

        assert result.is_valid is True
        assert result.suggestions == ["jane@gmail.com"]
        assert result.confidence == pytest.approx(0.8)

    def test_invalid_email(self, validator):
        """Malformed addresses are rejected."""
        result = validator.validate({"email": "not-an-email"}, "email")

        assert result.is_valid is False
        assert result.errors == ["Invalid email format"]

    def test_missing_email(self, validator):
        """An absent email is an error."""
        result = validator.validate({}, "email")

        assert result.is_valid is False
        assert result.errors == ["Email is required"]
        assert result.confidence == 0.0

    def test_non_string_email_is_coerced(self, validator):
        """Numbers decoded from JSON are checked as text."""
        result = validator.validate({"email": 12345}, "email")

        assert result.is_valid is False
        assert result.errors == ["Invalid email format"]

    # =========================================================================
    # Phone Tests
    # =========================================================================

    def test_numeric_phone_is_coerced(self, validator):
        """A phone number stored as an integer is still validated."""
        result = validator.validate({"phone": 5551234567}, "phone")

        assert result.is_valid is True
        assert result.suggestions == ["(555) 123-4567"]

    def test_ten_digit_phone(self, validator):
        """Ten digits are valid and formatted as a US number."""
        result = validator.validate({"phone": "555.123.4567"}, "phone")

        assert result.is_valid is True
        assert result.suggestions == ["(555) 123-4567"]
        assert result.confidence == pytest.approx(0.8)

    def test_eleven_digit_us_phone(self, validator):
        """A leading 1 gets the +1 format."""
        result = validator.validate({"phone": "1 555 123 4567"}, "phone")
        assert result.suggestions == ["+1 (555) 123-4567"]

    def test_short_phone(self, validator):
        """Too few digits is invalid."""
        result = validator.validate({"phone": "12345"}, "phone")

        assert result.is_valid is False
        assert result.errors == ["Invalid phone number length"]
        assert result.confidence == pytest.approx(0.2)

    # =========================================================================
    # Address Tests
    # =========================================================================

    def test_complete_address(self, validator):
        """A complete US address scores full confidence."""
        data = {"address": "1 Main St", "city": "Springfield", "state": "il", "zipCode": "62701"}

        result = validator.validate(data, "address")

        assert result.is_valid is True
        assert result.confidence == pytest.approx(1.0)

    def test_address_with_foreign_state_and_zip(self, validator):
        """Unknown state and zip formats lower the confidence only."""
        data = {"address": "1 High St", "city": "Leeds", "state": "WYK", "zip_code": "LS1 4DY"}

        result = validator.validate(data, "address")

        assert result.is_valid is True
        assert result.confidence == pytest.approx(0.6)

    def test_incomplete_address(self, validator):
        """Each missing address field is reported."""
        result = validator.validate({"address": "1 Main St", "state": "TX"}, "address")

        assert result.is_valid is False
        assert result.errors == ["Missing city", "Missing zip_code"]

    def test_missing_address(self, validator):
        """An absent street address is an error."""
        result = validator.validate({"city": "Austin"}, "address")
        assert result.errors == ["Address is required"]

    # =========================================================================
    # Company Tests
    # =========================================================================

    def test_company_with_suffix(self, validator):
        """A legal suffix raises the confidence."""
        result = validator.validate({"company": "Acme Inc"}, "company")

        assert result.is_valid is True
        assert result.suggestions == []
        assert result.confidence == pytest.approx(0.8)

    def test_company_without_suffix(self, validator):
        """Suffixed variants are suggested."""
        result = validator.validate({"company": "Acme"}, "company")

        assert result.is_valid is True
        assert "Acme, LLC" in result.suggestions
        assert result.confidence == pytest.approx(0.5)

    def test_unsupported_type(self, validator):
        """Unknown validation types are rejected."""
        with pytest.raises(InvalidInputError):
            validator.validate({"ssn": "123"}, "ssn")
