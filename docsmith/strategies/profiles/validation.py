"""Validation of profile data before it is stored or used for auto-fill."""

import logging
import re
from collections.abc import Mapping
from typing import Any

from docsmith.interfaces.errors import InvalidInputError
from docsmith.models import ValidationResult

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_ZIP_CODE = re.compile(r"^\d{5}(-\d{4})?$")
_NON_DIGIT = re.compile(r"\D")

COMMON_TLDS = (".com", ".org", ".net", ".edu", ".gov", ".co")

EMAIL_DOMAIN_TYPOS = {
    "gmial.com": "gmail.com",
    "gmal.com": "gmail.com",
    "gamil.com": "gmail.com",
    "hotmial.com": "hotmail.com",
    "yaho.com": "yahoo.com",
    "yahoocom": "yahoo.com",
    "outlok.com": "outlook.com",
}

US_STATE_CODES = frozenset(
    "AL AK AZ AR CA CO CT DE FL GA HI ID IL IN IA KS KY LA ME MD "
    "MA MI MN MS MO MT NE NV NH NJ NM NY NC ND OH OK OR PA RI SC "
    "SD TN TX UT VT VA WA WV WI WY".split()
)

COMPANY_SUFFIXES = ("Inc", "LLC", "Corp", "Ltd", "GmbH", "Co", "Corporation")

ADDRESS_FIELDS = ("address", "city", "state", "zip_code")


class DataValidator:
    """Validates email, phone, address and company data."""

    def validate(self, data: Mapping[str, Any], data_type: str) -> ValidationResult:
        """Validate data of the given type.

        Raises:
            InvalidInputError: If data_type is not supported.
        """
        data = data or {}
        logger.debug(f"Validating {data_type} data")
        match data_type:
            case "email":
                return self.validate_email(data.get("email"))
            case "phone":
                return self.validate_phone(data.get("phone"))
            case "address":
                return self.validate_address(data)
            case "company":
                return self.validate_company(data.get("company"))
            case _:
                raise InvalidInputError(f"Unsupported validation type: {data_type}")

    def validate_email(self, email: Any) -> ValidationResult:
        if not email:
            return ValidationResult(errors=["Email is required"])

        email = str(email)

        is_format_valid = _EMAIL.match(email) is not None
        domain = email.split("@", 1)[1] if "@" in email else ""
        is_common_domain = bool(domain) and domain.endswith(COMMON_TLDS)

        suggestions = []
        if domain in EMAIL_DOMAIN_TYPOS:
            suggestions.append(email.replace(domain, EMAIL_DOMAIN_TYPOS[domain]))

        confidence = 0.0
        if is_format_valid:
            confidence += 0.5
        if is_common_domain:
            confidence += 0.3
        if not suggestions:
            confidence += 0.2

        return ValidationResult(
            is_valid=is_format_valid,
            errors=[] if is_format_valid else ["Invalid email format"],
            suggestions=suggestions,
            confidence=round(confidence, 2),
        )

    def validate_phone(self, phone: Any) -> ValidationResult:
        if not phone:
            return ValidationResult(errors=["Phone number is required"])

        digits = _NON_DIGIT.sub("", str(phone))
        is_valid_length = 10 <= len(digits) <= 15

        suggestions = []
        if len(digits) == 10:
            suggestions.append(f"({digits[:3]}) {digits[3:6]}-{digits[6:]}")
        elif len(digits) == 11 and digits.startswith("1"):
            suggestions.append(f"+1 ({digits[1:4]}) {digits[4:7]}-{digits[7:]}")

        return ValidationResult(
            is_valid=is_valid_length,
            errors=[] if is_valid_length else ["Invalid phone number length"],
            suggestions=suggestions,
            confidence=0.8 if is_valid_length else 0.2,
        )

    def validate_address(self, data: Mapping[str, Any]) -> ValidationResult:
        if not data or not data.get("address"):
            return ValidationResult(errors=["Address is required"])

        data = dict(data)
        if "zip_code" not in data and "zipCode" in data:
            data["zip_code"] = data["zipCode"]

        missing = [name for name in ADDRESS_FIELDS if not data.get(name)]

        confidence = 0.0
        if not missing:
            confidence = 0.6
            if _ZIP_CODE.match(str(data["zip_code"])):
                confidence += 0.2
            if str(data["state"]).upper() in US_STATE_CODES:
                confidence += 0.2

        return ValidationResult(
            is_valid=not missing,
            errors=[f"Missing {name}" for name in missing],
            confidence=round(confidence, 2),
        )

    def validate_company(self, company: Any) -> ValidationResult:
        if not company:
            return ValidationResult(errors=["Company name is required"])

        company = str(company)

        has_suffix = any(
            company.endswith(f" {suffix}") or company.endswith(f", {suffix}")
            for suffix in COMPANY_SUFFIXES
        )
        return ValidationResult(
            is_valid=True,
            suggestions=[] if has_suffix else [f"{company}, {suffix}" for suffix in COMPANY_SUFFIXES],
            confidence=0.8 if has_suffix else 0.5,
        )
