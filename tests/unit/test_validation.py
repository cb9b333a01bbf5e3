"""
Unit tests for contact validation.
"""

import pytest

from cardscan.models import Contact
from cardscan.validation import (
    ContactValidator,
    NameRequiredRule,
    ValidationContext,
    name_has_ocr_artifacts,
    reliability_tiers,
    validate_contact,
)


@pytest.fixture
def arco_contact() -> Contact:
    """Contact as built from the ARCO card."""
    return Contact(
        name="Johnny Jabbour",
        first_name="Johnny",
        last_name="Jabbour",
        email="johnny@arco.ae",
        phone="+971 2 445 0707 | +971 2 445 5052",
        work_phone="+971 2 445 0707",
        fax_phone="+971 2 445 5052",
        organization="Arco electromechanical",
        title="Business Development Manager",
        address="Abu Dhabi, 25475, UAE",
        city="Abu Dhabi",
        zipcode="25475",
        country="UAE",
        website="https://arco.ae",
    )


@pytest.fixture
def arco_confidences() -> dict[str, float]:
    return {
        "name": 95.0,
        "email": 90.0,
        "phone": 85.0,
        "website": 85.0,
        "organization": 80.0,
        "title": 80.0,
        "address": 80.0,
    }


class TestHardErrors:
    """Test blocking validation errors."""

    def test_missing_name(self, arco_contact):
        """An empty name is always invalid."""
        arco_contact.name = ""
        result = validate_contact(arco_contact)
        assert not result.is_valid
        assert any("Name" in error for error in result.errors)

    def test_organization_only(self):
        """A contact with no way to reach anyone is invalid."""
        result = validate_contact(Contact(organization="Arco"))
        assert not result.is_valid
        assert "At least one contact method (email or phone) is required" in result.errors

    def test_fax_is_not_a_contact_method(self):
        result = validate_contact(Contact(name="Johnny Jabbour", fax_phone="+971 2 445 5052"))
        assert not result.is_valid

    def test_malformed_email(self):
        result = validate_contact(Contact(name="Johnny Jabbour", email="johnny@arco"))
        assert "Email address format is invalid" in result.errors

    def test_no_valid_phone(self):
        result = validate_contact(Contact(name="Johnny Jabbour", mobile_phone="12345"))
        assert "At least one valid phone number is required" in result.errors

    def test_valid_contact(self, arco_contact, arco_confidences):
        result = validate_contact(arco_contact, arco_confidences, overall_confidence=85)
        assert result.is_valid
        assert result.errors == []
        assert not any("seems too" in w for w in result.warnings)


class TestManualEntry:
    """Contacts without confidences get hard checks only."""

    def test_no_reliability_without_confidences(self, arco_contact):
        result = validate_contact(arco_contact)
        assert result.field_reliability == {}
        assert result.warnings == []

    def test_soft_rules_skipped(self):
        """Odd-looking but complete manual entries are not second-guessed."""
        contact = Contact(name="J0O0hn  Smith", email="rn@arco.ae")
        result = validate_contact(contact)
        assert result.is_valid
        assert result.warnings == []


class TestReliability:
    """Test reliability tiers."""

    def test_tiers(self, arco_contact):
        tiers = reliability_tiers(
            arco_contact,
            {"name": 81, "email": 80, "phone": 50, "organization": 76, "title": 60, "address": 40},
        )
        assert tiers["name"] == "high"
        assert tiers["email"] == "medium"
        assert tiers["phone"] == "low"
        assert tiers["organization"] == "high"
        assert tiers["title"] == "medium"
        assert tiers["address"] == "low"

    def test_boundaries_are_exclusive(self, arco_contact):
        tiers = reliability_tiers(arco_contact, {"name": 80, "email": 85, "title": 50})
        assert tiers["name"] == "medium"
        assert tiers["email"] == "medium"
        assert tiers["title"] == "low"

    def test_missing_fields_not_assessed(self):
        tiers = reliability_tiers(Contact(name="Johnny Jabbour"), {"name": 90, "email": 90})
        assert tiers == {"name": "high"}

    def test_warning_names_percentage(self, arco_contact, arco_confidences):
        arco_confidences["name"] = 65.0
        result = validate_contact(arco_contact, arco_confidences)
        assert result.field_reliability["name"] == "medium"
        assert any("65%" in w and "Name" in w for w in result.warnings)

    def test_low_confidence_never_blocks(self, arco_contact):
        result = validate_contact(arco_contact, {}, overall_confidence=20)
        assert result.is_valid
        assert any("Low OCR confidence (20%)" in w for w in result.warnings)


class TestSoftChecks:
    """Test OCR artifact and consistency warnings."""

    @pytest.mark.parametrize(
        ("name", "suspicious"),
        [
            ("Johnny Jabbour", False),
            ("Bill Gallagher", False),
            ("Wi1liam Smith", True),
            ("J0hn Smith", False),
            ("Jo00hn Smith", True),
            ("Bjorn Smith", True),
            ("John  Smith", True),
            ("John Smith!", True),
            ("Mary O'Neil-Hart", False),
        ],
    )
    def test_name_ocr_artifacts(self, name, suspicious):
        assert name_has_ocr_artifacts(name) is suspicious

    def test_email_ocr_artifact(self, arco_contact, arco_confidences):
        arco_contact.email = "johnny@arc0o.ae"
        result = validate_contact(arco_contact, arco_confidences)
        assert "Email may contain OCR errors (check @ symbol and domain)" in result.warnings

    def test_phone_ocr_artifact(self, arco_contact, arco_confidences):
        arco_contact.work_phone = "+971 2 445 O7O7"
        result = validate_contact(arco_contact, arco_confidences)
        assert any("may contain OCR errors" in w for w in result.warnings)

    def test_domain_matches_organization(self, arco_contact, arco_confidences):
        result = validate_contact(arco_contact, arco_confidences)
        assert not any("doesn't match organization" in s for s in result.suggestions)

    def test_domain_mismatch(self, arco_contact, arco_confidences):
        arco_contact.organization = "Sicuro Security"
        result = validate_contact(arco_contact, arco_confidences)
        assert any("doesn't match organization" in s for s in result.suggestions)

    def test_name_inconsistent_with_parts(self, arco_contact, arco_confidences):
        arco_contact.last_name = "Jabour"
        result = validate_contact(arco_contact, arco_confidences)
        assert "Name field inconsistent with first/last name fields" in result.warnings

    def test_missing_email_notice(self, arco_contact, arco_confidences):
        arco_contact.email = ""
        result = validate_contact(arco_contact, arco_confidences)
        assert result.is_valid
        assert any("Email address not found" in w for w in result.warnings)

    def test_title_spelling_suggestion(self, arco_contact, arco_confidences):
        """Unknown title words are flagged, never corrected."""
        arco_contact.title = "Business Developmnet Manager"
        result = validate_contact(arco_contact, arco_confidences)
        assert any("developmnet" in s for s in result.suggestions)
        assert arco_contact.title == "Business Developmnet Manager"

    def test_alternatives_become_suggestions(self, arco_contact):
        result = validate_contact(
            arco_contact, alternatives={"email": ["info@arco.ae"], "phone": []}
        )
        assert result.suggestions == ["Alternative email values found: info@arco.ae"]


class TestContactValidator:
    """Test the rule runner."""

    def test_custom_rules(self):
        validator = ContactValidator(rules=[NameRequiredRule()])
        result = validator.validate(Contact())
        assert result.errors == ["Name is required"]

    def test_issues_carry_field(self):
        issues = NameRequiredRule().check(ValidationContext(contact=Contact()))
        assert issues[0].field == "name"
        assert issues[0].severity == "error"

    def test_contact_not_modified(self, arco_contact, arco_confidences):
        before = arco_contact.to_dict()
        validate_contact(arco_contact, arco_confidences)
        assert arco_contact.to_dict() == before
