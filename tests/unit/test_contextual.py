"""
Unit tests for name, organization, title and address selection.
"""

import pytest

from cardscan.extractors.contextual import (
    ADDRESS_CONFIDENCE,
    best_name,
    rank_name_candidates,
    score_address_line,
    score_name_line,
    select_address,
    select_name,
    select_org_and_title,
)
from cardscan.normalizers.cleaner import clean_text

ARCO_RESIDUAL = [
    "ARCO",
    "electromechanical",
    "Johnny Jabbour",
    "Business Development Manager",
]


class TestNameSelection:
    """Test name scoring and selection."""

    def test_arco_card(self):
        name, confidence = select_name(ARCO_RESIDUAL)
        assert name == "Johnny Jabbour"
        assert confidence == 95.0

    def test_company_line_never_a_name(self):
        """A company indicator disqualifies the only candidate."""
        assert select_name(["ARCO Electromechanical LLC"]) == ("", 0.0)

    def test_company_indicator_is_whole_word(self):
        """'Est' inside a word is not the company abbreviation."""
        assert score_name_line("Ernest Hale", 1) > 0

    def test_email_line_never_a_name(self):
        assert select_name(["johnny@arco.ae"]) == ("", 0.0)

    def test_honorific_stripped(self):
        name, _ = select_name(["Dr. Sarah Ahmed"])
        assert name == "Sarah Ahmed"

    def test_honorific_kept_as_prefix(self):
        best = best_name(["ARCO", "Dr. Sarah Ahmed"])
        assert best.value == "Sarah Ahmed"
        assert best.prefix == "Dr."
        assert best.line == "Dr. Sarah Ahmed"

    def test_no_winner(self):
        assert best_name(["ARCO Electromechanical LLC"]) is None

    def test_title_line_loses_to_name(self):
        name, _ = select_name(["Sales Manager", "John Smith"])
        assert name == "John Smith"

    def test_position_breaks_ties(self):
        """The second line of a card is the likeliest name slot."""
        ranked = rank_name_candidates(["John Smith", "Jane Smith"])
        assert [c.value for c in ranked] == ["Jane Smith", "John Smith"]
        assert ranked[0].index == 1

    def test_address_line_penalized(self):
        assert score_name_line("Abu Dhabi", 2) < score_name_line("Omar Khalid", 2)

    def test_empty(self):
        assert select_name([]) == ("", 0.0)


class TestOrgAndTitle:
    """Test organization composition and title detection."""

    def test_domain_plus_type_noun(self):
        """An email domain combines with a company-type line."""
        result = select_org_and_title(["electromechanical"], "", ["ashwin@arco.ae"])
        assert result.organization == "Arco electromechanical"
        assert result.organization_confidence == 75.0

    def test_arco_card(self):
        result = select_org_and_title(ARCO_RESIDUAL, "Johnny Jabbour", ["johnny@arco.ae"])
        assert result.organization == "Arco electromechanical"
        assert result.organization_confidence == 80.0
        assert result.title == "Business Development Manager"
        assert result.title_confidence == 70.0

    def test_brand_and_type_on_one_line(self):
        result = select_org_and_title(
            ["Arco Electromechanical LLC", "John Smith"], "John Smith", ["john@arco.ae"]
        )
        assert result.organization == "Arco Electromechanical LLC"

    def test_known_brand_alone(self):
        result = select_org_and_title(["SICURO", "John Smith"], "John Smith", [])
        assert result.organization == "SICURO"
        assert result.organization_confidence == 70.0

    def test_domain_alone(self):
        result = select_org_and_title([], "", ["john@acme.com"])
        assert result.organization == "Acme"
        assert result.organization_confidence == 60.0

    def test_honorific_name_line_not_reused(self):
        """The name line is skipped even when its honorific was stripped from the name."""
        result = select_org_and_title(["Dr. Sarah Ahmed"], "Sarah Ahmed", ["sarah@ahmed.com"])
        assert result.organization == "Ahmed"
        assert result.organization_confidence == 60.0

    def test_free_mail_domain_ignored(self):
        result = select_org_and_title(["John Smith"], "John Smith", ["john@gmail.com"])
        assert result.organization == ""
        assert result.organization_confidence == 0.0

    def test_title_without_organization(self):
        result = select_org_and_title(
            ["John Smith", "Senior Software Engineer"], "John Smith", []
        )
        assert result.title == "Senior Software Engineer"
        assert result.organization == ""

    def test_type_noun_in_title_stays_title(self):
        """'Electrical Engineer' is a job title, not a company type."""
        result = select_org_and_title(["Electrical Engineer", "John Smith"], "John Smith", [])
        assert result.title == "Electrical Engineer"
        assert result.organization == ""

    def test_nothing_found(self):
        result = select_org_and_title([], "", [])
        assert (result.organization, result.title) == ("", "")


class TestAddressSelection:
    """Test address line scoring and assembly."""

    def test_arco_card(self, arco_card_text):
        lines = list(clean_text(arco_card_text, 80).lines)
        address, confidence = select_address(
            lines, ["johnny@arco.ae"], ["T +971 2 445 0707", "F +971 2 445 5052"]
        )
        assert address == "P.O Box 25475, Abu Dhabi, UAE"
        assert confidence == ADDRESS_CONFIDENCE

    def test_po_box_merged_with_country_line(self):
        lines = ["John Smith", "P.O. Box 1234", "Office 502, Al Bateen Tower", "Abu Dhabi, UAE"]
        address, _ = select_address(lines, [], [])
        assert address == "P.O. Box 1234, Abu Dhabi, UAE"

    def test_lines_joined_in_card_order(self):
        lines = ["John Smith", "Office 502, Al Bateen Tower", "Abu Dhabi, UAE"]
        address, _ = select_address(lines, [], [])
        assert address == "Office 502, Al Bateen Tower, Abu Dhabi, UAE"

    def test_contact_lines_excluded(self):
        assert score_address_line("E sales@dubai.ae", 5, 6, ["sales@dubai.ae"], []) < 0

    def test_no_address(self):
        assert select_address(["Johnny Jabbour", "Business Development Manager"], [], []) == (
            "",
            0.0,
        )

    @pytest.mark.parametrize("line", ["Business Development Manager", "Johnny Jabbour"])
    def test_position_alone_does_not_qualify(self, line):
        """Near-end and length bonuses need some address evidence."""
        assert score_address_line(line, 5, 6, [], []) == 0.0
