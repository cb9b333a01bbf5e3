"""
Unit tests for email, phone and website extraction.
"""

import pytest

from cardscan.extractors.fields import (
    EMAIL_CONFIDENCE,
    PHONE_CONFIDENCE,
    candidate_values,
    extract_emails,
    extract_phones,
    extract_websites,
    is_valid_email,
    is_valid_phone,
    normalize_phone,
    phone_digits,
    split_phone_marker,
    website_from_email,
)


class TestEmailExtraction:
    """Test email extraction."""

    def test_prefixed_email(self):
        candidates = extract_emails("E johnny@arco.ae")
        assert candidate_values(candidates) == ["johnny@arco.ae"]
        assert candidates[0].confidence == EMAIL_CONFIDENCE
        assert candidates[0].source == "prefixed"

    def test_dedup_case_insensitive(self):
        """The same email in two casings is reported once, lowercased."""
        text = "E Johnny@ARCO.ae\nMail: johnny@arco.ae"
        assert candidate_values(extract_emails(text)) == ["johnny@arco.ae"]

    def test_split_domain_repaired(self):
        """A dropped dot before the TLD is restored."""
        assert candidate_values(extract_emails("johnny@sicurouae ae")) == [
            "johnny@sicurouae.ae"
        ]

    def test_first_seen_order(self):
        text = "sales@arco.ae\nE johnny@arco.ae"
        assert candidate_values(extract_emails(text)) == ["sales@arco.ae", "johnny@arco.ae"]

    def test_no_email(self):
        assert extract_emails("Johnny Jabbour\njohn@localhost") == []

    def test_empty_text(self):
        assert extract_emails("") == []

    @pytest.mark.parametrize(
        ("email", "valid"),
        [
            ("a@b.co", True),
            ("@arco.ae", False),
            ("a@b@c.com", False),
            ("a@arco", False),
            ("a@b.c", False),
        ],
    )
    def test_validity(self, email, valid):
        assert is_valid_email(email) is valid


class TestPhoneExtraction:
    """Test phone extraction and typing."""

    def test_tel_line_typed(self):
        """A T line keeps its marker."""
        candidates = extract_phones("T +971 2 4450707")
        assert candidate_values(candidates) == ["T +971 2 445 0707"]
        assert candidates[0].confidence == PHONE_CONFIDENCE

    def test_fax_line_typed(self):
        assert candidate_values(extract_phones("F +971 2 4455052")) == ["F +971 2 445 5052"]

    def test_mobile_label(self):
        assert candidate_values(extract_phones("Mobile: +971 50 123 4567")) == [
            "M +971 50 123 4567"
        ]

    def test_untyped_uae_mobile(self):
        assert candidate_values(extract_phones("+971 50 123 4567")) == ["+971 50 123 4567"]

    def test_same_number_reported_once(self):
        text = "T +971 2 4450707\nTel: +971 2 445 0707"
        assert candidate_values(extract_phones(text)) == ["T +971 2 445 0707"]

    def test_tel_and_fax_kept_apart(self):
        text = "T +971 2 4450707\nF +971 2 4455052"
        assert candidate_values(extract_phones(text)) == [
            "T +971 2 445 0707",
            "F +971 2 445 5052",
        ]

    def test_parenthesized_area_code(self):
        assert candidate_values(extract_phones("(555) 123-4567")) == ["5551234567"]

    def test_too_few_digits(self):
        assert extract_phones("Suite 123-45") == []

    def test_arabic_indic_digits_ignored(self):
        """Only ASCII digits make up a phone number."""
        assert extract_phones("هاتف ٠٥٠ ١٢٣ ٤٥٦٧") == []


class TestPhoneNormalization:
    """Test phone normalization helpers."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("+971 2 4450707", "+971 2 445 0707"),
            ("+971-50-123-4567", "+971 50 123 4567"),
            ("501234567", "+971 50 123 4567"),
            ("800123456", "+971 800123456"),
            ("+1 (555) 123-4567", "+15551234567"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_phone(raw) == expected

    def test_validity_bounds(self):
        assert is_valid_phone("1234567")
        assert not is_valid_phone("123456")
        assert not is_valid_phone("1234567890123456")

    def test_digits_are_ascii_only(self):
        assert phone_digits("T +971 ٢ 445 0707") == "9714450707"

    def test_split_marker(self):
        assert split_phone_marker("T +971 2 445 0707") == ("T", "+971 2 445 0707")
        assert split_phone_marker("+971 2 445 0707") == ("", "+971 2 445 0707")


class TestWebsiteExtraction:
    """Test website extraction."""

    def test_www_domain(self):
        assert candidate_values(extract_websites("www.arco.ae")) == ["www.arco.ae"]

    def test_full_url(self):
        assert candidate_values(extract_websites("https://arco.ae/contact")) == [
            "https://arco.ae/contact"
        ]

    def test_email_domain_not_a_website(self):
        """The domain part of an email is never reported."""
        assert extract_websites("E johnny@arco.ae") == []

    def test_trailing_punctuation(self):
        assert candidate_values(extract_websites("Visit arco.com.")) == ["arco.com"]

    def test_lowercased(self):
        assert candidate_values(extract_websites("WWW.ARCO.AE")) == ["www.arco.ae"]

    def test_bare_domain_covered_by_url(self):
        text = "https://www.arco.ae\narco.ae"
        assert candidate_values(extract_websites(text)) == ["https://www.arco.ae"]

    def test_website_from_email(self):
        assert website_from_email("johnny@arco.ae") == "https://arco.ae"
        assert website_from_email("") == ""
        assert website_from_email("not-an-email") == ""
