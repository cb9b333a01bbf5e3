"""
Structured field extraction: emails, phones and websites.

Each extractor scans cleaned text line by line with an ordered pattern
table, validates every match, normalizes it and returns deduplicated
FieldCandidate values in first-seen order. Confidence is a fixed value per
field type: the patterns are either found or not, so there is no
meaningful per-match score.

Phone numbers keep their type through the pipeline as a one-letter marker
("T ", "F ", "M ", "H ") taken from the card's own labels. Untyped numbers
carry no marker.
"""

from __future__ import annotations

import logging
import re

from cardscan.models import FieldCandidate

logger = logging.getLogger(__name__)


# ============================================================================
# Confidences and limits
# ============================================================================

EMAIL_CONFIDENCE = 85.0
PHONE_CONFIDENCE = 80.0
WEBSITE_CONFIDENCE = 75.0

MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15

UAE_COUNTRY_CODE = "971"


# ============================================================================
# Email
# ============================================================================

EMAIL_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    # "johnny@sicurouae ae" -> johnny@sicurouae.ae
    (
        "split_domain",
        re.compile(r"([A-Za-z0-9._%+-]+)\s*@\s*([A-Za-z0-9]+)\s+([A-Za-z]{2,3})\b"),
    ),
    (
        "prefixed",
        re.compile(
            r"(?:\bE[:\s]+|\bE-?mail[:\s]*|\bMail[:\s]*)"
            r"([A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,})",
            re.IGNORECASE,
        ),
    ),
    ("general", re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")),
)


def is_valid_email(email: str) -> bool:
    """Structural check: one @, non-empty local part, dotted domain of length > 3."""
    parts = email.split("@")
    if len(parts) != 2:
        return False
    local, domain = parts
    return bool(local) and "." in domain and len(domain) > 3


def _email_from_match(name: str, match: re.Match[str]) -> str:
    if name == "split_domain":
        return f"{match.group(1)}@{match.group(2)}.{match.group(3)}"
    if name == "prefixed":
        return match.group(1)
    return match.group(0)


def extract_emails(text: str) -> list[FieldCandidate]:
    """
    Extract email addresses.

    Args:
        text: Cleaned card text

    Returns:
        Lowercased, deduplicated candidates in order of appearance
    """
    found: dict[str, str] = {}

    for line in (text or "").splitlines():
        for name, pattern in EMAIL_PATTERNS:
            for match in pattern.finditer(line):
                email = _email_from_match(name, match).strip(".").lower()
                if is_valid_email(email) and email not in found:
                    logger.debug("Found email %r via %s in %r", email, name, line)
                    found[email] = name

    return [FieldCandidate(email, EMAIL_CONFIDENCE, source) for email, source in found.items()]


# ============================================================================
# Phone
# ============================================================================

_SEP = r"[-.\s]?"
_NUMBER_BODY = r"(\+?\(?\d[\d\s\-.()]{5,}\d)"

# (name, pattern, marker); a marker of "" means untyped
PHONE_PATTERNS: tuple[tuple[str, re.Pattern[str], str], ...] = (
    ("uae_mobile", re.compile(rf"\+?971{_SEP}5[0568]{_SEP}\d{{3}}{_SEP}\d{{4}}", re.ASCII), ""),
    ("uae_landline", re.compile(rf"\+?971{_SEP}[234679]{_SEP}\d{{3}}{_SEP}\d{{4}}", re.ASCII), ""),
    (
        "tel_prefixed",
        re.compile(rf"(?<![A-Za-z])(?:T|Tel|Phone|Office|P)\b[:.]?\s*{_NUMBER_BODY}", re.ASCII),
        "T",
    ),
    ("fax_prefixed", re.compile(rf"(?<![A-Za-z])(?:F|Fax)\b[:.]?\s*{_NUMBER_BODY}", re.ASCII), "F"),
    (
        "mobile_prefixed",
        re.compile(rf"(?<![A-Za-z])(?:M|Mob|Mobile|Cell)\b[:.]?\s*{_NUMBER_BODY}", re.ASCII),
        "M",
    ),
    (
        "home_prefixed",
        re.compile(rf"(?<![A-Za-z])(?:H|Home)\b[:.]?\s*{_NUMBER_BODY}", re.ASCII),
        "H",
    ),
    (
        "international",
        re.compile(rf"\+\d{{1,3}}{_SEP}\(?\d{{1,4}}\)?{_SEP}\d{{3,4}}{_SEP}\d{{3,4}}", re.ASCII),
        "",
    ),
    ("grouped", re.compile(rf"\b\d{{3}}{_SEP}\d{{3}}{_SEP}\d{{4}}\b", re.ASCII), ""),
    ("grouped_parens", re.compile(rf"\(\d{{3}}\){_SEP}\d{{3}}{_SEP}\d{{4}}\b", re.ASCII), ""),
)

PHONE_MARKERS = ("T", "F", "M", "H")
MARKER_PATTERN = re.compile(r"^([TFMH])\s+")


def normalize_phone(raw: str) -> str:
    """
    Normalize a phone number for display.

    Keeps digits and a leading "+", adds +971 to 9-digit UAE local numbers
    and groups UAE numbers as "+971 2 445 0707" / "+971 50 123 4567".
    """
    cleaned = re.sub(r"[^0-9+]", "", raw)
    cleaned = cleaned[:1] + cleaned[1:].replace("+", "")

    if len(cleaned) == 9 and cleaned[0] in "23456789":
        cleaned = "+" + UAE_COUNTRY_CODE + cleaned

    if cleaned.startswith("+" + UAE_COUNTRY_CODE) or cleaned.startswith(UAE_COUNTRY_CODE):
        number = re.sub(r"^\+?971", "", cleaned).lstrip("0")
        if len(number) == 9 and number.startswith("5"):
            return f"+971 {number[:2]} {number[2:5]} {number[5:]}"
        if len(number) == 8:
            return f"+971 {number[:1]} {number[1:4]} {number[4:]}"
        return "+971 " + number

    return cleaned


def phone_digits(phone: str) -> str:
    return re.sub(r"[^0-9]", "", phone)


def is_valid_phone(phone: str) -> bool:
    return MIN_PHONE_DIGITS <= len(phone_digits(phone)) <= MAX_PHONE_DIGITS


def split_phone_marker(phone: str) -> tuple[str, str]:
    """Split "T +971 2 445 0707" into ("T", "+971 2 445 0707")."""
    match = MARKER_PATTERN.match(phone)
    if match:
        return match.group(1), phone[match.end() :]
    return "", phone


def extract_phones(text: str) -> list[FieldCandidate]:
    """
    Extract phone numbers with their type markers.

    Patterns run in priority order, so UAE mobiles come before landlines and
    generic matches. A number seen by several patterns is reported once, at
    its first position; a labelled sighting upgrades an unlabelled one.

    Args:
        text: Cleaned card text

    Returns:
        Candidates whose values look like "T +971 2 445 0707" or "+1234567890"
    """
    # digits -> [number, marker, source]
    numbers: dict[str, list[str]] = {}
    lines = (text or "").splitlines()

    for name, pattern, marker in PHONE_PATTERNS:
        for line in lines:
            for match in pattern.finditer(line):
                raw = match.group(1) if match.groups() else match.group(0)
                number = normalize_phone(raw)
                if not is_valid_phone(number):
                    continue
                _merge_phone(numbers, phone_digits(number), number, marker, name)

    candidates = []
    for number, marker, source in numbers.values():
        value = f"{marker} {number}" if marker else number
        candidates.append(FieldCandidate(value, PHONE_CONFIDENCE, source))
    logger.debug("Extracted phones: %s", [c.value for c in candidates])
    return candidates


def _merge_phone(
    numbers: dict[str, list[str]], digits: str, number: str, marker: str, source: str
) -> None:
    for known_digits, entry in list(numbers.items()):
        if digits in known_digits:
            if marker and not entry[1]:
                entry[1] = marker
            return
        if known_digits in digits:
            # Longer reading of a number we already have: replace in place
            rebuilt = {}
            for key, value in numbers.items():
                if key == known_digits:
                    rebuilt[digits] = [number, entry[1] or marker, entry[2]]
                else:
                    rebuilt[key] = value
            numbers.clear()
            numbers.update(rebuilt)
            return
    numbers[digits] = [number, marker, source]


# ============================================================================
# Website
# ============================================================================

WEBSITE_TLDS = (
    "co.ae",
    "co.uk",
    "com",
    "org",
    "net",
    "edu",
    "gov",
    "ae",
    "io",
    "tech",
    "biz",
    "info",
    "co",
    "me",
    "tv",
    "cc",
)
_TLD_GROUP = "|".join(re.escape(t) for t in WEBSITE_TLDS)

WEBSITE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "url",
        re.compile(
            r"https?://(?:www\.)?[-a-zA-Z0-9:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
            r"[-a-zA-Z0-9()%_+.~#?&/=]*",
            re.IGNORECASE,
        ),
    ),
    (
        "domain",
        re.compile(
            rf"(?<![\w@./-])(?:www\.)?[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?"
            rf"\.(?:{_TLD_GROUP})\b(?![\w@-]|\.\w)",
            re.IGNORECASE,
        ),
    ),
)

SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def is_valid_website(website: str) -> bool:
    return "@" not in website and "." in website and len(website) > 5


def strip_scheme(website: str) -> str:
    return SCHEME_PATTERN.sub("", website)


def _site_key(website: str) -> str:
    return strip_scheme(website).removeprefix("www.")


def extract_websites(text: str) -> list[FieldCandidate]:
    """
    Extract websites written on the card.

    Email domains are never reported here; see website_from_email().

    Args:
        text: Cleaned card text

    Returns:
        Lowercased candidates as written (scheme kept if present)
    """
    found: dict[str, str] = {}

    for name, pattern in WEBSITE_PATTERNS:
        for line in (text or "").splitlines():
            for match in pattern.finditer(line):
                website = match.group(0).rstrip(".,;:/)").lower()
                if not is_valid_website(website):
                    continue
                # A bare domain already covered by a full URL is the same site
                key = _site_key(website)
                if any(_site_key(known).startswith(key) for known in found):
                    continue
                logger.debug("Found website %r via %s", website, name)
                found[website] = name

    return [FieldCandidate(w, WEBSITE_CONFIDENCE, source) for w, source in found.items()]


def website_from_email(email: str) -> str:
    """Derive "https://<domain>" from an email address, or "" if there is none."""
    if not email or "@" not in email:
        return ""
    domain = email.split("@", 1)[1].strip().lower()
    return f"https://{domain}" if domain else ""


def candidate_values(candidates: list[FieldCandidate]) -> list[str]:
    return [c.value for c in candidates]
