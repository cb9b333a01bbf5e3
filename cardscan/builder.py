"""
Contact assembly.

Turns the outputs of the extractors into a Contact: typed phone slots,
name components and address components. Combined ``phone`` and
``address`` fields are always derived from their components.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from cardscan.extractors.fields import SCHEME_PATTERN, split_phone_marker, website_from_email
from cardscan.extractors.vocabulary import (
    COUNTRY_EXACT_PATTERN,
    HONORIFIC_PATTERN,
    PO_BOX_PATTERN,
    SUFFIX_PATTERN,
)
from cardscan.models import TYPED_PHONE_FIELDS, Contact

logger = logging.getLogger(__name__)

# Phone marker -> Contact field
MARKER_SLOTS = {
    "T": "work_phone",
    "F": "fax_phone",
    "M": "mobile_phone",
    "H": "home_phone",
}

# Slots filled by untyped numbers after the first one
OVERFLOW_SLOTS = ("home_phone", "work_phone")

ZIPCODE_PATTERN = re.compile(r"\b\d{4,6}\b", re.ASCII)


@dataclass
class ExtractedFields:
    """Everything the extractors found on one card, best candidates first."""

    name: str = ""  # Without honorific
    prefix: str = ""  # Honorific printed before the name, e.g. "Dr."
    emails: list[str] = field(default_factory=list)
    phones: list[str] = field(default_factory=list)  # With T/F/M/H markers
    websites: list[str] = field(default_factory=list)
    organization: str = ""
    title: str = ""
    address: str = ""


# ============================================================================
# Phones
# ============================================================================


def assign_phones(phones: list[str]) -> dict[str, str]:
    """
    Partition phones into typed slots.

    Marked numbers go to their slot (first one wins). The first unmarked
    number is taken as mobile; further unmarked numbers fill home, then
    work. This relies on card order, so a landline printed first without a
    label ends up as mobile.

    Args:
        phones: Extracted phone strings, possibly with a marker

    Returns:
        Mapping of every typed phone field to its number or ""
    """
    slots = dict.fromkeys(TYPED_PHONE_FIELDS, "")
    untyped = []

    for phone in phones:
        marker, number = split_phone_marker(phone)
        slot = MARKER_SLOTS.get(marker)
        if slot is None:
            untyped.append(number)
        elif not slots[slot]:
            slots[slot] = number
        else:
            logger.debug("Second %s number ignored: %s", slot, number)

    for position, number in enumerate(untyped):
        if position == 0 and not slots["mobile_phone"]:
            slots["mobile_phone"] = number
            continue
        slot = next((s for s in OVERFLOW_SLOTS if not slots[s]), None)
        if slot is None:
            logger.debug("No free phone slot for %s", number)
            continue
        slots[slot] = number

    return slots


# ============================================================================
# Name
# ============================================================================


def split_name(name: str) -> tuple[str, str, str, str]:
    """
    Split a full name into (prefix, first_name, last_name, suffix).

    The first remaining token is the first name and everything after it is
    the last name; a single token leaves the last name empty.

    Example:
        >>> split_name("Dr. Mary Anne Smith Jr.")
        ('Dr.', 'Mary', 'Anne Smith', 'Jr.')
    """
    rest = " ".join((name or "").split())
    prefix = suffix = ""

    honorific = HONORIFIC_PATTERN.match(rest)
    if honorific:
        prefix = honorific.group(0).strip()
        rest = rest[honorific.end() :]

    suffix_match = SUFFIX_PATTERN.match(rest)
    if suffix_match:
        rest = suffix_match.group(1)
        suffix = suffix_match.group(0)[len(rest) :].strip(" ,")

    tokens = rest.split()
    if not tokens:
        return prefix, "", "", suffix
    return prefix, tokens[0], " ".join(tokens[1:]), suffix


# ============================================================================
# Address
# ============================================================================


def _is_po_box(part: str) -> bool:
    return bool(PO_BOX_PATTERN.search(part))


def parse_address(address: str) -> dict[str, str]:
    """
    Split an address string into street, city, state, zipcode and country.

    Parts are separated by commas and assigned by position:

    - 3+ parts: the first is the street unless it is a P.O. Box (street
      stays empty). If the last part is a known country, it is the country,
      the one before it the city and anything between them the state.
      Otherwise parts[1] is the city and the rest is the state.
    - 2 parts: street, city.
    - 1 part: street if it is a P.O. Box, otherwise city.

    A 4-6 digit token anywhere is the zipcode and is removed from its part.

    Example:
        >>> parse_address("P.O Box 25475, Abu Dhabi, UAE")
        {'street': '', 'city': 'Abu Dhabi', 'state': '', 'zipcode': '25475', 'country': 'UAE'}
    """
    result = {"street": "", "city": "", "state": "", "zipcode": "", "country": ""}
    parts = [p.strip() for p in (address or "").split(",") if p.strip()]
    if not parts:
        return result

    po_box = [_is_po_box(p) for p in parts]

    for i, part in enumerate(parts):
        match = ZIPCODE_PATTERN.search(part)
        if match:
            result["zipcode"] = match.group(0)
            parts[i] = " ".join((part[: match.start()] + part[match.end() :]).split())
            break

    if len(parts) >= 3:
        result["street"] = "" if po_box[0] else parts[0]
        if COUNTRY_EXACT_PATTERN.match(parts[-1]):
            result["country"] = parts[-1]
            result["city"] = parts[-2]
            result["state"] = ", ".join(p for p in parts[1:-2] if p)
        else:
            result["city"] = parts[1]
            result["state"] = ", ".join(p for p in parts[2:] if p)
    elif len(parts) == 2:
        result["street"], result["city"] = parts
    elif po_box[0]:
        result["street"] = parts[0]
    else:
        result["city"] = parts[0]

    return result


# ============================================================================
# Builder
# ============================================================================


def normalize_website(website: str) -> str:
    if not website:
        return ""
    return website if SCHEME_PATTERN.match(website) else f"https://{website}"


class ContactBuilder:
    """
    Assemble a Contact from extracted fields.

    The builder never fails: missing inputs give empty strings.

    Example:
        >>> fields = ExtractedFields(name="Johnny Jabbour", phones=["T +971 2 445 0707"])
        >>> ContactBuilder().build(fields).work_phone
        '+971 2 445 0707'
    """

    def build(self, fields: ExtractedFields) -> Contact:
        contact = Contact()

        contact.name = fields.name
        contact.prefix, contact.first_name, contact.last_name, contact.suffix = split_name(
            fields.name
        )
        contact.prefix = fields.prefix or contact.prefix

        contact.email = fields.emails[0] if fields.emails else ""

        for slot, number in assign_phones(fields.phones).items():
            setattr(contact, slot, number)
        contact.phone = contact.compose_phone()

        contact.organization = fields.organization
        contact.title = fields.title

        for key, value in parse_address(fields.address).items():
            setattr(contact, key, value)
        contact.address = contact.compose_address()

        if fields.websites:
            contact.website = normalize_website(fields.websites[0])
        else:
            contact.website = website_from_email(contact.email)

        logger.debug("Built contact: %s", contact)
        return contact
