"""
Line classification: separate contact lines from the residual pool.

After emails, phones and websites are extracted, the lines that carried
them are no longer candidates for name, organization or title. A line is
a contact line if any rule below holds; rules are independent predicates,
so their order does not matter.
"""

from __future__ import annotations

import re

from cardscan.extractors.fields import phone_digits, split_phone_marker, strip_scheme

CONTACT_PREFIX_PATTERN = re.compile(r"^[TFEA]\s")
LOOSE_PHONE_PATTERN = re.compile(r"\+?[\d\s\-()]{7,}", re.ASCII)

# Phones match a line when they share this many trailing digits
PHONE_SUFFIX_DIGITS = 7


def line_has_phone(line: str, phones: list[str]) -> bool:
    """True if the line's digits contain the last 7 digits of any phone."""
    line_digits = phone_digits(line)
    if not line_digits:
        return False
    for phone in phones:
        digits = phone_digits(split_phone_marker(phone)[1])
        if len(digits) >= PHONE_SUFFIX_DIGITS and digits[-PHONE_SUFFIX_DIGITS:] in line_digits:
            return True
    return False


def line_has_email(line: str, emails: list[str]) -> bool:
    lowered = line.lower()
    return any(email.lower() in lowered for email in emails if email)


def is_contact_line(
    line: str,
    emails: list[str],
    phones: list[str],
    websites: list[str],
) -> bool:
    """
    Check whether a line belongs to structured contact fields.

    Args:
        line: A cleaned card line
        emails: Extracted email addresses
        phones: Extracted phones (markers allowed)
        websites: Extracted websites (scheme allowed)

    Returns:
        True if the line should be excluded from the residual pool
    """
    lowered = line.lower()
    return (
        line_has_email(line, emails)
        or line_has_phone(line, phones)
        or any(strip_scheme(w).lower() in lowered for w in websites if strip_scheme(w))
        or bool(CONTACT_PREFIX_PATTERN.match(line))
        or "@" in line
        or bool(LOOSE_PHONE_PATTERN.search(line))
    )


def residual_lines(
    lines: list[str] | tuple[str, ...],
    emails: list[str],
    phones: list[str],
    websites: list[str],
) -> list[str]:
    """Lines left for name, organization and title detection, in card order."""
    return [
        line.strip()
        for line in lines
        if line.strip() and not is_contact_line(line.strip(), emails, phones, websites)
    ]
