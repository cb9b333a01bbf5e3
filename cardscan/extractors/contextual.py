"""
Contextual extraction: name, organization, title and address.

These fields have no fixed syntax, so they are chosen from the residual
lines (lines not consumed by email/phone/website extraction) by scoring
each line against position, shape and vocabulary heuristics.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from cardscan.extractors.lines import CONTACT_PREFIX_PATTERN, line_has_email, line_has_phone
from cardscan.extractors.vocabulary import (
    ADDRESS_KEYWORD_PATTERNS,
    CITY_PATTERN,
    COMPANY_INDICATOR_PATTERN,
    COMPANY_SHAPE_PATTERN,
    COMPANY_TYPE_NOUNS,
    COUNTRY_PATTERN,
    FREE_MAIL_DOMAINS,
    HONORIFIC_PATTERN,
    KNOWN_BRANDS,
    LOCALITY_PATTERN,
    MARKED_PO_BOX_PATTERN,
    PO_BOX_PATTERN,
    TITLE_KEYWORD_PATTERN,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Name
# ============================================================================

NAME_MIN_SCORE = 40.0
NAME_MAX_CONFIDENCE = 95.0
DISQUALIFIED = -1000.0

NAME_UNSAFE_PATTERN = re.compile(r"[^a-zA-Z\s.'-]")
NAME_WORD_PATTERNS = (
    re.compile(r"^[A-Z][a-z]+$"),
    re.compile(r"^[A-Z]\.?$"),
    re.compile(r"^[A-Z][a-z]+-[A-Z][a-z]+$"),
    re.compile(r"^[A-Z]'[A-Z][a-z]+$"),
)
URL_SUFFIX_PATTERN = re.compile(r"\.(?:com|org|net|ae|co)\b", re.IGNORECASE)
NAME_ADDRESS_PATTERN = re.compile(
    r"P\.?\s?O\.?\s*Box|\b(?:Abu\s+Dhabi|Dubai|Sharjah|Ajman|UAE|street|road|avenue|"
    r"building|tower|floor|suite)\b",
    re.IGNORECASE,
)

# Canonical name shapes and their bonuses
NAME_SHAPES = (
    (re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+$"), 50.0),
    (re.compile(r"^[A-Z][a-z]+\s+[A-Z]\.?\s+[A-Z][a-z]+$"), 45.0),
    (re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+\s+[A-Z][a-z]+$"), 40.0),
)

WORD_COUNT_SCORES = {2: 80.0, 3: 75.0, 4: 45.0}


@dataclass(frozen=True)
class NameCandidate:
    """A residual line scored as a possible person name."""

    value: str  # Line with any honorific removed
    score: float
    index: int  # Position among residual lines
    line: str
    prefix: str = ""  # Honorific removed from the line, e.g. "Dr."


def _position_score(index: int) -> float:
    if index == 0:
        return 60.0
    if index == 1:
        return 80.0
    if index == 2:
        return 70.0
    if index <= 4:
        return 40.0
    if index <= 7:
        return 20.0
    return -20.0


def score_name_line(line: str, index: int) -> float:
    """
    Score how much a line looks like a person's name.

    Lines with company indicators are disqualified outright. Everything
    else is additive: word count, capitalization, position on the card and
    length add points; digits, email/URL fragments and address words
    subtract them.
    """
    stripped = " ".join(line.split())
    honorific = HONORIFIC_PATTERN.match(stripped)
    body = stripped[honorific.end() :].strip() if honorific else stripped

    if not body or COMPANY_INDICATOR_PATTERN.search(stripped):
        return DISQUALIFIED

    name_safe = " ".join(NAME_UNSAFE_PATTERN.sub("", body).split())
    if len(name_safe) < 2:
        return DISQUALIFIED

    words = [w for w in name_safe.split() if len(w) > 1]
    score = 0.0

    if len(words) == 1:
        score += 40.0 if len(name_safe) >= 3 else 0.0
    elif len(words) >= 5:
        score -= 40.0
    else:
        score += WORD_COUNT_SCORES.get(len(words), 0.0)

    if words and all(any(p.match(w) for p in NAME_WORD_PATTERNS) for w in words):
        score += 70.0

    score += _position_score(index)

    if 3 <= len(stripped) <= 50:
        score += 35.0
        if 5 <= len(stripped) <= 30:
            score += 25.0

    if body == body.upper() and len(body) > 8:
        score -= 70.0
    if honorific:
        score += 30.0

    if any(c.isascii() and c.isdigit() for c in stripped):
        score -= 60.0
    if "@" in stripped:
        score -= 150.0
    if URL_SUFFIX_PATTERN.search(stripped):
        score -= 150.0
    if NAME_ADDRESS_PATTERN.search(stripped):
        score -= 100.0
    if TITLE_KEYWORD_PATTERN.search(stripped):
        score -= 80.0

    for pattern, bonus in NAME_SHAPES:
        if pattern.match(body):
            score += bonus
            break

    return score


def split_honorific(line: str) -> tuple[str, str]:
    """Split "Dr. Sarah Ahmed" into ("Dr.", "Sarah Ahmed")."""
    stripped = " ".join(line.split())
    honorific = HONORIFIC_PATTERN.match(stripped)
    if not honorific:
        return "", stripped
    return honorific.group(0).strip(), stripped[honorific.end() :].strip()


def rank_name_candidates(lines: list[str]) -> list[NameCandidate]:
    """Score every residual line, best first; ties keep card order."""
    candidates = []
    for index, line in enumerate(lines):
        score = score_name_line(line, index)
        if score <= DISQUALIFIED:
            continue
        prefix, value = split_honorific(line)
        candidates.append(
            NameCandidate(value=value, score=score, index=index, line=line, prefix=prefix)
        )
    candidates.sort(key=lambda c: c.score, reverse=True)
    return candidates


def best_name(lines: list[str]) -> NameCandidate | None:
    """The winning name candidate, or None when no line scores above the threshold."""
    ranked = rank_name_candidates(lines)
    if not ranked or ranked[0].score <= NAME_MIN_SCORE:
        logger.debug("No name candidate above %.0f", NAME_MIN_SCORE)
        return None
    best = ranked[0]
    logger.debug("Selected name %r (score %.0f)", best.value, best.score)
    return best


def select_name(lines: list[str]) -> tuple[str, float]:
    """
    Pick the person name from residual lines.

    Any honorific is removed from the returned name; best_name() keeps it
    on the candidate's ``prefix``.

    Returns:
        (name, confidence); ("", 0.0) when no line scores above the threshold
    """
    best = best_name(lines)
    if best is None:
        return "", 0.0
    return best.value, min(NAME_MAX_CONFIDENCE, best.score)


# ============================================================================
# Organization and title
# ============================================================================

BRAND_TYPE_CONFIDENCE = 80.0
DOMAIN_TYPE_CONFIDENCE = 75.0
BRAND_CONFIDENCE = 70.0
DOMAIN_CONFIDENCE = 60.0
TITLE_CONFIDENCE = 70.0


@dataclass(frozen=True)
class OrgTitle:
    organization: str = ""
    title: str = ""
    organization_confidence: float = 0.0
    title_confidence: float = 0.0


def domain_token(emails: list[str]) -> str:
    """
    Left-most host label of the first email's domain, lowercased.

    Free-mail providers say nothing about the employer and yield "".
    """
    if not emails or "@" not in emails[0]:
        return ""
    label = emails[0].split("@", 1)[1].split(".", 1)[0].strip().lower()
    if label in FREE_MAIL_DOMAINS:
        return ""
    return label


def _has_type_noun(line: str) -> bool:
    lowered = line.lower()
    return any(noun in lowered for noun in COMPANY_TYPE_NOUNS)


def _is_brand(line: str, token: str) -> bool:
    lowered = line.strip().lower()
    return lowered in KNOWN_BRANDS or bool(token and token in lowered)


def select_org_and_title(lines: list[str], name: str, emails: list[str]) -> OrgTitle:
    """
    Pick organization and job title from residual lines.

    The organization is composed from a brand line (a known logo word or a
    line containing the email domain) and a company-type line such as
    "electromechanical". Composition falls back to the email domain alone.

    Args:
        lines: Residual lines in card order
        name: Selected name, honorific removed; its line is never reused
        emails: Extracted emails, first one used for the domain

    Returns:
        OrgTitle with empty strings for fields not found
    """
    token = domain_token(emails)
    candidates = [
        (i, line)
        for i, line in enumerate(lines)
        if line and not (name and split_honorific(line)[1] == name)
    ]

    type_index, type_line = next(
        (
            (i, line)
            for i, line in candidates
            if _has_type_noun(line) and not TITLE_KEYWORD_PATTERN.search(line)
        ),
        (None, ""),
    )

    organization = ""
    org_confidence = 0.0
    used = {type_index} if type_index is not None else set()

    if type_line and _is_brand(type_line, token):
        organization, org_confidence = type_line, BRAND_TYPE_CONFIDENCE
    else:
        brand_index, brand_line = next(
            (
                (i, line)
                for i, line in candidates
                if i not in used
                and _is_brand(line, token)
                and not TITLE_KEYWORD_PATTERN.search(line)
            ),
            (None, ""),
        )
        if brand_line:
            used.add(brand_index)
            display = token.capitalize() if brand_line.lower() == token else brand_line
            if type_line:
                organization = f"{display} {type_line}"
                org_confidence = BRAND_TYPE_CONFIDENCE
            else:
                organization, org_confidence = display, BRAND_CONFIDENCE
        elif token and type_line:
            organization = f"{token.capitalize()} {type_line}"
            org_confidence = DOMAIN_TYPE_CONFIDENCE
        elif token:
            organization, org_confidence = token.capitalize(), DOMAIN_CONFIDENCE

    title = next(
        (
            line
            for i, line in candidates
            if i not in used
            and TITLE_KEYWORD_PATTERN.search(line)
            and not COMPANY_SHAPE_PATTERN.match(line)
        ),
        "",
    )

    logger.debug("Organization %r, title %r", organization, title)
    return OrgTitle(
        organization=organization,
        title=title,
        organization_confidence=org_confidence,
        title_confidence=TITLE_CONFIDENCE if title else 0.0,
    )


# ============================================================================
# Address
# ============================================================================

ADDRESS_MIN_SCORE = 15.0
ADDRESS_MAX_LINES = 3
ADDRESS_CONFIDENCE = 70.0
ADDRESS_MARKER_PATTERN = re.compile(r"^A\s+(?=\S)")
FIVE_DIGIT_PATTERN = re.compile(r"\b\d{5}\b", re.ASCII)
FOUR_DIGIT_PATTERN = re.compile(r"\b\d{4}\b", re.ASCII)


def score_address_line(
    line: str, index: int, total: int, emails: list[str], phones: list[str]
) -> float:
    """
    Score how much a line looks like part of a postal address.

    Length and near-end bonuses only apply to lines with some other address
    evidence, so ordinary text near the bottom of a card does not qualify.
    """
    if (
        line_has_email(line, emails)
        or line_has_phone(line, phones)
        or "@" in line
        or (CONTACT_PREFIX_PATTERN.match(line) and not line.startswith("A "))
    ):
        return -100.0

    score = 0.0
    if MARKED_PO_BOX_PATTERN.match(line):
        score += 80.0
    elif PO_BOX_PATTERN.search(line):
        score += 70.0

    score += 40.0 * sum(1 for p in ADDRESS_KEYWORD_PATTERNS if p.search(line))

    if any(c.isascii() and c.isdigit() for c in line):
        score += 30.0
    if FIVE_DIGIT_PATTERN.search(line):
        score += 35.0
    if FOUR_DIGIT_PATTERN.search(line):
        score += 25.0
    if COUNTRY_PATTERN.search(line):
        score += 60.0
    if CITY_PATTERN.search(line):
        score += 50.0
    if LOCALITY_PATTERN.search(line):
        score += 30.0

    if score > 0:
        if 10 <= len(line) <= 120:
            score += 20.0
        if index >= total - 5:
            score += 30.0
        elif index >= total - 8:
            score += 20.0

    return score


def _is_country_line(line: str) -> bool:
    return bool(COUNTRY_PATTERN.search(line) or CITY_PATTERN.search(line))


def select_address(
    lines: list[str], emails: list[str], phones: list[str]
) -> tuple[str, float]:
    """
    Assemble the address from the best-scoring lines.

    Takes up to three qualifying lines, best scores first, and joins them in
    card order. When one is a P.O. Box and another
    is a country or city line, only those two are joined.

    Args:
        lines: All cleaned lines in card order
        emails: Extracted emails (their lines are excluded)
        phones: Extracted phones (their lines are excluded)

    Returns:
        (address, confidence); ("", 0.0) when nothing qualifies
    """
    total = len(lines)
    scored = [
        (score_address_line(line, i, total, emails, phones), i, line)
        for i, line in enumerate(lines)
    ]
    qualifying = [item for item in scored if item[0] > ADDRESS_MIN_SCORE]
    qualifying.sort(key=lambda item: item[0], reverse=True)
    # Best lines are chosen by score but read in card order
    top = sorted(qualifying[:ADDRESS_MAX_LINES], key=lambda item: item[1])
    selected = [line for _score, _i, line in top]

    if not selected:
        return "", 0.0

    po_line = next((line for line in selected if PO_BOX_PATTERN.search(line)), None)
    country_line = next(
        (line for line in selected if line != po_line and _is_country_line(line)), None
    )
    if po_line and country_line:
        parts = [po_line, country_line]
    else:
        parts = selected

    address = ", ".join(ADDRESS_MARKER_PATTERN.sub("", part).strip() for part in parts)
    logger.debug("Selected address %r", address)
    return address, ADDRESS_CONFIDENCE
