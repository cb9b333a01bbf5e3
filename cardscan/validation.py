"""
Contact validation.

Validation never changes a contact. It reports:

- errors, which make the contact invalid (missing name, no way to reach
  the person, malformed email, no usable phone number)
- warnings for weak extraction evidence and likely OCR artifacts
- suggestions, including alternative values seen on the card

Rules are small classes run in order by ContactValidator. Rules that judge
OCR quality only run when field confidences are supplied; a manually
entered contact gets the required-field checks only.
"""

from __future__ import annotations

import functools
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from spellchecker import SpellChecker

from cardscan.extractors.fields import phone_digits
from cardscan.models import Contact

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)
DOMAIN_PATTERN = re.compile(
    r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*\.[A-Za-z]{2,}$"
)

MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15
LOW_OCR_CONFIDENCE = 50.0
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50
DOMAIN_MATCH_CHARS = 6

# field -> (high above, medium above)
RELIABILITY_THRESHOLDS: dict[str, tuple[float, float]] = {
    "name": (80.0, 60.0),
    "email": (85.0, 70.0),
    "phone": (80.0, 60.0),
    "website": (80.0, 60.0),
    "organization": (75.0, 50.0),
    "title": (75.0, 50.0),
    "address": (75.0, 50.0),
}

# OCR artifact patterns
ONE_RUN_PATTERN = re.compile(r"[1Il]{2,}")
ZERO_RUN_PATTERN = re.compile(r"[0O]{2,}")
NAME_OCR_PATTERNS = (
    re.compile(r"rn"),
    re.compile(r"\s{2,}"),
    re.compile(r"[^\w\s\-.']"),
)
EMAIL_OCR_PATTERN = re.compile(r"rn|cl|[0-9][a-z]|@{2,}|\.{2,}")
PHONE_OCR_PATTERN = re.compile(r"[A-Za-z][0-9]|[0-9][A-Za-z]")
WEBSITE_OCR_PATTERN = re.compile(r"rn|\.{2,}|,|0[a-z]")

TITLE_WORD_PATTERN = re.compile(r"[A-Za-z]+")
MIN_SPELLCHECK_LENGTH = 3


@dataclass
class ValidationIssue:
    """A problem found in a contact."""

    type: str  # "missing_name", "low_reliability", "ocr_artifact", etc.
    message: str
    severity: str  # "error", "warning", "suggestion"
    field: str = ""  # Affected contact field, "" for the whole contact


@dataclass
class ValidationResult:
    """
    Outcome of validating one contact.

    ``field_reliability`` maps field name to "high", "medium" or "low" for
    fields that are present and have a confidence; other fields are absent.
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    field_reliability: dict[str, str] = field(default_factory=dict)
    issues: list[ValidationIssue] = field(default_factory=list)


@dataclass(frozen=True)
class ValidationContext:
    """What a rule gets to look at."""

    contact: Contact
    confidences: dict[str, float] | None = None
    overall_confidence: float | None = None
    alternatives: dict[str, list[str]] = field(default_factory=dict)

    @property
    def has_confidences(self) -> bool:
        return self.confidences is not None

    def confidence(self, name: str) -> float:
        return float((self.confidences or {}).get(name, 0.0))


def _valid_phone(phone: str) -> bool:
    return MIN_PHONE_DIGITS <= len(phone_digits(phone)) <= MAX_PHONE_DIGITS


def _website_ok(website: str) -> bool:
    return bool(URL_PATTERN.match(website) or DOMAIN_PATTERN.match(website))


def _field_value(contact: Contact, name: str) -> str:
    if name == "phone":
        phones = contact.phones()
        return phones[0] if phones else ""
    return getattr(contact, name, "")


def _tier(confidence: float, thresholds: tuple[float, float]) -> str:
    high, medium = thresholds
    if confidence > high:
        return "high"
    if confidence > medium:
        return "medium"
    return "low"


def reliability_tiers(contact: Contact, confidences: dict[str, float] | None) -> dict[str, str]:
    """
    Bucket present fields into reliability tiers.

    Structurally invalid values (bad email, website or phone) are always
    "low" whatever their confidence.

    Args:
        contact: Contact to assess
        confidences: Field confidences 0-100; None means unknown

    Returns:
        Field name -> "high" | "medium" | "low"; empty when confidences is None
    """
    if confidences is None:
        return {}

    tiers = {}
    for name, thresholds in RELIABILITY_THRESHOLDS.items():
        if not _field_value(contact, name):
            continue
        tier = _tier(float(confidences.get(name, 0.0)), thresholds)
        if name == "email" and not EMAIL_PATTERN.match(contact.email):
            tier = "low"
        elif name == "website" and not _website_ok(contact.website):
            tier = "low"
        elif name == "phone" and not any(_valid_phone(p) for p in contact.phones()):
            tier = "low"
        tiers[name] = tier
    return tiers


@functools.lru_cache(maxsize=1)
def _spell_checker() -> SpellChecker:
    logger.debug("Loading English dictionary for title checks")
    return SpellChecker()


# ============================================================================
# Rules
# ============================================================================


class ValidationRule(ABC):
    """Abstract base for validation rules."""

    name: str = "base"

    # Rules judging OCR quality only make sense with field confidences
    requires_confidences: bool = False

    @abstractmethod
    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        """Check a contact for issues.

        Returns list of issues found (empty if all good).
        """
        pass


class NameRequiredRule(ValidationRule):
    name = "name_required"

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        if context.contact.name.strip():
            return []
        return [ValidationIssue("missing_name", "Name is required", "error", "name")]


class ContactMethodRule(ValidationRule):
    """At least one of email or a non-fax phone must be present."""

    name = "contact_method"

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        if context.contact.has_contact_method():
            return []
        return [
            ValidationIssue(
                type="missing_contact_method",
                message="At least one contact method (email or phone) is required",
                severity="error",
            )
        ]


class EmailFormatRule(ValidationRule):
    name = "email_format"

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        email = context.contact.email
        if not email or EMAIL_PATTERN.match(email):
            return []
        return [
            ValidationIssue("invalid_email", "Email address format is invalid", "error", "email")
        ]


class PhoneNumberRule(ValidationRule):
    """If phones are present, at least one must have 7-15 digits."""

    name = "phone_number"

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        phones = context.contact.phones()
        if not phones or any(_valid_phone(p) for p in phones):
            return []
        return [
            ValidationIssue(
                type="invalid_phone",
                message="At least one valid phone number is required",
                severity="error",
                field="phone",
            )
        ]


class OverallConfidenceRule(ValidationRule):
    name = "overall_confidence"
    requires_confidences = True

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        confidence = context.overall_confidence
        if confidence is None or confidence >= LOW_OCR_CONFIDENCE:
            return []
        return [
            ValidationIssue(
                type="low_ocr_confidence",
                message=f"Low OCR confidence ({confidence:g}%). "
                "Please review all fields carefully.",
                severity="warning",
            )
        ]


class FieldReliabilityRule(ValidationRule):
    """Warn about fields in the medium and low reliability tiers."""

    name = "field_reliability"
    requires_confidences = True

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        issues = []
        for name, tier in reliability_tiers(context.contact, context.confidences).items():
            if tier == "high":
                continue
            label = "moderate" if tier == "medium" else "low"
            issues.append(
                ValidationIssue(
                    type=f"{tier}_reliability",
                    message=f"{name.capitalize()} field has {label} confidence "
                    f"({context.confidence(name):g}%). Please verify.",
                    severity="warning",
                    field=name,
                )
            )
        return issues


def name_has_ocr_artifacts(name: str) -> bool:
    """
    Look for character patterns OCR tends to produce in names.

    Runs of 1/I/l are suspicious unless they are plain "ll" as in "Bill";
    runs of 0/O only when they include a zero.
    """
    if any(run != "l" * len(run) for run in ONE_RUN_PATTERN.findall(name)):
        return True
    if any("0" in run for run in ZERO_RUN_PATTERN.findall(name)):
        return True
    return any(p.search(name) for p in NAME_OCR_PATTERNS)


class NameQualityRule(ValidationRule):
    name = "name_quality"
    requires_confidences = True

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        contact = context.contact
        full_name = contact.name or f"{contact.first_name} {contact.last_name}".strip()
        if not full_name:
            return []

        issues = []
        if name_has_ocr_artifacts(full_name):
            issues.append(
                ValidationIssue(
                    "ocr_artifact",
                    "Name may contain OCR recognition errors (unusual characters or spacing)",
                    "warning",
                    "name",
                )
            )
            issues.append(
                ValidationIssue(
                    "ocr_hint",
                    'Check for incorrect characters like "0" instead of "O" '
                    'or "1" instead of "l"',
                    "suggestion",
                    "name",
                )
            )
        if len(full_name) < MIN_NAME_LENGTH:
            issues.append(
                ValidationIssue("short_name", "Name seems unusually short", "warning", "name")
            )
        if len(full_name) > MAX_NAME_LENGTH:
            issues.append(
                ValidationIssue(
                    "long_name",
                    "Name seems unusually long - may include title or organization",
                    "warning",
                    "name",
                )
            )
        return issues


class EmailQualityRule(ValidationRule):
    name = "email_quality"
    requires_confidences = True

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        email = context.contact.email
        if not email or not EMAIL_PATTERN.match(email):
            return []

        issues = []
        if EMAIL_OCR_PATTERN.search(email):
            issues.append(
                ValidationIssue(
                    "ocr_artifact",
                    "Email may contain OCR errors (check @ symbol and domain)",
                    "warning",
                    "email",
                )
            )
            issues.append(
                ValidationIssue(
                    "ocr_hint",
                    'Common OCR email errors: "rn" -> "m", "cl" -> "d", "0" -> "o"',
                    "suggestion",
                    "email",
                )
            )
        domain = email.split("@", 1)[1]
        if not DOMAIN_PATTERN.match(domain):
            issues.append(
                ValidationIssue(
                    "unusual_domain",
                    "Email domain appears unusual - please verify",
                    "warning",
                    "email",
                )
            )
        return issues


class PhoneQualityRule(ValidationRule):
    name = "phone_quality"
    requires_confidences = True

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        issues = []
        for position, phone in enumerate(context.contact.phones(), start=1):
            digits = len(phone_digits(phone))
            if digits < MIN_PHONE_DIGITS:
                issues.append(
                    ValidationIssue(
                        "short_phone",
                        f"Phone number {position} seems too short",
                        "warning",
                        "phone",
                    )
                )
            elif digits > MAX_PHONE_DIGITS:
                issues.append(
                    ValidationIssue(
                        "long_phone", f"Phone number {position} seems too long", "warning", "phone"
                    )
                )
            if PHONE_OCR_PATTERN.search(phone):
                issues.append(
                    ValidationIssue(
                        "ocr_artifact",
                        f"Phone number {position} may contain OCR errors",
                        "warning",
                        "phone",
                    )
                )
                issues.append(
                    ValidationIssue(
                        "ocr_hint",
                        'Common phone OCR errors: "S" -> "5", "O" -> "0", "I" -> "1"',
                        "suggestion",
                        "phone",
                    )
                )
        return issues


class WebsiteQualityRule(ValidationRule):
    name = "website_quality"
    requires_confidences = True

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        website = context.contact.website
        if not website:
            return []

        issues = []
        if not _website_ok(website):
            issues.append(
                ValidationIssue(
                    "invalid_website", "Website URL format may be incorrect", "warning", "website"
                )
            )
        if WEBSITE_OCR_PATTERN.search(website):
            issues.append(
                ValidationIssue(
                    "ocr_artifact", "Website URL may contain OCR errors", "warning", "website"
                )
            )
        return issues


class CrossFieldRule(ValidationRule):
    """Compare fields that should agree with each other."""

    name = "cross_field"
    requires_confidences = True

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        contact = context.contact
        issues = []

        if contact.email and contact.organization and "@" in contact.email:
            domain = contact.email.split("@", 1)[1].lower()
            first_word = contact.organization.split()[0].lower()
            stem = re.sub(r"[^a-z0-9]", "", first_word)[:DOMAIN_MATCH_CHARS]
            if stem and stem not in domain:
                issues.append(
                    ValidationIssue(
                        "domain_mismatch",
                        "Email domain doesn't match organization - verify both are correct",
                        "suggestion",
                        "organization",
                    )
                )

        if contact.name and contact.first_name and contact.last_name:
            from_parts = f"{contact.first_name} {contact.last_name}".strip().lower()
            parts = (contact.prefix, contact.first_name, contact.last_name, contact.suffix)
            with_affixes = " ".join(p for p in parts if p).lower()
            if contact.name.lower() not in (from_parts, with_affixes):
                issues.append(
                    ValidationIssue(
                        "name_mismatch",
                        "Name field inconsistent with first/last name fields",
                        "warning",
                        "name",
                    )
                )
        return issues


class MissingFieldRule(ValidationRule):
    name = "missing_field"
    requires_confidences = True

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        issues = []
        if not context.contact.email:
            issues.append(
                ValidationIssue(
                    "missing_email",
                    "Email address not found - this will limit contact sharing options",
                    "warning",
                    "email",
                )
            )
        if not context.contact.phones():
            issues.append(
                ValidationIssue(
                    "missing_phone",
                    "No phone numbers found - this will limit contact options",
                    "warning",
                    "phone",
                )
            )
        return issues


class TitleSpellingRule(ValidationRule):
    """
    Flag title words the English dictionary does not know.

    The dictionary's best correction is offered as a suggestion, never
    applied. Acronyms (all caps) are skipped.
    """

    name = "title_spelling"
    requires_confidences = True

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        title = context.contact.title
        if not title:
            return []

        words = [
            w.lower()
            for w in TITLE_WORD_PATTERN.findall(title)
            if len(w) >= MIN_SPELLCHECK_LENGTH and not w.isupper()
        ]
        if not words:
            return []

        spell = _spell_checker()
        issues = []
        for word in sorted(spell.unknown(words)):
            correction = spell.correction(word)
            if correction and correction != word:
                message = f"Title word '{word}' may be misspelled - did you mean '{correction}'?"
            else:
                message = f"Title word '{word}' is not a known English word - please verify"
            issues.append(ValidationIssue("title_spelling", message, "suggestion", "title"))
        return issues


class AlternativesRule(ValidationRule):
    """Surface other candidate values seen on the card."""

    name = "alternatives"

    def check(self, context: ValidationContext) -> list[ValidationIssue]:
        return [
            ValidationIssue(
                "alternatives",
                f"Alternative {name} values found: {', '.join(values)}",
                "suggestion",
                name,
            )
            for name, values in context.alternatives.items()
            if values
        ]


DEFAULT_RULES: tuple[type[ValidationRule], ...] = (
    NameRequiredRule,
    ContactMethodRule,
    EmailFormatRule,
    PhoneNumberRule,
    OverallConfidenceRule,
    FieldReliabilityRule,
    NameQualityRule,
    EmailQualityRule,
    PhoneQualityRule,
    WebsiteQualityRule,
    CrossFieldRule,
    MissingFieldRule,
    TitleSpellingRule,
    AlternativesRule,
)


# ============================================================================
# Validator
# ============================================================================


class ContactValidator:
    """
    Run validation rules over a contact.

    Example:
        >>> validator = ContactValidator()
        >>> result = validator.validate(Contact(organization="Arco"))
        >>> result.is_valid, result.errors[0]
        (False, 'Name is required')
    """

    def __init__(self, rules: list[ValidationRule] | None = None):
        self.rules = rules if rules is not None else [rule() for rule in DEFAULT_RULES]

    def validate(
        self,
        contact: Contact,
        confidences: dict[str, float] | None = None,
        *,
        overall_confidence: float | None = None,
        alternatives: dict[str, list[str]] | None = None,
    ) -> ValidationResult:
        """
        Validate a contact.

        Args:
            contact: Contact to check (never modified)
            confidences: Per-field confidences 0-100, or None when unknown
            overall_confidence: OCR confidence for the whole card
            alternatives: Other candidate values per field

        Returns:
            ValidationResult, valid when no rule reports an error
        """
        context = ValidationContext(
            contact=contact,
            confidences=confidences,
            overall_confidence=overall_confidence,
            alternatives=alternatives or {},
        )

        issues: list[ValidationIssue] = []
        for rule in self.rules:
            if rule.requires_confidences and not context.has_confidences:
                continue
            found = rule.check(context)
            if found:
                logger.debug("Rule %s found %d issue(s)", rule.name, len(found))
            issues.extend(found)

        result = ValidationResult(
            is_valid=not any(i.severity == "error" for i in issues),
            errors=[i.message for i in issues if i.severity == "error"],
            warnings=[i.message for i in issues if i.severity == "warning"],
            suggestions=[i.message for i in issues if i.severity == "suggestion"],
            field_reliability=reliability_tiers(contact, confidences),
            issues=issues,
        )
        logger.info(
            "Validated contact: %d errors, %d warnings, %d suggestions",
            len(result.errors),
            len(result.warnings),
            len(result.suggestions),
        )
        return result


def validate_contact(
    contact: Contact,
    confidences: dict[str, float] | None = None,
    *,
    overall_confidence: float | None = None,
    alternatives: dict[str, list[str]] | None = None,
) -> ValidationResult:
    """Validate a contact. Convenience wrapper around ContactValidator."""
    return ContactValidator().validate(
        contact,
        confidences,
        overall_confidence=overall_confidence,
        alternatives=alternatives,
    )
