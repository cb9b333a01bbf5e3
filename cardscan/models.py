"""
Data models for cardscan.

These models carry values between pipeline stages. Inputs and intermediate
results are frozen; the Contact is the one mutable record, because users
correct it field by field after a scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cardscan.validation import ValidationResult


@dataclass(frozen=True)
class RawRecognitionResult:
    """Text and confidence (0-100) produced by the OCR engine."""

    text: str
    confidence: float

    def __post_init__(self):
        # Engines report -1 for "unknown"; never let that leak downstream
        object.__setattr__(self, "text", self.text or "")
        object.__setattr__(self, "confidence", max(0.0, min(100.0, float(self.confidence))))


@dataclass(frozen=True)
class CleanedText:
    """Cleaned, order-preserving lines plus the cleaner's quality score."""

    lines: tuple[str, ...]
    quality_score: float

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class FieldCandidate:
    """A detected field value."""

    value: str
    confidence: float  # 0-100
    source: str  # Name of the pattern that found it


@dataclass(frozen=True)
class ColorInfo:
    """A dominant color found in a card image."""

    hex: str  # "#rrggbb"
    rgb: str  # "rgb(r, g, b)"
    frequency: float  # 0.0-1.0 share of sampled pixels


# Contact field name -> external (camelCase) key
_CONTACT_KEYS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "mobile_phone": "mobilePhone",
    "work_phone": "workPhone",
    "home_phone": "homePhone",
    "fax_phone": "faxPhone",
}

TYPED_PHONE_FIELDS = ("mobile_phone", "work_phone", "home_phone", "fax_phone")
ADDRESS_FIELDS = ("street", "city", "state", "zipcode", "country")


@dataclass
class Contact:
    """
    A contact reconstructed from a business card.

    Every field is a string and absent values are empty strings, so a scan
    that finds nothing still returns a usable Contact.

    ``phone`` and ``address`` are combined fields. The builder always fills
    them from the typed components, see compose_phone() and compose_address().

    Example:
        >>> contact = cardscan.scan_business_card("card.jpg")
        >>> contact.first_name, contact.work_phone
        ('Johnny', '+971 2 445 0707')
    """

    name: str = ""
    first_name: str = ""
    last_name: str = ""
    prefix: str = ""
    suffix: str = ""

    email: str = ""

    phone: str = ""
    mobile_phone: str = ""
    work_phone: str = ""
    home_phone: str = ""
    fax_phone: str = ""

    organization: str = ""
    title: str = ""
    department: str = ""

    address: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zipcode: str = ""
    country: str = ""

    website: str = ""
    message1: str = ""
    message2: str = ""
    notes: str = ""

    def compose_phone(self) -> str:
        """Join the typed phone fields that are set with " | "."""
        return " | ".join(getattr(self, f) for f in TYPED_PHONE_FIELDS if getattr(self, f))

    def compose_address(self) -> str:
        """Join the address components that are set with ", "."""
        return ", ".join(getattr(self, f) for f in ADDRESS_FIELDS if getattr(self, f))

    def phones(self) -> list[str]:
        """
        Individual phone numbers.

        The typed fields when any is set; otherwise the combined ``phone``
        field, for contacts entered with a single number.
        """
        typed = [getattr(self, f) for f in TYPED_PHONE_FIELDS if getattr(self, f)]
        if typed:
            return typed
        return [self.phone] if self.phone else []

    def has_contact_method(self) -> bool:
        return bool(
            self.email or self.phone or self.mobile_phone or self.work_phone or self.home_phone
        )

    def to_dict(self) -> dict[str, str]:
        """
        Convert to a dictionary with camelCase keys.

        Returns:
            Mapping in the shape UI and vCard layers expect
        """
        return {_CONTACT_KEYS.get(f.name, f.name): getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Contact:
        """
        Build a Contact from a dictionary.

        Accepts both camelCase and snake_case keys; unknown keys are ignored
        and None becomes "".
        """
        by_key = {v: k for k, v in _CONTACT_KEYS.items()}
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = by_key.get(key, key)
            if name in known:
                values[name] = "" if value is None else str(value)
        return cls(**values)


@dataclass
class ScanResult:
    """
    Detailed result of scanning one card.

    ``confidence`` is the minimum of the OCR engine's confidence and the
    cleaner's quality score. ``field_confidences`` holds the per-field
    extraction confidences (0-100) the validator turns into reliability tiers.
    """

    contact: Contact
    confidence: float = 0.0
    field_confidences: dict[str, float] = field(default_factory=dict)
    alternative_values: dict[str, list[str]] = field(default_factory=dict)
    cleaned: CleanedText | None = None
    logo_colors: list[ColorInfo] = field(default_factory=list)
    processing_log: list[str] = field(default_factory=list)

    def validate(self) -> ValidationResult:
        """Validate the contact with this scan's confidences and alternatives."""
        from cardscan.validation import validate_contact

        return validate_contact(
            self.contact,
            self.field_confidences,
            overall_confidence=self.confidence,
            alternatives=self.alternative_values,
        )
