"""
Business card scanning orchestrator.

This module provides the public pipeline functions, wiring together:
- TesseractRecognizer (image -> raw text + confidence)
- TextCleaner (noise removal, quality score)
- Field extractors (email, phone, website)
- Line classifier and contextual extractors (name, organization, title, address)
- ContactBuilder (assembly into a Contact)

Validation is a separate step, see cardscan.validation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cardscan.builder import ContactBuilder, ExtractedFields
from cardscan.config import ScanConfig
from cardscan.exceptions import RecognitionError
from cardscan.extractors.contextual import (
    ADDRESS_CONFIDENCE,
    NAME_MAX_CONFIDENCE,
    NAME_MIN_SCORE,
    best_name,
    rank_name_candidates,
    select_address,
    select_org_and_title,
)
from cardscan.extractors.fields import (
    EMAIL_CONFIDENCE,
    PHONE_CONFIDENCE,
    WEBSITE_CONFIDENCE,
    candidate_values,
    extract_emails,
    extract_phones,
    extract_websites,
    split_phone_marker,
)
from cardscan.extractors.lines import residual_lines
from cardscan.models import CleanedText, Contact, RawRecognitionResult, ScanResult
from cardscan.normalizers.cleaner import TextCleaner
from cardscan.ocr.colors import extract_logo_colors
from cardscan.ocr.recognizer import ImageInput, Recognizer, recognize_with_fallback

logger = logging.getLogger(__name__)

MAX_EMAILS = 3
MAX_PHONES = 5
MAX_WEBSITES = 2
MAX_NAME_ALTERNATIVES = 2

# A website derived from the email domain is a guess, not a reading
DERIVED_WEBSITE_CONFIDENCE = 70.0


# ═══════════════════════════════════════════════════════════════════════════════
# Contact extraction
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class ExtractionContext:
    """Context accumulated while extracting one card."""

    raw: RawRecognitionResult
    config: ScanConfig
    processing_log: list[str] = field(default_factory=list)

    cleaned: CleanedText | None = None
    emails: list[str] = field(default_factory=list)
    phones: list[str] = field(default_factory=list)
    websites: list[str] = field(default_factory=list)
    residual: list[str] = field(default_factory=list)
    field_confidences: dict[str, float] = field(default_factory=dict)
    alternatives: dict[str, list[str]] = field(default_factory=dict)


class ContactExtractor:
    """
    Runs the text stages of the pipeline: clean, extract, classify, build.

    The extractor holds only configuration, so one instance can process
    any number of cards.
    """

    def __init__(self, config: ScanConfig | None = None) -> None:
        self.config = config or ScanConfig()
        self.cleaner = TextCleaner(self.config.cleaner)
        self.builder = ContactBuilder()

    def extract(self, raw: RawRecognitionResult) -> ScanResult:
        """
        Extract a contact from recognized text.

        Args:
            raw: Text and confidence from the OCR engine

        Returns:
            ScanResult; an empty Contact if nothing usable was found
        """
        ctx = ExtractionContext(raw=raw, config=self.config)
        ctx.processing_log.append(f"Recognized {len(raw.text.splitlines())} lines")

        self._clean(ctx)
        self._extract_fields(ctx)
        ctx.residual = residual_lines(ctx.cleaned.lines, ctx.emails, ctx.phones, ctx.websites)
        ctx.processing_log.append(f"{len(ctx.residual)} residual lines for name/organization")

        fields = self._extract_contextual(ctx)
        contact = self.builder.build(fields)
        self._finish_confidences(ctx, contact)
        self._collect_alternatives(ctx, contact)

        confidence = min(raw.confidence, ctx.cleaned.quality_score)
        ctx.processing_log.append(f"Overall confidence {confidence:.1f}")
        logger.info(
            "Extracted contact %r (confidence %.1f)", contact.name or "<no name>", confidence
        )

        return ScanResult(
            contact=contact,
            confidence=confidence,
            field_confidences=ctx.field_confidences,
            alternative_values=ctx.alternatives,
            cleaned=ctx.cleaned,
            processing_log=ctx.processing_log,
        )

    def _clean(self, ctx: ExtractionContext) -> None:
        ctx.cleaned = self.cleaner.clean(ctx.raw.text, ctx.raw.confidence)
        ctx.processing_log.append(
            f"Cleaned to {len(ctx.cleaned.lines)} lines "
            f"(quality {ctx.cleaned.quality_score:.1f})"
        )

    def _extract_fields(self, ctx: ExtractionContext) -> None:
        text = ctx.cleaned.text
        ctx.emails = candidate_values(extract_emails(text))[:MAX_EMAILS]
        ctx.phones = candidate_values(extract_phones(text))[:MAX_PHONES]
        ctx.websites = candidate_values(extract_websites(text))[:MAX_WEBSITES]

        ctx.field_confidences["email"] = EMAIL_CONFIDENCE if ctx.emails else 0.0
        ctx.field_confidences["phone"] = PHONE_CONFIDENCE if ctx.phones else 0.0
        ctx.field_confidences["website"] = WEBSITE_CONFIDENCE if ctx.websites else 0.0

        ctx.processing_log.append(
            f"Found {len(ctx.emails)} emails, {len(ctx.phones)} phones, "
            f"{len(ctx.websites)} websites"
        )

    def _extract_contextual(self, ctx: ExtractionContext) -> ExtractedFields:
        candidate = best_name(ctx.residual)
        name = candidate.value if candidate else ""
        prefix = candidate.prefix if candidate else ""
        name_confidence = min(NAME_MAX_CONFIDENCE, candidate.score) if candidate else 0.0

        org_title = select_org_and_title(ctx.residual, name, ctx.emails)
        address, address_confidence = select_address(
            list(ctx.cleaned.lines), ctx.emails, ctx.phones
        )

        ctx.field_confidences["name"] = name_confidence
        ctx.field_confidences["organization"] = org_title.organization_confidence
        ctx.field_confidences["title"] = org_title.title_confidence
        ctx.field_confidences["address"] = address_confidence if address else 0.0

        ctx.processing_log.append(
            f"Name {name!r}, organization {org_title.organization!r}, "
            f"title {org_title.title!r}, address {address!r}"
        )
        return ExtractedFields(
            name=name,
            prefix=prefix,
            emails=ctx.emails,
            phones=ctx.phones,
            websites=ctx.websites,
            organization=org_title.organization,
            title=org_title.title,
            address=address,
        )

    @staticmethod
    def _finish_confidences(ctx: ExtractionContext, contact: Contact) -> None:
        if contact.website and not ctx.websites:
            ctx.field_confidences["website"] = DERIVED_WEBSITE_CONFIDENCE
            ctx.processing_log.append(f"Website derived from email: {contact.website}")

    @staticmethod
    def _collect_alternatives(ctx: ExtractionContext, contact: Contact) -> None:
        placed = set(contact.phones())
        alternatives = {
            "name": [
                c.value
                for c in rank_name_candidates(ctx.residual)
                if c.score > NAME_MIN_SCORE and c.value != contact.name
            ][:MAX_NAME_ALTERNATIVES],
            "email": ctx.emails[1:],
            "phone": [
                number
                for number in (split_phone_marker(p)[1] for p in ctx.phones)
                if number not in placed
            ],
            "website": ctx.websites[1:],
        }
        ctx.alternatives = {key: values for key, values in alternatives.items() if values}


def extract_contact(
    text: str,
    confidence: float,
    config: ScanConfig | None = None,
) -> ScanResult:
    """
    Extract a contact from already-recognized card text.

    Args:
        text: Raw OCR text, lines separated by newlines
        confidence: OCR engine confidence, 0-100
        config: Optional scan configuration

    Returns:
        ScanResult with the contact, confidences and alternatives

    Example:
        >>> result = extract_contact("Johnny Jabbour\\nE johnny@arco.ae", 85)
        >>> result.contact.email
        'johnny@arco.ae'
    """
    raw = RawRecognitionResult(text=text, confidence=confidence)
    return ContactExtractor(config).extract(raw)


# ═══════════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════════


def scan(
    image: ImageInput,
    config: ScanConfig | None = None,
    recognizer: Recognizer | None = None,
) -> ScanResult:
    """
    Scan a business card image.

    Args:
        image: Path, bytes or PIL image of the card
        config: Optional scan configuration
        recognizer: OCR engine to use instead of Tesseract

    Returns:
        ScanResult with the contact and everything learned about it

    Raises:
        RecognitionError: If OCR fails and config.on_recognition_error is "raise"

    Example:
        >>> result = cardscan.scan("card.jpg")
        >>> result.contact.name, result.confidence
        ('Johnny Jabbour', 82.0)
        >>> result.validate().is_valid
        True
    """
    config = config or ScanConfig()

    try:
        if recognizer is not None:
            raw = recognizer.recognize(image)
        else:
            raw = recognize_with_fallback(image, config.recognizer)
    except RecognitionError as e:
        if config.on_recognition_error == "raise":
            raise
        logger.warning("Card recognition failed, returning empty contact: %s", e)
        return ScanResult(contact=Contact(), processing_log=[f"Recognition failed: {e}"])

    result = ContactExtractor(config).extract(raw)

    if config.extract_logo_colors:
        result.logo_colors = extract_logo_colors(image)
        result.processing_log.append(f"Extracted {len(result.logo_colors)} logo colors")

    return result


def scan_business_card(
    image: ImageInput,
    config: ScanConfig | None = None,
    recognizer: Recognizer | None = None,
) -> Contact:
    """
    Scan a business card image into a Contact.

    Same as scan(), returning only the contact.
    """
    return scan(image, config, recognizer).contact
