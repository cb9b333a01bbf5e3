"""
cardscan: Turn business card photos into structured contacts.

The library recognizes card text with Tesseract, removes OCR noise, picks
out emails, phones, websites, the person's name, organization, title and
address, and assembles them into a Contact. A separate validator reports
missing fields, weak extractions and likely OCR artifacts.

Example:
    >>> import cardscan
    >>> contact = cardscan.scan_business_card("card.jpg")
    >>> contact.name, contact.work_phone
    ('Johnny Jabbour', '+971 2 445 0707')

    >>> # Text already recognized elsewhere
    >>> result = cardscan.extract_contact(ocr_text, confidence=82)
    >>> report = result.validate()
    >>> report.is_valid, report.warnings
"""

from cardscan.builder import ContactBuilder, ExtractedFields
from cardscan.config import CleanerConfig, RecognizerConfig, ScanConfig
from cardscan.exceptions import (
    CardScanError,
    ConfigurationError,
    ImageLoadError,
    RecognitionError,
)
from cardscan.models import (
    CleanedText,
    ColorInfo,
    Contact,
    FieldCandidate,
    RawRecognitionResult,
    ScanResult,
)
from cardscan.scan import ContactExtractor, extract_contact, scan, scan_business_card
from cardscan.validation import (
    ContactValidator,
    ValidationIssue,
    ValidationResult,
    validate_contact,
)

__version__ = "0.1.0"
__all__ = [
    # Main API
    "scan_business_card",
    "scan",
    "extract_contact",
    "validate_contact",
    # Pipeline
    "ContactExtractor",
    "ContactBuilder",
    "ExtractedFields",
    "ContactValidator",
    # Configuration
    "ScanConfig",
    "CleanerConfig",
    "RecognizerConfig",
    # Models
    "Contact",
    "ScanResult",
    "RawRecognitionResult",
    "CleanedText",
    "FieldCandidate",
    "ColorInfo",
    "ValidationIssue",
    "ValidationResult",
    # Exceptions
    "CardScanError",
    "RecognitionError",
    "ImageLoadError",
    "ConfigurationError",
]
