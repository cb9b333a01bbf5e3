"""
Exception classes for cardscan.

All cardscan exceptions inherit from CardScanError,
making it easy to catch all library errors.

Extraction itself never raises for missing or noisy text: absent fields
come back empty and are reported by the validator instead. Exceptions are
reserved for the OCR boundary and for invalid configuration.

Example:
    >>> try:
    ...     contact = cardscan.scan_business_card("card.jpg")
    ... except cardscan.RecognitionError as e:
    ...     print(f"Could not read the card: {e}")
    ... except cardscan.CardScanError as e:
    ...     print(f"cardscan error: {e}")
"""


class CardScanError(Exception):
    """
    Base exception for all cardscan errors.

    Catch this to handle any cardscan-specific error.
    """

    pass


class RecognitionError(CardScanError):
    """
    Raised when the OCR engine fails to recognize a card image.

    This is only raised after the reduced-parameter fallback pass has also
    failed, and only when config.on_recognition_error == "raise".
    """

    pass


class ImageLoadError(RecognitionError):
    """
    Raised when an image cannot be opened or decoded.

    Example:
        >>> recognizer.recognize(b"not an image")
        ImageLoadError: Cannot read card image: cannot identify image file
    """

    pass


class ConfigurationError(CardScanError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> CleanerConfig(garbage_penalty=-1)
        ConfigurationError: garbage_penalty must be >= 0, got -1
    """

    pass
