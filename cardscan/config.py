"""
Configuration for cardscan.

All options have sensible defaults; the extraction pipeline runs with no
configuration at all. The quality-score constants of the text cleaner are
heuristic and exposed here so they can be tuned without touching code.
"""

from dataclasses import dataclass, field
from typing import Literal

from cardscan.exceptions import ConfigurationError

# Short all-caps tokens that are real words on cards, not OCR noise
DEFAULT_SHORT_TOKEN_WHITELIST = frozenset({"IT", "AI", "HR", "PR", "QR", "US", "UK", "UAE"})

# English-only whitelist with the symbols business cards use
DEFAULT_CHAR_WHITELIST = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789@.+-()[]{}/:;,!?&%# "
)

# Reduced whitelist for the fallback pass
FALLBACK_CHAR_WHITELIST = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789@.+-()[]{}/:;, "
)


@dataclass
class CleanerConfig:
    """
    Configuration for the OCR text cleaner.

    The cleaner starts from the recognizer's confidence and adjusts it:
    every dropped garbage line costs ``garbage_penalty``, every line rejected
    after cleaning costs ``rejected_penalty``, and text that looks like a
    business card (a contact line plus a two-word name) earns
    ``business_card_bonus``.

    Example:
        >>> config = CleanerConfig(garbage_penalty=5)
        >>> cleaned = clean_text(raw, 80, config)
    """

    garbage_penalty: float = 2.0
    rejected_penalty: float = 1.0
    business_card_bonus: float = 10.0

    # 1-2 letter uppercase lines kept despite looking like noise
    short_token_whitelist: frozenset[str] = DEFAULT_SHORT_TOKEN_WHITELIST

    def __post_init__(self):
        """Validate configuration."""
        for name in ("garbage_penalty", "rejected_penalty", "business_card_bonus"):
            value = getattr(self, name)
            if value < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {value}")
        self.short_token_whitelist = frozenset(t.upper() for t in self.short_token_whitelist)


@dataclass
class RecognizerConfig:
    """
    Configuration for the Tesseract recognizer.

    The fallback pass reuses language and segmentation mode but drops
    ``extra_parameters`` and switches to ``fallback_char_whitelist``.
    """

    language: str = "eng"
    page_segmentation_mode: int = 3  # Fully automatic, no OSD
    char_whitelist: str = DEFAULT_CHAR_WHITELIST
    fallback_char_whitelist: str = FALLBACK_CHAR_WHITELIST

    # Image preprocessing
    preprocess: bool = True
    max_size: int = 2000  # Longest side in pixels
    threshold: int | None = 140  # None = no binarization

    # Second pass with reduced parameters when the first fails
    enable_fallback: bool = True

    # Passed as -c key=value to tesseract on the primary pass only
    extra_parameters: dict[str, str] = field(
        default_factory=lambda: {
            "preserve_interword_spaces": "1",
            "classify_enable_learning": "0",
            "textord_heavy_nr": "1",
            "language_model_penalty_non_freq_dict_word": "0.1",
            "language_model_penalty_non_dict_word": "0.15",
        }
    )

    def __post_init__(self):
        """Validate configuration."""
        if not 0 <= self.page_segmentation_mode <= 13:
            raise ConfigurationError(
                f"page_segmentation_mode must be between 0 and 13, "
                f"got {self.page_segmentation_mode}"
            )
        if self.max_size < 100:
            raise ConfigurationError(f"max_size must be >= 100, got {self.max_size}")
        if self.threshold is not None and not 0 <= self.threshold <= 255:
            raise ConfigurationError(
                f"threshold must be between 0 and 255, got {self.threshold}"
            )


@dataclass
class ScanConfig:
    """
    Configuration for scanning a business card.

    Example:
        >>> config = ScanConfig(
        ...     extract_logo_colors=True,
        ...     on_recognition_error="warn",
        ... )
        >>> result = cardscan.scan("card.jpg", config)
    """

    cleaner: CleanerConfig = field(default_factory=CleanerConfig)
    recognizer: RecognizerConfig = field(default_factory=RecognizerConfig)

    # Dominant logo colors for UI theming (not used for extraction)
    extract_logo_colors: bool = False

    # Error handling at the OCR boundary
    on_recognition_error: Literal["raise", "warn"] = "raise"

    def __post_init__(self):
        """Validate configuration."""
        valid_error_modes = ("raise", "warn")
        if self.on_recognition_error not in valid_error_modes:
            raise ConfigurationError(
                f"on_recognition_error must be one of {valid_error_modes}, "
                f"got {self.on_recognition_error!r}"
            )
