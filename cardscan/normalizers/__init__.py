"""
Text normalization for recognized card text.

The cleaner drops OCR noise (logo fragments, background texture, lines in
other scripts) and scores how trustworthy the remaining text is.
"""

from cardscan.normalizers.cleaner import (
    GARBAGE_RULES,
    LINE_TRANSFORMS,
    OCR_CORRECTIONS,
    TextCleaner,
    clean_text,
    garbage_reason,
    is_contact_info,
)

__all__ = [
    "TextCleaner",
    "clean_text",
    "garbage_reason",
    "is_contact_info",
    "GARBAGE_RULES",
    "LINE_TRANSFORMS",
    "OCR_CORRECTIONS",
]
