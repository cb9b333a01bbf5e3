"""
Image-side collaborators: Tesseract recognition and logo colors.
"""

from cardscan.ocr.colors import extract_logo_colors
from cardscan.ocr.recognizer import (
    Recognizer,
    TesseractRecognizer,
    load_image,
    preprocess_image,
    recognize_with_fallback,
)

__all__ = [
    "Recognizer",
    "TesseractRecognizer",
    "recognize_with_fallback",
    "load_image",
    "preprocess_image",
    "extract_logo_colors",
]
