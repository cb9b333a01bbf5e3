"""
Tesseract recognition for card images.

The recognizer is the only part of cardscan that does I/O. It loads an
image, preprocesses it with Pillow, runs Tesseract through pytesseract and
returns RawRecognitionResult(text, confidence). Everything after that is
pure text processing.

If the primary pass fails, recognize_with_fallback() runs exactly one
second pass with a reduced parameter set before giving up.
"""

from __future__ import annotations

import io
import logging
import shlex
from pathlib import Path
from typing import Protocol, Union

import pytesseract
from PIL import Image, ImageOps

from cardscan.config import RecognizerConfig
from cardscan.exceptions import ImageLoadError, RecognitionError
from cardscan.models import RawRecognitionResult

logger = logging.getLogger(__name__)

ImageInput = Union[str, Path, bytes, Image.Image]


class Recognizer(Protocol):
    """Anything that turns a card image into text plus confidence."""

    def recognize(self, image: ImageInput) -> RawRecognitionResult: ...


def load_image(image: ImageInput) -> Image.Image:
    """
    Open an image from a path, raw bytes or an existing PIL image.

    Raises:
        ImageLoadError: If the input cannot be decoded
    """
    if isinstance(image, Image.Image):
        return image

    try:
        if isinstance(image, (bytes, bytearray)):
            opened = Image.open(io.BytesIO(image))
        else:
            opened = Image.open(Path(image))
        opened.load()
    except (OSError, ValueError) as e:
        raise ImageLoadError(f"Cannot read card image: {e}") from e
    return opened


def preprocess_image(image: Image.Image, config: RecognizerConfig) -> Image.Image:
    """
    Prepare a card photo for Tesseract.

    Applies EXIF orientation, downscales so the longest side is at most
    ``max_size``, converts to grayscale, stretches contrast and optionally
    binarizes at ``threshold``.
    """
    prepared = ImageOps.exif_transpose(image)
    if max(prepared.size) > config.max_size:
        prepared = prepared.copy()
        prepared.thumbnail((config.max_size, config.max_size), Image.Resampling.LANCZOS)

    prepared = ImageOps.autocontrast(prepared.convert("L"))

    if config.threshold is not None:
        threshold = config.threshold
        prepared = prepared.point(lambda p: 255 if p > threshold else 0)

    return prepared


def tesseract_config(config: RecognizerConfig, fallback: bool = False) -> str:
    """Build the tesseract command-line options for one pass."""
    whitelist = config.fallback_char_whitelist if fallback else config.char_whitelist
    options = [
        f"--psm {config.page_segmentation_mode}",
        f"-c {shlex.quote('tessedit_char_whitelist=' + whitelist)}",
    ]
    if not fallback:
        options.extend(
            f"-c {shlex.quote(f'{key}={value}')}"
            for key, value in config.extra_parameters.items()
        )
    return " ".join(options)


def text_from_data(data: dict) -> tuple[str, float]:
    """
    Rebuild text lines and mean confidence from image_to_data output.

    Words are grouped by Tesseract's (block, paragraph, line) numbers so
    card lines survive. Confidence is the mean over words with a
    confidence >= 0 (Tesseract reports -1 for non-word boxes).
    """
    lines: dict[tuple[int, int, int], list[str]] = {}
    confidences = []

    for i, word in enumerate(data.get("text", [])):
        if not str(word).strip():
            continue
        key = (int(data["block_num"][i]), int(data["par_num"][i]), int(data["line_num"][i]))
        lines.setdefault(key, []).append(str(word).strip())
        conf = float(data["conf"][i])
        if conf >= 0:
            confidences.append(conf)

    text = "\n".join(" ".join(words) for words in lines.values())
    confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return text, confidence


class TesseractRecognizer:
    """
    Recognize card text with Tesseract.

    Example:
        >>> recognizer = TesseractRecognizer()
        >>> raw = recognizer.recognize("card.jpg")
        >>> raw.confidence
        82.4
    """

    def __init__(self, config: RecognizerConfig | None = None):
        self.config = config or RecognizerConfig()

    def recognize(self, image: ImageInput, fallback: bool = False) -> RawRecognitionResult:
        """
        Run one recognition pass.

        Args:
            image: Path, bytes or PIL image
            fallback: Use the reduced parameter set

        Returns:
            RawRecognitionResult with newline-separated lines

        Raises:
            ImageLoadError: If the image cannot be decoded
            RecognitionError: If Tesseract fails
        """
        loaded = load_image(image)
        prepared = preprocess_image(loaded, self.config) if self.config.preprocess else loaded

        try:
            data = pytesseract.image_to_data(
                prepared,
                lang=self.config.language,
                config=tesseract_config(self.config, fallback=fallback),
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, RuntimeError) as e:
            raise RecognitionError(f"Tesseract failed: {e}") from e

        text, confidence = text_from_data(data)
        logger.info(
            "Recognized %d lines (confidence %.1f, %s pass)",
            len(text.splitlines()),
            confidence,
            "fallback" if fallback else "primary",
        )
        return RawRecognitionResult(text=text, confidence=confidence)


def recognize_with_fallback(
    image: ImageInput,
    config: RecognizerConfig | None = None,
    recognizer: TesseractRecognizer | None = None,
) -> RawRecognitionResult:
    """
    Recognize with one reduced-parameter retry.

    Undecodable images are not retried.

    Raises:
        ImageLoadError: If the image cannot be decoded
        RecognitionError: If both passes fail (or the first, with fallback disabled)
    """
    recognizer = recognizer or TesseractRecognizer(config)
    try:
        return recognizer.recognize(image)
    except ImageLoadError:
        raise
    except RecognitionError as e:
        if not recognizer.config.enable_fallback:
            raise
        logger.warning("Primary recognition failed, trying reduced parameters: %s", e)

    try:
        return recognizer.recognize(image, fallback=True)
    except RecognitionError as e:
        raise RecognitionError(
            f"Recognition failed after fallback pass, enter details manually: {e}"
        ) from e
