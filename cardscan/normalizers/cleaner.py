"""
OCR text cleaning for business cards.

Recognized card text mixes real content with logo fragments, background
texture and lines in other scripts. The cleaner works line by line:

- Contact lines (emails, phones, prefixed T/F/E/A lines, URLs) are kept
  verbatim, since later extractors depend on their exact characters.
- Garbage lines are dropped by an ordered set of independent rules.
- Remaining lines go through an ordered set of transforms (script
  filtering, known OCR corrections, whitespace) and are kept only if they
  still look like English text.

Each decision adjusts a quality score that starts from the recognizer's
confidence. Rules and corrections are plain data: add an entry to
GARBAGE_RULES, LINE_TRANSFORMS or OCR_CORRECTIONS to extend them.

Example:
    >>> cleaned = clean_text("ARCO\\n~~\\nJohnny Jabbour\\nE johnny@arco.ae", 82)
    >>> cleaned.lines
    ('ARCO', 'Johnny Jabbour', 'E johnny@arco.ae')
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Callable

from cardscan.config import CleanerConfig
from cardscan.models import CleanedText

logger = logging.getLogger(__name__)


# ============================================================================
# Line patterns
# ============================================================================

CONTACT_INFO_PATTERNS = (
    re.compile(r"@"),
    re.compile(r"^[TFEA]\s"),
    re.compile(r"\d{3,}", re.ASCII),
    re.compile(r"www\.", re.IGNORECASE),
    re.compile(r"\.(?:com|org|net|ae|co)\b", re.IGNORECASE),
)

ONLY_SYMBOLS_PATTERN = re.compile(r"^[^A-Za-z0-9@+.]*$")
SHORT_CAPS_PATTERN = re.compile(r"^[A-Z]{1,2}$")
CONSONANT_RUN_PATTERN = re.compile(r"[bcdfghjklmnpqrstvwxyzBCDFGHJKLMNPQRSTVWXYZ]{4,}")
WHITESPACE_RUN_PATTERN = re.compile(r"\s+")
ADDRESS_HINT_PATTERN = re.compile(r"\b(?:box|street|st|avenue|ave|road|rd)\b", re.IGNORECASE)

CONTACT_LIKE_PATTERN = re.compile(r"@|\+?\d{3,}", re.ASCII)
NAME_LIKE_PATTERN = re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+")

# Known whole-line OCR misreads -> correct text
OCR_CORRECTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^SICU[IR]O\)$"), "Sicuro"),
    (re.compile(r"^sicuro\)$"), "Sicuro"),
)


def is_contact_info(line: str) -> bool:
    """True for lines later stages parse character by character."""
    return any(p.search(line) for p in CONTACT_INFO_PATTERNS)


# ============================================================================
# Garbage rules
# ============================================================================

GarbageRule = Callable[[str, CleanerConfig], bool]


def _too_short(line: str, config: CleanerConfig) -> bool:
    return len(line) <= 1


def _only_symbols(line: str, config: CleanerConfig) -> bool:
    return bool(ONLY_SYMBOLS_PATTERN.match(line))


def _stray_capitals(line: str, config: CleanerConfig) -> bool:
    return bool(SHORT_CAPS_PATTERN.match(line)) and line not in config.short_token_whitelist


def _shouting(line: str, config: CleanerConfig) -> bool:
    return (
        line == line.upper()
        and len(line) > 10
        and "@" not in line
        and not any(c.isascii() and c.isdigit() for c in line)
    )


def _consonant_soup(line: str, config: CleanerConfig) -> bool:
    return len(CONSONANT_RUN_PATTERN.findall(line)) > 2


GARBAGE_RULES: tuple[tuple[str, GarbageRule], ...] = (
    ("too_short", _too_short),
    ("only_symbols", _only_symbols),
    ("stray_capitals", _stray_capitals),
    ("shouting", _shouting),
    ("consonant_soup", _consonant_soup),
)


def garbage_reason(line: str, config: CleanerConfig | None = None) -> str | None:
    """Return the name of the first garbage rule the line trips, if any."""
    config = config or CleanerConfig()
    for name, rule in GARBAGE_RULES:
        if rule(line, config):
            return name
    return None


# ============================================================================
# Line transforms
# ============================================================================


def strip_non_latin(line: str) -> str:
    """Remove letters, marks and digits from non-Latin scripts."""
    kept = []
    for char in line:
        if ord(char) < 128:
            kept.append(char)
            continue
        category = unicodedata.category(char)
        if category.startswith("L"):
            if "LATIN" in unicodedata.name(char, ""):
                kept.append(char)
        elif category.startswith("M") or category == "Nd":
            continue
        else:
            kept.append(char)
    return "".join(kept)


def apply_ocr_corrections(line: str) -> str:
    for pattern, replacement in OCR_CORRECTIONS:
        if pattern.match(line):
            logger.debug("OCR correction: %r -> %r", line, replacement)
            return replacement
    return line


def collapse_whitespace(line: str) -> str:
    return WHITESPACE_RUN_PATTERN.sub(" ", line).strip()


LINE_TRANSFORMS: tuple[tuple[str, Callable[[str], str]], ...] = (
    ("strip_non_latin", strip_non_latin),
    ("ocr_corrections", lambda line: apply_ocr_corrections(line.strip())),
    ("collapse_whitespace", collapse_whitespace),
)


def is_valid_text_line(line: str) -> bool:
    """Check that a cleaned line is plausible English card text."""
    if len(line) < 2:
        return False

    letters = sum(1 for c in line if c.isascii() and c.isalpha())
    if letters == 0:
        return False

    digits = sum(1 for c in line if c.isascii() and c.isdigit())
    if digits > letters and not ADDRESS_HINT_PATTERN.search(line):
        return False

    return True


# ============================================================================
# Cleaner
# ============================================================================


class TextCleaner:
    """
    Line-by-line cleaner producing CleanedText.

    The cleaner is stateless apart from its configuration, so one instance
    can be shared freely.
    """

    def __init__(self, config: CleanerConfig | None = None):
        self.config = config or CleanerConfig()

    def clean(self, raw_text: str, input_confidence: float) -> CleanedText:
        """
        Clean raw recognized text.

        Args:
            raw_text: Text from the OCR engine (may be empty)
            input_confidence: Engine confidence, 0-100

        Returns:
            CleanedText with surviving lines and a quality score in [0, 100]
        """
        lines = [line.strip() for line in (raw_text or "").splitlines()]
        lines = [line for line in lines if line]
        if not lines:
            return CleanedText(lines=(), quality_score=0.0)

        score = float(input_confidence)
        kept: list[str] = []
        dropped = rejected = 0

        for line in lines:
            if is_contact_info(line):
                kept.append(line)
                continue

            reason = garbage_reason(line, self.config)
            if reason:
                logger.debug("Dropping garbage line (%s): %r", reason, line)
                score -= self.config.garbage_penalty
                dropped += 1
                continue

            cleaned = self._transform(line)
            if not is_valid_text_line(cleaned) or garbage_reason(cleaned, self.config):
                logger.debug("Rejecting line after cleaning: %r -> %r", line, cleaned)
                score -= self.config.rejected_penalty
                rejected += 1
                continue

            kept.append(cleaned)

        if self._looks_like_business_card(kept):
            score += self.config.business_card_bonus

        score = max(0.0, min(100.0, score))
        logger.info(
            "Cleaned %d lines: kept %d, garbage %d, rejected %d, quality %.1f",
            len(lines),
            len(kept),
            dropped,
            rejected,
            score,
        )
        return CleanedText(lines=tuple(kept), quality_score=score)

    def _transform(self, line: str) -> str:
        for _name, transform in LINE_TRANSFORMS:
            line = transform(line)
        return line

    @staticmethod
    def _looks_like_business_card(lines: list[str]) -> bool:
        has_contact = any(CONTACT_LIKE_PATTERN.search(line) for line in lines)
        has_name = any(NAME_LIKE_PATTERN.match(line) for line in lines)
        return has_contact and has_name


def clean_text(
    raw_text: str,
    input_confidence: float,
    config: CleanerConfig | None = None,
) -> CleanedText:
    """Clean raw OCR text. Convenience wrapper around TextCleaner."""
    return TextCleaner(config).clean(raw_text, input_confidence)
