"""
Card Regression Tests

Runs the text pipeline over recorded OCR output of real cards and checks
the extracted contact against verified field values.

Each card is a YAML file under tests/fixtures/cards/ with:
- text: the recognizer's raw output
- confidence: the recognizer's confidence
- expected: Contact fields (snake_case) that must match exactly
- lines / quality (optional): expected cleaner output
- valid: expected validation outcome
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from cardscan import extract_contact

CARDS_DIR = Path(__file__).parent.parent / "fixtures" / "cards"


def load_cards() -> list[tuple[str, dict]]:
    """Load every card fixture.

    Returns:
        List of (card id, fixture) tuples
    """
    if not CARDS_DIR.exists():
        return []

    cards = []
    for yaml_path in sorted(CARDS_DIR.glob("*.yaml")):
        with open(yaml_path, encoding="utf-8") as f:
            card = yaml.safe_load(f)
        cards.append((card.get("card", yaml_path.stem), card))
    return cards


cards = load_cards()
skip_no_cards = pytest.mark.skipif(len(cards) == 0, reason="No card fixtures available")


@skip_no_cards
class TestCardRegression:
    """Regression tests against recorded cards."""

    @pytest.mark.parametrize("card_id,card", cards, ids=[c[0] for c in cards])
    def test_expected_fields(self, card_id: str, card: dict):
        """Every verified field is extracted exactly."""
        result = extract_contact(card["text"], card["confidence"])
        extracted = {name: getattr(result.contact, name) for name in card["expected"]}

        mismatches = {
            name: (extracted[name], str(expected))
            for name, expected in card["expected"].items()
            if extracted[name] != str(expected)
        }
        assert not mismatches, f"{card_id}: (extracted, expected) {mismatches}"

    @pytest.mark.parametrize("card_id,card", cards, ids=[c[0] for c in cards])
    def test_cleaner_output(self, card_id: str, card: dict):
        """Recorded cleaner lines and quality score still hold."""
        if "lines" not in card and "quality" not in card:
            pytest.skip(f"{card_id} has no cleaner expectations")

        result = extract_contact(card["text"], card["confidence"])
        if "lines" in card:
            assert list(result.cleaned.lines) == [str(line) for line in card["lines"]]
        if "quality" in card:
            assert result.cleaned.quality_score == pytest.approx(card["quality"])

    @pytest.mark.parametrize("card_id,card", cards, ids=[c[0] for c in cards])
    def test_validation_outcome(self, card_id: str, card: dict):
        result = extract_contact(card["text"], card["confidence"])
        report = result.validate()
        assert report.is_valid is card["valid"], report.errors

    @pytest.mark.parametrize("card_id,card", cards, ids=[c[0] for c in cards])
    def test_combined_fields_derivable(self, card_id: str, card: dict):
        """phone and address always equal the join of their components."""
        contact = extract_contact(card["text"], card["confidence"]).contact
        assert contact.phone == contact.compose_phone()
        assert contact.address == contact.compose_address()

    @pytest.mark.parametrize("card_id,card", cards, ids=[c[0] for c in cards])
    def test_recleaning_is_stable(self, card_id: str, card: dict):
        """Feeding cleaned text back through the pipeline gives the same contact."""
        first = extract_contact(card["text"], card["confidence"])
        second = extract_contact(first.cleaned.text, card["confidence"])
        assert second.cleaned.lines == first.cleaned.lines
        assert second.contact == first.contact
