"""
Pytest configuration and fixtures for cardscan tests.
"""

import pytest

from cardscan.models import RawRecognitionResult

ARCO_CARD = """ARCO
electromechanical
Johnny Jabbour
Business Development Manager
T +971 2 4450707
F +971 2 4455052
E johnny@arco.ae
A P.O Box 25475, Abu Dhabi, UAE"""


class FakeRecognizer:
    """Recognizer returning canned text, recording what it was given."""

    def __init__(self, text: str, confidence: float = 82.0, error: Exception | None = None):
        self.text = text
        self.confidence = confidence
        self.error = error
        self.calls = []

    def recognize(self, image):
        self.calls.append(image)
        if self.error is not None:
            raise self.error
        return RawRecognitionResult(text=self.text, confidence=self.confidence)


@pytest.fixture
def arco_card_text() -> str:
    """Recognized text of the ARCO sample card."""
    return ARCO_CARD


@pytest.fixture
def fake_recognizer():
    """Factory for recognizers with canned output."""
    return FakeRecognizer
