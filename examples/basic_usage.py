#!/usr/bin/env python3
"""
Basic cardscan Usage Example

This example demonstrates the core workflow:
1. Scan a card photo into a Contact
2. Inspect confidences and alternatives
3. Validate the contact before saving it
4. Extract from text recognized elsewhere
5. Handle recognition failures
"""

import logging

import cardscan
from cardscan import CleanerConfig, RecognizerConfig, ScanConfig


def main():
    logging.basicConfig(level=logging.INFO)

    # ─────────────────────────────────────────────────────────────────────────
    # 1. Basic Scan
    # ─────────────────────────────────────────────────────────────────────────

    contact = cardscan.scan_business_card("path/to/card.jpg")

    print(f"Scanned: {contact.name}")
    print(f"  Title: {contact.title}")
    print(f"  Organization: {contact.organization}")
    print(f"  Email: {contact.email}")
    print(f"  Phones: {contact.phone}")
    print(f"  Address: {contact.address}")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Detailed Result
    # ─────────────────────────────────────────────────────────────────────────

    config = ScanConfig(
        cleaner=CleanerConfig(garbage_penalty=3),  # Punish noisy cards harder
        recognizer=RecognizerConfig(threshold=None),  # Skip binarization
        extract_logo_colors=True,  # Colors for theming the card UI
    )

    result = cardscan.scan("path/to/card.jpg", config)

    print(f"Overall confidence: {result.confidence:.0f}%")
    for field_name, confidence in result.field_confidences.items():
        print(f"  {field_name}: {confidence:.0f}%")

    for field_name, values in result.alternative_values.items():
        print(f"  Other {field_name} values on the card: {', '.join(values)}")

    for color in result.logo_colors:
        print(f"  Logo color {color.hex} ({color.frequency:.1%})")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Validation
    # ─────────────────────────────────────────────────────────────────────────

    report = result.validate()

    if not report.is_valid:
        for error in report.errors:
            print(f"  ERROR: {error}")
    for warning in report.warnings:
        print(f"  Warning: {warning}")
    for suggestion in report.suggestions:
        print(f"  Suggestion: {suggestion}")

    # Manually entered contacts get the required-field checks only
    manual = cardscan.Contact(name="Johnny Jabbour", email="johnny@arco.ae")
    print(f"Manual contact valid: {cardscan.validate_contact(manual).is_valid}")

    # ─────────────────────────────────────────────────────────────────────────
    # 4. Text From Another OCR Engine
    # ─────────────────────────────────────────────────────────────────────────

    text = "\n".join(
        [
            "ARCO",
            "electromechanical",
            "Johnny Jabbour",
            "Business Development Manager",
            "T +971 2 4450707",
            "F +971 2 4455052",
            "E johnny@arco.ae",
            "A P.O Box 25475, Abu Dhabi, UAE",
        ]
    )
    result = cardscan.extract_contact(text, confidence=82)

    print(f"{result.contact.name}: work {result.contact.work_phone}, fax {result.contact.fax_phone}")
    print(result.contact.to_dict())

    # ─────────────────────────────────────────────────────────────────────────
    # 5. Recognition Failures
    # ─────────────────────────────────────────────────────────────────────────

    try:
        cardscan.scan_business_card("path/to/blurry.jpg")
    except cardscan.RecognitionError as e:
        print(f"Could not read the card, please enter details manually: {e}")

    # Or get an empty result instead of an exception
    result = cardscan.scan("path/to/blurry.jpg", ScanConfig(on_recognition_error="warn"))
    print(f"Empty contact: {result.contact.name == ''}")


if __name__ == "__main__":
    main()
