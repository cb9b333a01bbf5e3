"""
Field extraction from cleaned card text.

- fields: pattern-based email, phone and website extraction
- lines: separating contact lines from the residual pool
- contextual: scored selection of name, organization, title and address
"""

from cardscan.extractors.contextual import (
    NameCandidate,
    OrgTitle,
    best_name,
    rank_name_candidates,
    select_address,
    select_name,
    select_org_and_title,
    split_honorific,
)
from cardscan.extractors.fields import (
    extract_emails,
    extract_phones,
    extract_websites,
    normalize_phone,
    website_from_email,
)
from cardscan.extractors.lines import is_contact_line, residual_lines

__all__ = [
    # Structured fields
    "extract_emails",
    "extract_phones",
    "extract_websites",
    "normalize_phone",
    "website_from_email",
    # Line classification
    "is_contact_line",
    "residual_lines",
    # Contextual fields
    "NameCandidate",
    "OrgTitle",
    "rank_name_candidates",
    "best_name",
    "split_honorific",
    "select_name",
    "select_org_and_title",
    "select_address",
]
