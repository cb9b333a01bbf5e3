"""
Fixed vocabularies shared by the contextual extractors and the builder.

All tables are immutable. Matching is case-insensitive and on word
boundaries unless noted.
"""

import re

COUNTRIES = (
    "United Arab Emirates",
    "UAE",
    "Saudi Arabia",
    "KSA",
    "Oman",
    "Qatar",
    "Kuwait",
    "Bahrain",
    "Egypt",
    "India",
    "Pakistan",
    "Bangladesh",
    "Philippines",
    "United Kingdom",
    "UK",
    "Canada",
    "Australia",
    "Japan",
    "Korea",
    "China",
    "United States",
    "USA",
    "Sweden",
    "Iran",
    "Sudan",
)

MAJOR_CITIES = (
    "Abu Dhabi",
    "Dubai",
    "Sharjah",
    "Ajman",
    "Ras Al Khaimah",
    "Fujairah",
    "Umm Al Quwain",
    "Al Ain",
    "Riyadh",
    "Jeddah",
    "Muscat",
    "Doha",
    "Mumbai",
    "Delhi",
    "Karachi",
    "Lahore",
    "Dhaka",
    "Manila",
    "London",
    "Toronto",
    "Sydney",
    "Tokyo",
    "Seoul",
    "Beijing",
    "New York",
    "Stockholm",
    "Tehran",
    "Khartoum",
)


def _alternation(words: tuple[str, ...]) -> str:
    return "|".join(re.escape(w).replace(r"\ ", r"\s+") for w in words)


COUNTRY_PATTERN = re.compile(rf"\b(?:{_alternation(COUNTRIES)})\b", re.IGNORECASE)
COUNTRY_EXACT_PATTERN = re.compile(rf"^(?:{_alternation(COUNTRIES)})$", re.IGNORECASE)
CITY_PATTERN = re.compile(rf"\b(?:{_alternation(MAJOR_CITIES)})\b", re.IGNORECASE)

PO_BOX_PATTERN = re.compile(r"P\.?\s?O\.?\s*Box", re.IGNORECASE)
MARKED_PO_BOX_PATTERN = re.compile(r"^A\s+P\.?\s?O\.?\s*Box", re.IGNORECASE)
LOCALITY_PATTERN = re.compile(
    r"\b(?:city|town|state|country|province|region|emirate)\b", re.IGNORECASE
)

ADDRESS_KEYWORDS = (
    "street",
    "st",
    "avenue",
    "ave",
    "road",
    "rd",
    "boulevard",
    "blvd",
    "lane",
    "ln",
    "drive",
    "court",
    "place",
    "suite",
    "apt",
    "apartment",
    "building",
    "bldg",
    "floor",
    "office",
    "unit",
    "po box",
    "p.o",
    "box",
    "dubai",
    "abu dhabi",
    "sharjah",
    "ajman",
    "uae",
    "emirates",
    "city",
    "tower",
    "center",
    "centre",
    "mall",
    "plaza",
)

ADDRESS_KEYWORD_PATTERNS = tuple(
    re.compile(rf"(?<![a-z]){re.escape(k)}(?![a-z])", re.IGNORECASE) for k in ADDRESS_KEYWORDS
)

# Company-type nouns that combine with a brand or email domain
COMPANY_TYPE_NOUNS = (
    "electromechanical",
    "mechanical",
    "electrical",
    "engineering",
    "systems",
    "solutions",
    "services",
    "trading",
    "contracting",
)

COMPANY_INDICATOR_PATTERN = re.compile(
    r"&|\b(?:llc|inc|corp|ltd|company|group|fze|fzco|establishment|est|trading|contracting)\b",
    re.IGNORECASE,
)

# Single-token logos seen on regional cards
KNOWN_BRANDS = frozenset({"sicuro", "arco", "adnoc", "emirates", "etisalat", "du", "mashreq"})

# Mail providers whose domain says nothing about the employer
FREE_MAIL_DOMAINS = frozenset(
    {
        "gmail",
        "googlemail",
        "yahoo",
        "hotmail",
        "outlook",
        "live",
        "msn",
        "icloud",
        "aol",
        "proton",
        "protonmail",
    }
)

TITLE_KEYWORD_PATTERN = re.compile(
    r"\b(?:manager|director|engineer|developer|designer|analyst|consultant|specialist|"
    r"coordinator|administrator|assistant|officer|executive|president|founder|"
    r"ceo|cto|cfo|coo|business\s+development)s?\b",
    re.IGNORECASE,
)

# An all-caps brand followed by a company-type noun, e.g. "ARCO Electromechanical"
COMPANY_SHAPE_PATTERN = re.compile(
    rf"^[A-Z]{{2,}}\s+(?i:{'|'.join(COMPANY_TYPE_NOUNS)})"
)

HONORIFIC_PATTERN = re.compile(r"^(Mr|Mrs|Ms|Miss|Dr|Prof|Sir|Dame)\.?\s+", re.IGNORECASE)
SUFFIX_PATTERN = re.compile(r"^(.+?)\s*,?\s+(Jr|Sr|II|III|IV|PhD|MD|Esq)\.?$", re.IGNORECASE)
