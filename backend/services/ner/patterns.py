"""Regex family shared by the contact/date extractors and the CV field mapper.

Patterns here run against raw text, since tokenization strips ``@``, ``+``,
``/`` and ``-``.
"""

import re
from functools import lru_cache

from services.ner.gazetteer import MONTH_NAMES

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

# Tried in order; later patterns skip spans claimed by earlier ones.
PHONE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\+91[\s-]?[6-9]\d{9}(?!\d)"),
    re.compile(r"(?<![\d+])[6-9]\d{9}(?!\d)"),
    re.compile(r"\+[1-9]\d{6,14}(?!\d)"),
)

# Looser pattern for recall recovery in the field mapper
RECALL_PHONE_RE = re.compile(r"(?:\+91[\s-]?)?[6-9]\d{9}(?!\d)|(?<!\d)\d{3}[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")

LINKEDIN_RE = re.compile(r"linkedin\.com/in/[\w-]+", re.IGNORECASE)
GITHUB_RE = re.compile(r"github\.com/[\w-]+", re.IGNORECASE)

# Most specific first: ISO dates would otherwise be partially read as DD-MM-YYYY.
NUMERIC_DATE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"(?<!\d)\d{4}-\d{1,2}-\d{1,2}(?!\d)"),
    re.compile(r"(?<!\d)\d{1,2}/\d{1,2}/\d{4}(?!\d)"),
    re.compile(r"(?<!\d)\d{1,2}-\d{1,2}-\d{4}(?!\d)"),
)


@lru_cache(maxsize=32)
def month_date_pattern(language: str) -> re.Pattern:
    """``D <month> YYYY`` for English month names plus those of ``language``."""
    names = set(MONTH_NAMES["en"]) | set(MONTH_NAMES.get(language, ()))
    # Longest first so "September" wins over "Sep"
    alternation = "|".join(re.escape(n) for n in sorted(names, key=len, reverse=True))
    return re.compile(rf"(?<!\d)\d{{1,2}}\s+(?:{alternation})\.?,?\s+\d{{4}}(?!\d)", re.IGNORECASE)


def date_patterns(language: str) -> tuple[re.Pattern, ...]:
    return NUMERIC_DATE_PATTERNS + (month_date_pattern(language),)
