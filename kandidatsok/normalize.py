import re
from typing import Optional

MAX_TERM_LENGTH = 100

# NO (country), NO03 (county) or NO03.0301 (municipality)
_LOCATION_CODE_RE = re.compile(r"^NO(\d{2}(\.\d{4})?)?$")


def normalize_text(s: str) -> str:
    return " ".join(s.strip().split())


def normalize_search_term(term: str) -> Optional[str]:
    value = normalize_text(term)
    if not value or len(value) > MAX_TERM_LENGTH:
        return None
    return value


def normalize_location_code(code: str) -> Optional[str]:
    value = code.strip().upper()
    if not _LOCATION_CODE_RE.match(value):
        return None
    return value


def normalize_kandidatnr(kandidatnr: str) -> Optional[str]:
    value = kandidatnr.strip()
    if not value or any(c.isspace() for c in value):
        return None
    return value


def deduplicate(values: list[str]) -> list[str]:
    """Deduplicate values while preserving order."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result
