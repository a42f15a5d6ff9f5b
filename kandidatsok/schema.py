from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .normalize import (
    deduplicate,
    normalize_location_code,
    normalize_search_term,
)

OCCUPATION_PARAM = "onsketYrke"
LOCATION_PARAM = "sted"


@dataclass(frozen=True)
class FilterParameters:
    """Sanitized search inputs for one request. Empty tuples mean 'not given'."""

    onsket_yrke: Tuple[str, ...] = ()
    sted: Tuple[str, ...] = ()


def _raw_values(raw: Any) -> List[str]:
    """
    Flatten a raw parameter value into strings.
    Accepts None, a comma-separated string, or a list of strings. List items
    are whole values and are never split.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        return raw.split(",")
    if isinstance(raw, (list, tuple)):
        return [item for item in raw if isinstance(item, str)]
    return []


def _clean(raw: Any, normalizer: Callable[[str], Optional[str]]) -> Tuple[str, ...]:
    cleaned = [v for v in (normalizer(r) for r in _raw_values(raw)) if v]
    return tuple(deduplicate(cleaned))


def extract_filter_parameters(raw: Mapping[str, Any]) -> FilterParameters:
    """
    Build FilterParameters from raw request parameters.

    Values that cannot be used are dropped rather than reported, so a bad
    parameter only leaves its filter inactive.
    """
    return FilterParameters(
        onsket_yrke=_clean(raw.get(OCCUPATION_PARAM), normalize_search_term),
        sted=_clean(raw.get(LOCATION_PARAM), normalize_location_code),
    )

