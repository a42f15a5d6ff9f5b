from typing import List

from .common import Filter, InactiveFilterError
from .location import LocationFilter
from .occupation import OccupationFilter


def build_filters() -> List[Filter]:
    """Fresh filter instances for one request, in a fixed order."""
    return [LocationFilter(), OccupationFilter()]


__all__ = [
    "Filter",
    "InactiveFilterError",
    "LocationFilter",
    "OccupationFilter",
    "build_filters",
]
