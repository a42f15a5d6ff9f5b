from typing import Tuple

from ..clauses import Clause, Term, any_of
from ..schema import FilterParameters
from .common import Filter

LOCATION_CODE_FIELD = "geografiJobbonsker.geografiKode"


class LocationFilter(Filter):
    """Candidates wishing to work in any of the given locations."""

    name = "location"

    def __init__(self):
        self._codes: Tuple[str, ...] = ()

    def absorb(self, params: FilterParameters) -> None:
        self._codes = params.sted or ()

    def is_active(self) -> bool:
        return len(self._codes) > 0

    def _build_clause(self) -> Clause:
        return any_of(*(Term(LOCATION_CODE_FIELD, code) for code in self._codes))
