from typing import Tuple

from ..clauses import Clause, Match, any_of
from ..schema import FilterParameters
from .common import Filter

TITLE_FIELD = "yrkeJobbonskerObj.styrkBeskrivelse"
ALIAS_FIELD = "yrkeJobbonskerObj.sokeTitler"


class OccupationFilter(Filter):
    """Candidates wishing to work in any of the given occupations."""

    name = "occupation"

    def __init__(self):
        self._occupations: Tuple[str, ...] = ()

    def absorb(self, params: FilterParameters) -> None:
        self._occupations = params.onsket_yrke or ()

    def is_active(self) -> bool:
        return len(self._occupations) > 0

    def _build_clause(self) -> Clause:
        # Each occupation may hit either the STYRK title or a search alias
        return any_of(*(
            any_of(Match(TITLE_FIELD, occupation), Match(ALIAS_FIELD, occupation))
            for occupation in self._occupations
        ))
