"""
Query composition for lookup and search.

The projection tuples below are the only place that decides which document
fields may leave the index. They are fixed per operation and never extended
from request input.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .access import Operation
from .clauses import Clause, Term, Terms, all_of
from .filters import Filter, build_filters
from .schema import FilterParameters

PAGE_SIZE = 25
SORT_FIELD = "tidsstempel"
CANDIDATE_NUMBER_FIELD = "kandidatnr"
PERSONAL_ID_FIELD = "fodselsnummer"

ELIGIBLE_QUALIFICATION_GROUPS = ("BATT", "BFORM", "IKVAL", "VARIG")
BASELINE = Terms("kvalifiseringsgruppekode", ELIGIBLE_QUALIFICATION_GROUPS)

SEARCH_FIELDS = (
    "fodselsnummer",
    "fornavn",
    "etternavn",
    "arenaKandidatnr",
    "kvalifiseringsgruppekode",
    "yrkeJobbonskerObj",
    "geografiJobbonsker",
    "kommuneNavn",
    "postnummer",
)

SUMMARY_FIELDS = (
    "fornavn",
    "etternavn",
    "arenaKandidatnr",
    "fodselsdato",
    "fodselsnummer",
    "adresselinje1",
    "postnummer",
    "poststed",
    "epostadresse",
    "telefon",
    "veilederIdent",
    "veilederVisningsnavn",
    "veilederEpost",
)

CV_FIELDS = SUMMARY_FIELDS + (
    "kandidatnr",
    "mobiltelefon",
    "kommuneNavn",
    "fylkeNavn",
    "beskrivelse",
    "yrkeserfaring",
    "utdanning",
    "fagdokumentasjon",
    "sertifikatObj",
    "forerkort",
    "sprak",
    "kursObj",
    "godkjenninger",
    "annenerfaringObj",
    "vervObj",
    "yrkeJobbonskerObj",
    "geografiJobbonsker",
    "omfangJobbprofilObj",
    "ansettelsesformJobbprofilObj",
    "arbeidstidsordningJobbprofilObj",
    "oppstartKode",
    "kvalifiseringsgruppekode",
    "tidsstempel",
)

PROJECTIONS: Dict[Operation, Tuple[str, ...]] = {
    Operation.LOOKUP_CV: CV_FIELDS,
    Operation.LOOKUP_SUMMARY: SUMMARY_FIELDS,
    Operation.SEARCH: SEARCH_FIELDS,
}


@dataclass(frozen=True)
class SortKey:
    field: str
    order: str = "desc"

    def to_dict(self) -> Dict[str, Any]:
        return {self.field: {"order": self.order}}


@dataclass(frozen=True)
class ComposedQuery:
    """A complete request body for the index, before rendering."""

    clause: Clause
    projection: Tuple[str, ...]
    size: int
    offset: Optional[int] = None
    sort: Tuple[SortKey, ...] = ()
    track_total_hits: bool = False

    def to_body(self) -> Dict[str, Any]:
        """Render to an OpenSearch `_search` request body."""
        body: Dict[str, Any] = {
            "query": self.clause.to_dict(),
            "_source": {"includes": list(self.projection)},
            "size": self.size,
        }
        if self.offset is not None:
            body["from"] = self.offset
        if self.sort:
            body["sort"] = [key.to_dict() for key in self.sort]
        if self.track_total_hits:
            body["track_total_hits"] = True
        return body


def active_clauses(params: FilterParameters, filters: Optional[Sequence[Filter]] = None) -> List[Clause]:
    """
    Absorb parameters into each filter and collect clauses from the active ones.

    Args:
        params: Sanitized filter parameters
        filters: Fresh filter instances; defaults to build_filters()

    Returns:
        Clauses in filter order
    """
    if filters is None:
        filters = build_filters()
    for f in filters:
        f.absorb(params)
    return [f.to_clause() for f in filters if f.is_active()]


def compose_search_query(params: FilterParameters, filters: Optional[Sequence[Filter]] = None) -> ComposedQuery:
    """Baseline AND every active filter, newest first, first page."""
    return ComposedQuery(
        clause=all_of(BASELINE, *active_clauses(params, filters)),
        projection=PROJECTIONS[Operation.SEARCH],
        size=PAGE_SIZE,
        offset=0,
        sort=(SortKey(SORT_FIELD, "desc"),),
        track_total_hits=True,
    )


def compose_lookup_query(kandidatnr: str, operation: Operation) -> ComposedQuery:
    """Single-document lookup by candidate number."""
    if operation is Operation.SEARCH:
        raise ValueError("compose_lookup_query only handles lookup operations")
    return ComposedQuery(
        clause=Term(CANDIDATE_NUMBER_FIELD, kandidatnr),
        projection=PROJECTIONS[operation],
        size=1,
    )
