from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple

from .errors import RetrievalFailure
from .query import ComposedQuery


class SearchTransport(Protocol):
    def search(self, body: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class RetrievalResult:
    """Shaped hits in index order plus the index's total match count."""

    hits: Tuple[Dict[str, Any], ...]
    total: int

    @property
    def first(self) -> Optional[Dict[str, Any]]:
        return self.hits[0] if self.hits else None

    def to_response(self) -> Dict[str, Any]:
        return {
            "hits": {
                "total": {"value": self.total},
                "hits": [dict(hit) for hit in self.hits],
            }
        }


EMPTY_RESULT = RetrievalResult(hits=(), total=0)


def shape_record(source: Mapping[str, Any], projection: Tuple[str, ...]) -> Dict[str, Any]:
    """Keep only projected fields, in projection order."""
    return {field: source[field] for field in projection if field in source}


def normalize_response(raw: Mapping[str, Any], projection: Tuple[str, ...]) -> RetrievalResult:
    """
    Convert a raw `_search` response to a RetrievalResult.

    Hits without a source document are skipped. When the index omits the
    total, the number of returned hits is used.

    Raises:
        RetrievalFailure: If the response has no hit list
    """
    envelope = raw.get("hits")
    if not isinstance(envelope, Mapping) or not isinstance(envelope.get("hits"), list):
        raise RetrievalFailure("Index response has no hits")

    hits = []
    for hit in envelope["hits"]:
        source = hit.get("_source") if isinstance(hit, Mapping) else None
        if isinstance(source, Mapping):
            hits.append(shape_record(source, projection))

    total = envelope.get("total")
    if isinstance(total, Mapping) and isinstance(total.get("value"), int):
        count = total["value"]
    elif isinstance(total, int):
        count = total
    else:
        count = len(hits)
    return RetrievalResult(hits=tuple(hits), total=count)


def execute(query: ComposedQuery, transport: SearchTransport) -> RetrievalResult:
    """
    Send a composed query and shape the answer.

    Raises:
        RetrievalFailure: If the transport fails or the answer is not a search result
    """
    raw = transport.search(query.to_body())
    return normalize_response(raw, query.projection)
