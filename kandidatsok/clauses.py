"""
Query clause values.

Clauses are immutable values composed with `all_of` and `any_of`. They are
only rendered to the OpenSearch query DSL when a request body is built, so
two clauses can be compared structurally without touching the index client.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union


@dataclass(frozen=True)
class Term:
    """Exact match on a keyword field."""

    field: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"term": {self.field: {"value": self.value}}}


@dataclass(frozen=True)
class Terms:
    """Keyword field equal to one of several values."""

    field: str
    values: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"terms": {self.field: list(self.values)}}


@dataclass(frozen=True)
class Match:
    """
    Full-text match on an analyzed field.

    Defaults to exact-token matching (no fuzziness) where every term in the
    query must match.
    """

    field: str
    query: str
    operator: str = "and"
    fuzziness: str = "0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match": {
                self.field: {
                    "query": self.query,
                    "operator": self.operator,
                    "fuzziness": self.fuzziness,
                }
            }
        }


@dataclass(frozen=True)
class AllOf:
    clauses: Tuple["Clause", ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"bool": {"must": [c.to_dict() for c in self.clauses]}}


@dataclass(frozen=True)
class AnyOf:
    clauses: Tuple["Clause", ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bool": {
                "should": [c.to_dict() for c in self.clauses],
                "minimum_should_match": 1,
            }
        }


Clause = Union[Term, Terms, Match, AllOf, AnyOf]


def all_of(*clauses: Clause) -> AllOf:
    """AND the given clauses together."""
    if not clauses:
        raise ValueError("all_of needs at least one clause")
    return AllOf(tuple(clauses))


def any_of(*clauses: Clause) -> AnyOf:
    """OR the given clauses together."""
    if not clauses:
        raise ValueError("any_of needs at least one clause")
    return AnyOf(tuple(clauses))
