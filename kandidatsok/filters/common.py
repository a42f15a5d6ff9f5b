"""Shared base for all search filters."""

from abc import ABC, abstractmethod

from ..clauses import Clause
from ..schema import FilterParameters


class InactiveFilterError(RuntimeError):
    """Raised when a clause is requested from a filter that is not active."""
    pass


class Filter(ABC):
    """
    A search filter that may contribute one clause to the search query.

    Instances are request-scoped: absorb parameters once, ask whether the
    filter is active, take its clause, then discard it.
    """

    name = "filter"

    @abstractmethod
    def absorb(self, params: FilterParameters) -> None:
        """Take the parameters this filter cares about. Absent values leave it inactive."""

    @abstractmethod
    def is_active(self) -> bool:
        """Whether the absorbed state should restrict the search."""

    @abstractmethod
    def _build_clause(self) -> Clause:
        ...

    def to_clause(self) -> Clause:
        """
        Build this filter's clause.

        Raises:
            InactiveFilterError: If the filter is not active
        """
        if not self.is_active():
            raise InactiveFilterError(f"{self.name} filter is not active")
        return self._build_clause()
