"""
Lookup and search entry points.

Each call runs access policy, query composition, retrieval and audit in
that order. A denied caller never causes a query or an audit record.
"""

from typing import Any, Callable, Dict, Optional

from .access import Caller, Operation, decide
from .audit import AuditSink, DatabaseAuditSink, LoggingAuditSink, audit_result
from .config import Settings
from .errors import InvalidRequest, RetrievalFailure, Unauthorized
from .logger import get_logger
from .normalize import normalize_kandidatnr
from .query import ComposedQuery, compose_lookup_query, compose_search_query
from .retrieval import RetrievalResult, SearchTransport, execute
from .schema import FilterParameters
from .transport import OpenSearchTransport


class CandidateSearchService:
    """Role-gated access to the candidate index."""

    def __init__(self, transport: SearchTransport, audit_sink: AuditSink):
        self.transport = transport
        self.audit_sink = audit_sink

    def lookup_cv(self, kandidatnr: str, caller: Caller) -> RetrievalResult:
        """Full CV for one candidate number. Empty result when nothing matches."""
        return self._lookup(Operation.LOOKUP_CV, kandidatnr, caller)

    def lookup_summary(self, kandidatnr: str, caller: Caller) -> RetrievalResult:
        """Contact and caseworker summary for one candidate number."""
        return self._lookup(Operation.LOOKUP_SUMMARY, kandidatnr, caller)

    def search(self, params: FilterParameters, caller: Caller) -> RetrievalResult:
        """First page of eligible candidates matching every active filter, newest first."""
        return self._run(Operation.SEARCH, caller, lambda: compose_search_query(params))

    def _lookup(self, operation: Operation, kandidatnr: str, caller: Caller) -> RetrievalResult:
        def build() -> ComposedQuery:
            normalized = normalize_kandidatnr(kandidatnr) if isinstance(kandidatnr, str) else None
            if normalized is None:
                raise InvalidRequest("kandidatnr must be a non-empty string without whitespace")
            return compose_lookup_query(normalized, operation)

        return self._run(operation, caller, build)

    def close(self) -> None:
        """Release the index session and any audit database engine."""
        for resource in (self.transport, self.audit_sink):
            close = getattr(resource, "close", None)
            if close is not None:
                close()

    def _run(
        self,
        operation: Operation,
        caller: Caller,
        build_query: Callable[[], ComposedQuery],
    ) -> RetrievalResult:
        logger = get_logger()
        decision = decide(operation, caller.roles)
        if not decision:
            logger.record_access_denied()
            logger.warning("Access denied", operation=operation.value, actor=caller.nav_ident)
            raise Unauthorized(decision)

        query = build_query()
        logger.record_query_attempt(operation.value)
        try:
            result = execute(query, self.transport)
        except RetrievalFailure as e:
            logger.record_query_failure(operation.value, type(e).__name__)
            raise
        logger.record_query_success(operation.value)
        logger.debug("Query answered", operation=operation.value, hits=len(result.hits), total=result.total)

        audit_result(result, caller, operation, self.audit_sink)
        return result


def describe_caller(caller: Caller) -> Dict[str, Any]:
    """Identity and roles of the caller, as shown to the caller."""
    return {
        "navIdent": caller.nav_ident,
        "roller": sorted(role.value for role in caller.roles),
    }


def build_audit_sink(settings: Settings) -> AuditSink:
    if settings.audit_db_path is not None:
        return DatabaseAuditSink(settings.audit_db_path)
    return LoggingAuditSink()


def build_service(settings: Settings, audit_sink: Optional[AuditSink] = None) -> CandidateSearchService:
    """Wire a service against the configured index."""
    transport = OpenSearchTransport(
        base_url=settings.open_search_uri,
        index=settings.index,
        username=settings.open_search_username,
        password=settings.open_search_password,
        timeout=settings.timeout,
    )
    return CandidateSearchService(transport, audit_sink or build_audit_sink(settings))
