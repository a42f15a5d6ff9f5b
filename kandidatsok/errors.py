"""
Error taxonomy for lookup and search.

Access denials and retrieval failures stop the pipeline and propagate to
the caller. Malformed filter parameters never get here: they are dropped
during extraction and leave the affected filter inactive.
"""

from typing import Optional


class KandidatsokError(Exception):
    """Base class for all errors raised by kandidatsok."""
    pass


class Unauthorized(KandidatsokError):
    """Raised when the caller's roles do not permit the operation."""

    def __init__(self, decision):
        self.decision = decision
        super().__init__(
            f"Access denied for {decision.operation.value} "
            f"(roles: {', '.join(sorted(r.value for r in decision.roles)) or 'none'})"
        )


class InvalidRequest(KandidatsokError, ValueError):
    """Raised when a lookup request lacks a usable candidate number."""
    pass


class RetrievalFailure(KandidatsokError):
    """Raised when the search index cannot answer a query."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class IndexUnavailable(RetrievalFailure):
    """Index unreachable, timed out, or answered with a server error."""
    pass


class QueryRejected(RetrievalFailure):
    """Index answered with a client error (bad query, missing index)."""
    pass


def is_unavailable_status(status_code: int) -> bool:
    """
    Check if an HTTP status from the index means the index itself is down.

    Args:
        status_code: HTTP status code

    Returns:
        True for server errors and throttling, False for client errors
    """
    return status_code >= 500 or status_code in {408, 429}


def http_status_for(error: Exception) -> int:
    """
    Map an error to the status code the HTTP boundary should answer with.

    Args:
        error: Exception raised by the service

    Returns:
        403, 400 or 500
    """
    if isinstance(error, Unauthorized):
        return 403
    if isinstance(error, InvalidRequest):
        return 400
    return 500
