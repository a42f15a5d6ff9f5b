"""
HTTP transport to the OpenSearch `_search` endpoint.

Every failure is converted to a RetrievalFailure subclass and raised. There
is no retry here: a failed query is reported to the caller as-is.
"""

from typing import Any, Dict, Optional

import requests

from .errors import IndexUnavailable, QueryRejected, RetrievalFailure, is_unavailable_status
from .logger import get_logger


class OpenSearchTransport:
    """Posts query bodies to one index and returns the decoded response."""

    def __init__(
        self,
        base_url: str,
        index: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.index = index
        self.timeout = timeout
        self.session = session or requests.Session()
        if username and password:
            self.session.auth = (username, password)
        self.session.headers.update({"Content-Type": "application/json"})

    @property
    def search_url(self) -> str:
        return f"{self.base_url}/{self.index}/_search"

    def search(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run one search request.

        Args:
            body: Rendered OpenSearch request body

        Returns:
            Decoded JSON response

        Raises:
            QueryRejected: On a 4xx answer
            IndexUnavailable: On a 5xx answer, timeout or connection error
            RetrievalFailure: On a body that is not a JSON object
        """
        logger = get_logger()
        try:
            resp = self.session.post(
                self.search_url,
                params={"typed_keys": "true"},
                json=body,
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error("Index answered with an error status", index=self.index, status=status)
            if status is not None and not is_unavailable_status(status):
                raise QueryRejected(f"Index rejected query ({status})", status_code=status) from e
            raise IndexUnavailable(f"Index request failed ({status})", status_code=status) from e
        except requests.exceptions.Timeout as e:
            logger.warning("Index request timed out", index=self.index, timeout=self.timeout)
            raise IndexUnavailable(f"Index request timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            logger.error("Index request error", index=self.index, error=type(e).__name__)
            raise IndexUnavailable(f"Index request error: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Index returned a non-JSON body", index=self.index, status=resp.status_code)
            raise RetrievalFailure("Index returned a non-JSON body", status_code=resp.status_code) from e
        if not isinstance(data, dict):
            raise RetrievalFailure("Index returned an unexpected body", status_code=resp.status_code)
        return data

    def close(self) -> None:
        self.session.close()
