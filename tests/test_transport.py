"""
Tests for the OpenSearch HTTP transport.
"""

import json

import pytest
import requests

from kandidatsok.errors import IndexUnavailable, QueryRejected, RetrievalFailure
from kandidatsok.logger import get_logger, reset_logger
from kandidatsok.transport import OpenSearchTransport


def _response(status: int, body) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    resp.url = "http://opensearch.local/veilederkandidat_current/_search"
    return resp


@pytest.fixture
def transport():
    return OpenSearchTransport(
        base_url="http://opensearch.local/",
        index="veilederkandidat_current",
        username="user",
        password="secret",
        timeout=2.5,
    )


class TestSearch:
    """Test posting search bodies."""

    def test_posts_body_to_index(self, transport, monkeypatch, empty_response):
        calls = []

        def fake_post(url, **kwargs):
            calls.append((url, kwargs))
            return _response(200, empty_response)

        monkeypatch.setattr(transport.session, "post", fake_post)
        body = {"query": {"term": {"kandidatnr": {"value": "PAM000000001"}}}, "size": 1}

        result = transport.search(body)

        assert result == empty_response
        url, kwargs = calls[0]
        assert url == "http://opensearch.local/veilederkandidat_current/_search"
        assert kwargs["json"] == body
        assert kwargs["params"] == {"typed_keys": "true"}
        assert kwargs["timeout"] == 2.5

    def test_basic_auth(self, transport):
        assert transport.session.auth == ("user", "secret")

    def test_no_auth_without_credentials(self):
        t = OpenSearchTransport(base_url="http://opensearch.local", index="idx")
        assert t.session.auth is None

    def test_not_found_is_rejected_query(self, transport, monkeypatch):
        monkeypatch.setattr(transport.session, "post", lambda url, **kw: _response(404, {"error": "no index"}))
        with pytest.raises(QueryRejected) as exc:
            transport.search({})
        assert exc.value.status_code == 404

    def test_bad_request_is_rejected_query(self, transport, monkeypatch):
        monkeypatch.setattr(transport.session, "post", lambda url, **kw: _response(400, {"error": "parse"}))
        with pytest.raises(QueryRejected):
            transport.search({})

    def test_server_error_is_unavailable(self, transport, monkeypatch):
        monkeypatch.setattr(transport.session, "post", lambda url, **kw: _response(503, {"error": "busy"}))
        with pytest.raises(IndexUnavailable) as exc:
            transport.search({})
        assert exc.value.status_code == 503

    def test_throttling_is_unavailable(self, transport, monkeypatch):
        monkeypatch.setattr(transport.session, "post", lambda url, **kw: _response(429, {}))
        with pytest.raises(IndexUnavailable):
            transport.search({})

    def test_timeout_is_unavailable(self, transport, monkeypatch):
        def timeout(url, **kwargs):
            raise requests.exceptions.ReadTimeout("read timed out")

        monkeypatch.setattr(transport.session, "post", timeout)
        with pytest.raises(IndexUnavailable):
            transport.search({})

    def test_connection_error_is_unavailable(self, transport, monkeypatch):
        def refused(url, **kwargs):
            raise requests.exceptions.ConnectionError("connection refused")

        monkeypatch.setattr(transport.session, "post", refused)
        with pytest.raises(IndexUnavailable):
            transport.search({})

    def test_not_retried(self, transport, monkeypatch):
        """A failing call is made exactly once."""
        calls = []

        def refused(url, **kwargs):
            calls.append(url)
            raise requests.exceptions.ConnectionError("connection refused")

        monkeypatch.setattr(transport.session, "post", refused)
        with pytest.raises(IndexUnavailable):
            transport.search({})
        assert len(calls) == 1

    def test_non_json_body(self, transport, monkeypatch):
        monkeypatch.setattr(transport.session, "post", lambda url, **kw: _response(200, b"<html>proxy</html>"))
        with pytest.raises(RetrievalFailure):
            transport.search({})

    def test_json_array_body(self, transport, monkeypatch):
        monkeypatch.setattr(transport.session, "post", lambda url, **kw: _response(200, [1, 2]))
        with pytest.raises(RetrievalFailure):
            transport.search({})

    def test_failures_are_logged(self, transport, monkeypatch, tmp_path):
        reset_logger()
        get_logger(log_dir=tmp_path, enable_console=False)
        monkeypatch.setattr(transport.session, "post", lambda url, **kw: _response(500, {}))

        with pytest.raises(IndexUnavailable):
            transport.search({})

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert "Index answered with an error status" in log_content
        assert "500" in log_content
