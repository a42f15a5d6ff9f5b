"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, Dict, List, Optional

from kandidatsok.access import Caller, Role
from kandidatsok.logger import get_logger, reset_logger


class FakeTransport:
    """Search transport that records request bodies and replays a canned answer."""

    def __init__(self, response: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.bodies: List[Dict[str, Any]] = []
        self.closed = False

    def search(self, body: Dict[str, Any]) -> Dict[str, Any]:
        self.bodies.append(body)
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


class RecordingAuditSink:
    """Audit sink that keeps events in memory."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.events = []

    def record(self, event) -> None:
        if self.error is not None:
            raise self.error
        self.events.append(event)


def opensearch_response(sources: List[Dict[str, Any]], total: Optional[int] = None) -> Dict[str, Any]:
    """Shape sources the way OpenSearch answers `_search`."""
    return {
        "took": 3,
        "timed_out": False,
        "_shards": {"total": 3, "successful": 3, "skipped": 0, "failed": 0},
        "hits": {
            "total": {"value": len(sources) if total is None else total, "relation": "eq"},
            "max_score": None,
            "hits": [
                {
                    "_index": "veilederkandidat_os4",
                    "_id": source.get("kandidatnr", str(i)),
                    "_score": None,
                    "_source": source,
                }
                for i, source in enumerate(sources)
            ],
        },
    }


@pytest.fixture(autouse=True)
def quiet_logger():
    """Fresh global logger without console output for every test."""
    reset_logger()
    get_logger(enable_console=False)
    yield
    reset_logger()


@pytest.fixture
def cv_source() -> Dict[str, Any]:
    """Stored CV document, including fields no operation may return."""
    return {
        "aktorId": "1000012345678",
        "fodselsnummer": "01018012345",
        "fornavn": "Kari",
        "etternavn": "Nordmann",
        "fodselsdato": "1980-01-01",
        "kandidatnr": "PAM0xtfrwli5",
        "arenaKandidatnr": "PAM0xtfrwli5",
        "epostadresse": "kari@example.com",
        "telefon": "22334455",
        "adresselinje1": "Storgata 1",
        "postnummer": "0155",
        "poststed": "Oslo",
        "kommuneNavn": "Oslo",
        "beskrivelse": "Erfaren snekker.",
        "yrkeserfaring": [{"stillingstittel": "Snekker", "arbeidsgiver": "Bygg AS"}],
        "utdanning": [],
        "yrkeJobbonskerObj": [{"styrkBeskrivelse": "Snekker", "sokeTitler": ["Snekker", "Tømrer"]}],
        "geografiJobbonsker": [{"geografiKodeTekst": "Oslo", "geografiKode": "NO03.0301"}],
        "kvalifiseringsgruppekode": "BATT",
        "veilederIdent": "Z990000",
        "veilederVisningsnavn": "Vera Veileder",
        "veilederEpost": "vera@nav.no",
        "tidsstempel": "2023-05-02T10:00:00",
        "harKontaktinformasjon": True,
        "doed": False,
    }


@pytest.fixture
def found_response(cv_source) -> Dict[str, Any]:
    return opensearch_response([cv_source])


@pytest.fixture
def empty_response() -> Dict[str, Any]:
    return opensearch_response([])


@pytest.fixture
def make_response():
    return opensearch_response


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def audit_sink() -> RecordingAuditSink:
    return RecordingAuditSink()


@pytest.fixture
def arbeidsgiverrettet() -> Caller:
    return Caller(nav_ident="A123456", roles=frozenset({Role.ARBEIDSGIVERRETTET}))


@pytest.fixture
def utvikler() -> Caller:
    return Caller(nav_ident="D654321", roles=frozenset({Role.UTVIKLER}))


@pytest.fixture
def modia_generell() -> Caller:
    return Caller(nav_ident="M111111", roles=frozenset({Role.MODIA_GENERELL}))


@pytest.fixture
def jobbsokerrettet() -> Caller:
    return Caller(nav_ident="J222222", roles=frozenset({Role.JOBBSOKERRETTET}))


@pytest.fixture
def no_roles() -> Caller:
    return Caller(nav_ident="X000000", roles=frozenset())


@pytest.fixture
def failing_audit_sink() -> RecordingAuditSink:
    return RecordingAuditSink(error=OSError("disk full"))
