"""
Audit trail for access to personal data.

An audit event is written when a result actually contains a personal
identifier, not when one was merely requested. Sinks are injected into the
service; a failing sink is logged and never fails the request.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from sqlalchemy.orm import sessionmaker

from .access import Caller, Operation
from .database import AuditRecord, get_session, open_database
from .logger import StructuredLogger, get_logger
from .query import PERSONAL_ID_FIELD
from .retrieval import RetrievalResult

AUDIT_MESSAGES: Dict[Operation, str] = {
    Operation.LOOKUP_CV: "NAV employee looked up a candidate CV",
    Operation.LOOKUP_SUMMARY: "NAV employee looked up a candidate summary",
    Operation.SEARCH: "NAV employee searched candidates",
}

CEF_VENDOR = "toi"
CEF_PRODUCT = "kandidatsok"
CEF_VERSION = "1.0"


@dataclass(frozen=True)
class AuditEvent:
    subject_id: str
    actor_id: str
    operation: Operation
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def message(self) -> str:
        return AUDIT_MESSAGES[self.operation]


class AuditSink(Protocol):
    def record(self, event: AuditEvent) -> None:
        ...


def _cef_header(value: str) -> str:
    return value.replace("\\", "\\\\").replace("|", "\\|")


def _cef_extension(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace("=", "\\=")
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )


def format_cef(event: AuditEvent) -> str:
    """Render an event as one ArcSight CEF line."""
    end = int(event.timestamp.timestamp() * 1000)
    header = "|".join([
        "CEF:0",
        CEF_VENDOR,
        CEF_PRODUCT,
        CEF_VERSION,
        "audit:access",
        _cef_header(event.message),
        "INFO",
    ])
    extension = " ".join([
        f"end={end}",
        f"suid={_cef_extension(event.actor_id)}",
        f"duid={_cef_extension(event.subject_id)}",
        f"sproc={_cef_extension(event.operation.value)}",
        "flexString1Label=Decision",
        "flexString1=Permit",
    ])
    return f"{header}|{extension}"


class LoggingAuditSink:
    """Writes CEF lines to a dedicated audit logger."""

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self.logger = logger or StructuredLogger(name="kandidatsok.audit")

    def record(self, event: AuditEvent) -> None:
        self.logger.info(format_cef(event))


class DatabaseAuditSink:
    """Persists audit events as rows in a SQLite database."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.engine = open_database(db_path)
        self.Session = sessionmaker(bind=self.engine)

    def record(self, event: AuditEvent) -> None:
        session = self.Session()
        try:
            session.add(AuditRecord(
                subject_id=event.subject_id,
                actor_id=event.actor_id,
                operation=event.operation.value,
                message=event.message,
                created_at=event.timestamp.replace(tzinfo=None),
            ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        self.engine.dispose()


def list_audit_records(
    db_path: Path,
    actor: Optional[str] = None,
    subject: Optional[str] = None,
) -> List[dict]:
    """
    Read stored audit records, oldest first.

    Args:
        db_path: Path to SQLite database file
        actor: Only records for this NAV ident
        subject: Only records for this personal identifier
    """
    session = get_session(db_path)
    try:
        q = session.query(AuditRecord)
        if actor:
            q = q.filter(AuditRecord.actor_id == actor)
        if subject:
            q = q.filter(AuditRecord.subject_id == subject)
        return [
            {
                "subject_id": r.subject_id,
                "actor_id": r.actor_id,
                "operation": r.operation,
                "message": r.message,
                "created_at": r.created_at.isoformat(),
            }
            for r in q.order_by(AuditRecord.created_at, AuditRecord.id).all()
        ]
    finally:
        session.close()


def audit_result(
    result: RetrievalResult,
    caller: Caller,
    operation: Operation,
    sink: AuditSink,
) -> Optional[AuditEvent]:
    """
    Record an audit event if the first hit carries a personal identifier.

    Returns:
        The event that was emitted, or None when nothing identifying was returned
    """
    logger = get_logger()
    first = result.first
    subject = first.get(PERSONAL_ID_FIELD) if first else None
    if subject is None:
        return None

    event = AuditEvent(subject_id=str(subject), actor_id=caller.nav_ident, operation=operation)
    try:
        sink.record(event)
    except Exception as e:
        logger.record_audit_failure()
        logger.error(
            "Audit write failed",
            operation=operation.value,
            actor=caller.nav_ident,
            error=type(e).__name__,
        )
        return event
    logger.record_audit_event()
    return event
