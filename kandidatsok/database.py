"""
Audit record schema and connection management.

Uses SQLite with SQLAlchemy for durable audit storage.
"""

from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class AuditRecord(Base):
    """One access to personal data."""

    __tablename__ = "audit_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subject_id = Column(String, nullable=False, index=True)  # fodselsnummer of the candidate
    actor_id = Column(String, nullable=False, index=True)  # NAV ident of the caller
    operation = Column(String, nullable=False)  # lookup-cv, lookup-summary, search
    message = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


def open_database(db_path: Path):
    """
    Create the database file and tables if needed.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy engine; the caller disposes it
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    return engine


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    open_database(db_path).dispose()


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
