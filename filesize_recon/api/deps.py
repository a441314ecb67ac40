# File: filesize_recon/api/deps.py

from collections.abc import Generator

from sqlalchemy.orm import Session

from filesize_recon.db.session import SessionLocal
from filesize_recon.services.bucketer import Bucketer


def get_db() -> Generator[Session, None, None]:
    """Read-only session for the utilization endpoints; closed after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_bucketer() -> Bucketer:
    return Bucketer()
