"""
Database initialization helpers.

Models are imported here so their tables get registered on Base.metadata
before create_all runs.
"""

from sqlalchemy.engine import Engine

from filesize_recon.db.session import engine as default_engine
from filesize_recon.models.base import Base
from filesize_recon.models import file_count_by_size  # noqa: F401


def init_db(engine: Engine | None = None) -> None:
    """
    Create all tables based on SQLAlchemy models.

    Existing tables are left alone, so this is safe to call on every start.
    """
    Base.metadata.create_all(bind=engine or default_engine)
