# File: tests/conftest.py

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from filesize_recon.db.init_db import init_db
from filesize_recon.db.session import build_session_factory
from filesize_recon.services.file_count_store import FileCountBySizeStore
from filesize_recon.tasks.file_size_count import FileSizeCountTask


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory):
    return FileCountBySizeStore(session_factory)


@pytest.fixture
def task(store):
    return FileSizeCountTask(store, max_file_size_upper_bound=2**50)
