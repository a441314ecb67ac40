# File: filesize_recon/services/file_count_store.py

"""
Read / write access to the file_count_by_size table.

Reads and writes are in ascending order of the bucket upper bound. Each
write_all call is a single transaction: either every bucket row is upserted
or none is.
"""

from typing import Callable, List, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from filesize_recon.models.file_count_by_size import FileCountBySize


class FileCountBySizeStore:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def read_all(self) -> List[Tuple[int, int]]:
        db = self._session_factory()
        try:
            rows = db.scalars(
                select(FileCountBySize).order_by(FileCountBySize.file_size)
            ).all()
            return [(row.file_size, row.count) for row in rows]
        finally:
            db.close()

    def write_all(self, upper_bounds: Sequence[int], counts: Sequence[int]) -> None:
        """
        Upsert one row per bucket.

        Inserts when no row exists for the upper bound yet, otherwise
        overwrites its count. Writing the same counts twice leaves the same rows.
        """
        if len(upper_bounds) != len(counts):
            raise ValueError(
                f"Got {len(upper_bounds)} upper bounds for {len(counts)} counts"
            )
        db = self._session_factory()
        try:
            for file_size, count in zip(upper_bounds, counts):
                record = db.get(FileCountBySize, file_size)
                if record is None:
                    db.add(FileCountBySize(file_size=file_size, count=count))
                else:
                    record.count = count
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
