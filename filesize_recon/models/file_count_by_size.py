# File: filesize_recon/models/file_count_by_size.py

"""
FileCountBySize model.

One row per size bucket: the bucket's upper bound in bytes and the number
of objects currently falling into it. Rows are inserted the first time a
bucket is written and overwritten afterwards; nothing here deletes them.
"""

from sqlalchemy import BigInteger
from sqlalchemy.orm import Mapped, mapped_column

from filesize_recon.models.base import Base


class FileCountBySize(Base):
    __tablename__ = "file_count_by_size"

    # 2**(10 + i) for regular buckets, 2**63 - 1 for the overflow bucket
    file_size: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )
    count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"FileCountBySize(file_size={self.file_size}, count={self.count})"
