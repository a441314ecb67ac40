# File: filesize_recon/api/v1/routes_utilization.py

"""
Read-only utilization endpoints over the file_count_by_size table.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from filesize_recon.api.deps import get_bucketer, get_db
from filesize_recon.models.file_count_by_size import FileCountBySize
from filesize_recon.schemas.file_size import (
    FileCountBySizeListResponse,
    FileCountBySizeRead,
)
from filesize_recon.services.bucketer import Bucketer

router = APIRouter(tags=["utilization"])


@router.get(
    "/fileCount",
    response_model=FileCountBySizeListResponse,
    summary="Object counts per size bucket",
)
def get_file_counts(
    db: Session = Depends(get_db),
    bucketer: Bucketer = Depends(get_bucketer),
):
    """
    Return every persisted bucket in ascending upper-bound order.

    Rows left over from a different size layout are filtered out.
    """
    rows = db.scalars(
        select(FileCountBySize).order_by(FileCountBySize.file_size)
    ).all()
    items = [
        FileCountBySizeRead.model_validate(row)
        for row in rows
        if bucketer.index_for_upper_bound(row.file_size) is not None
    ]
    return FileCountBySizeListResponse(
        items=items,
        total=sum(item.count for item in items),
    )
