# File: filesize_recon/schemas/file_size.py

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class FileCountBySizeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    # Upper bound of the bucket in bytes
    file_size: int
    count: int = Field(ge=0)


class FileCountBySizeListResponse(BaseModel):
    items: List[FileCountBySizeRead]
    total: int
