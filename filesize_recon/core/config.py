# File: filesize_recon/core/config.py

import os
from functools import lru_cache
from typing import List

from pydantic import BaseModel, AnyHttpUrl, field_validator

# Largest value a signed 64-bit BIGINT column can hold.
MAX_UPPER_BOUND = 2**63 - 1
ONE_KB = 1024


class Settings(BaseModel):
    # Basic app info
    app_name: str = "File Size Recon API"

    PROJECT_NAME: str = "File Size Recon API"
    VERSION: str = "0.1.0"

    api_v1_prefix: str = "/api/v1"
    debug: bool = os.getenv("FILESIZE_RECON_DEBUG", "false").lower() == "true"

    # CORS
    backend_cors_origins: List[AnyHttpUrl] = []

    # Database holding the file_count_by_size aggregate
    database_url: str = os.getenv(
        "FILESIZE_RECON_DATABASE_URL", "sqlite:///./filesize_recon.db"
    )

    # Objects at or above this size (bytes) share the overflow bucket. 1 PB.
    # Regular buckets stop at the largest power of two below it, so with a
    # non power-of-two value (e.g. 3000) sizes from that power up (2048..2999)
    # are already counted as overflow.
    max_file_size_upper_bound: int = int(
        os.getenv("FILESIZE_RECON_MAX_FILE_SIZE", str(2**50))
    )

    log_level: str = os.getenv("FILESIZE_RECON_LOG_LEVEL", "INFO")

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, list):
            return v
        return []

    @field_validator("max_file_size_upper_bound")
    @classmethod
    def check_upper_bound(cls, v: int) -> int:
        if v < ONE_KB or v > MAX_UPPER_BOUND:
            raise ValueError(
                f"max_file_size_upper_bound must be between {ONE_KB} and {MAX_UPPER_BOUND}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
