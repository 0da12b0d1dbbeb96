"""Configuration model for thumbforge."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class PipelineConfig(BaseModel):
    """Settings held by a long-lived VariantPipeline."""

    storage_dir: Path
    max_orig_size_bytes: int = Field(default=0, ge=0)
    timeout_seconds: float = Field(default=20.0, gt=0)
    follow_redirects: bool = True
    temp_dir: Path | None = None

    @field_validator("storage_dir")
    @classmethod
    def validate_storage_dir(cls, value: Path) -> Path:
        if not value.is_dir():
            raise ValueError(f"storage_dir must be an existing directory: {value}")
        if not os.access(value, os.W_OK):
            raise ValueError(f"storage_dir is not writable: {value}")
        return value

    @field_validator("temp_dir")
    @classmethod
    def validate_temp_dir(cls, value: Path | None) -> Path | None:
        if value is not None and not value.is_dir():
            raise ValueError(f"temp_dir must be an existing directory: {value}")
        return value
