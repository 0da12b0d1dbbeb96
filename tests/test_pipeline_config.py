from pathlib import Path

import pytest
from pydantic import ValidationError

from thumbforge.config import PipelineConfig


def test_pipeline_config_defaults(tmp_path: Path) -> None:
    config = PipelineConfig(storage_dir=tmp_path)
    assert config.max_orig_size_bytes == 0
    assert config.timeout_seconds == 20.0
    assert config.follow_redirects is True
    assert config.temp_dir is None


def test_pipeline_config_requires_existing_storage_dir(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        PipelineConfig(storage_dir=tmp_path / "missing")


def test_pipeline_config_rejects_negative_size_limit(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        PipelineConfig(storage_dir=tmp_path, max_orig_size_bytes=-1)
