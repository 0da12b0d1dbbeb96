import io
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from PIL import Image


def make_image_bytes(width: int = 320, height: int = 200, image_format: str = "JPEG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 120, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    path = tmp_path / "storage"
    path.mkdir()
    return path


@pytest.fixture
def make_client() -> Callable[..., httpx.Client]:
    def _make(body: bytes = b"", *, error: Exception | None = None, status_code: int = 200) -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            if error is not None:
                raise error
            return httpx.Response(status_code, content=body)

        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes(80, 60, "PNG")
