"""Download a remote image into a uniquely named temporary file."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from types import TracebackType
from urllib.parse import urlparse

import httpx

from thumbforge.errors import FetchError, PipelineError, StorageIOError, TooLargeError
from thumbforge.models import StagedImage

logger = logging.getLogger(__name__)

TEMP_PREFIX = "thumbforge-"
_CHUNK_SIZE = 64 * 1024


class StagedFile:
    """Scoped handle on a staged image.

    ``release`` deletes the file at its current name. Used as a context
    manager, release runs on every exit from the block. A release failure
    after a clean exit propagates as ``StorageIOError``; a release failure
    while a ``PipelineError`` is propagating is attached to that error.
    """

    def __init__(self, image: StagedImage) -> None:
        self.image = image

    @property
    def path(self) -> Path:
        return self.image.path

    def release(self) -> None:
        try:
            self.image.path.unlink()
        except OSError as exc:
            raise StorageIOError(f"Failed to remove staged image {self.image.path}: {exc}") from exc
        logger.debug("Removed staged image %s", self.image.path)

    def __enter__(self) -> StagedFile:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.release()
        except StorageIOError as cleanup_exc:
            if exc is None:
                raise
            logger.warning("%s", cleanup_exc)
            if isinstance(exc, PipelineError):
                exc.attach_cleanup_failure(cleanup_exc)


def url_extension(url: str) -> str:
    """Return the suffix of the URL path, leading dot included, or ''."""

    path = urlparse(url).path
    if path.endswith("/"):
        return ""
    return Path(path).suffix


def _discard_partial(path: Path, error: PipelineError) -> PipelineError:
    try:
        path.unlink()
    except OSError as exc:
        logger.warning("Failed to remove partial download %s: %s", path, exc)
        error.attach_cleanup_failure(exc)
    return error


def _stream_to_temp(
    response: httpx.Response,
    url: str,
    max_orig_size_bytes: int,
    temp_dir: Path | None,
) -> tuple[Path, int]:
    try:
        fd, raw_path = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=temp_dir)
    except OSError as exc:
        raise StorageIOError(f"Failed to create temp file: {exc}") from exc
    temp_path = Path(raw_path)

    written = 0
    try:
        with os.fdopen(fd, "wb") as handle:
            for chunk in response.iter_bytes(_CHUNK_SIZE):
                handle.write(chunk)
                written += len(chunk)
                # stop reading once the ceiling is crossed
                if 0 < max_orig_size_bytes < written:
                    break
    except httpx.HTTPError as exc:
        raise _discard_partial(temp_path, FetchError(f"Failed to read body of '{url}': {exc}")) from exc
    except OSError as exc:
        raise _discard_partial(
            temp_path, StorageIOError(f"Failed to write temp file {temp_path}: {exc}")
        ) from exc
    except BaseException:
        try:
            temp_path.unlink()
        except OSError as cleanup_exc:
            logger.warning("Failed to remove partial download %s: %s", temp_path, cleanup_exc)
        raise

    if 0 < max_orig_size_bytes < written:
        raise _discard_partial(temp_path, TooLargeError(written, max_orig_size_bytes))

    return temp_path, written


def acquire(
    url: str,
    *,
    client: httpx.Client,
    max_orig_size_bytes: int = 0,
    temp_dir: Path | None = None,
) -> StagedFile:
    """Fetch url into the temp directory and return a handle on the staged file.

    The staged file name carries the extension of the URL path so that the
    image codec can recognise it. HTTP status codes are not inspected: any
    body that can be read is staged.
    """

    logger.debug("Fetching %s", url)
    try:
        with client.stream("GET", url) as response:
            temp_path, written = _stream_to_temp(response, url, max_orig_size_bytes, temp_dir)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(f"Failed to fetch '{url}': {exc}") from exc

    extension = url_extension(url)
    final_path = temp_path
    if extension:
        final_path = temp_path.with_name(temp_path.name + extension)
        try:
            temp_path.rename(final_path)
        except OSError as exc:
            raise _discard_partial(
                temp_path, StorageIOError(f"Failed to rename {temp_path} to {final_path}: {exc}")
            ) from exc

    logger.info("Staged %s (%d bytes) at %s", url, written, final_path)
    return StagedFile(StagedImage(path=final_path, size_bytes=written, source_url=url))
