"""Error types raised by the thumbforge pipeline."""

from __future__ import annotations

from typing import Any


class PipelineError(RuntimeError):
    """Base error for fetch, staging and variant failures.

    A failure to remove the staged image while this error was propagating is
    kept on ``cleanup_error`` and reported as part of the message.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.cleanup_error: Exception | None = None

    def attach_cleanup_failure(self, exc: Exception) -> None:
        self.cleanup_error = exc

    def __str__(self) -> str:
        if self.cleanup_error is None:
            return self.message
        return f"{self.message} (also failed to remove staged image: {self.cleanup_error})"


class FetchError(PipelineError):
    """Raised when the remote image cannot be fetched."""


class StorageIOError(PipelineError):
    """Raised when a filesystem create/open/copy/rename/remove fails."""


class TooLargeError(PipelineError):
    """Raised when the downloaded image exceeds the configured ceiling."""

    def __init__(self, size_bytes: int, limit: int) -> None:
        super().__init__(f"Origin image was too big ({size_bytes} bytes, limit {limit} bytes)")
        self.size_bytes = size_bytes
        self.limit = limit


class DecodeError(PipelineError):
    """Raised when the staged file is not a decodable image."""


class UnknownTargetError(PipelineError):
    """Raised when a target names an unsupported operation or preset."""

    def __init__(self, target: Any, detail: str | None = None) -> None:
        message = f"Unknown target {target!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.target = target


class InvalidTargetError(PipelineError):
    """Raised when a known operation carries invalid parameters."""
