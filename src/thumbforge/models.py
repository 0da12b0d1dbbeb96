"""Domain models used by thumbforge."""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from thumbforge.errors import InvalidTargetError, UnknownTargetError

_TARGET_NAME_PATTERN = r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$"
_NAME_RE = re.compile(_TARGET_NAME_PATTERN)
_SIZE_RE = re.compile(r"^(\d+)x(\d+)$")


class Operation(str, Enum):
    COPY = "copy"
    THUMBNAIL = "thumbnail"


class CopyTarget(BaseModel):
    """Verbatim copy of the staged image."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(pattern=_TARGET_NAME_PATTERN)
    operation: Literal["copy"] = "copy"


class ThumbnailTarget(BaseModel):
    """Resized rendition of exactly ``width`` x ``height`` pixels."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(pattern=_TARGET_NAME_PATTERN)
    operation: Literal["thumbnail"] = "thumbnail"
    width: int = Field(gt=0)
    height: int = Field(gt=0)


TargetSpec = Annotated[CopyTarget | ThumbnailTarget, Field(discriminator="operation")]

_TARGET_ADAPTER: TypeAdapter[CopyTarget | ThumbnailTarget] = TypeAdapter(TargetSpec)

PRESET_TARGETS: dict[str, CopyTarget | ThumbnailTarget] = {
    "orig": CopyTarget(name="orig"),
    "sm": ThumbnailTarget(name="sm", width=150, height=150),
    "xs": ThumbnailTarget(name="xs", width=50, height=50),
}


class StagedImage(BaseModel):
    """The downloaded source image, resident in the temp directory."""

    path: Path
    size_bytes: int
    source_url: str

    @property
    def extension(self) -> str:
        return self.path.suffix


class VariantResult(BaseModel):
    """One variant written into the storage directory."""

    name: str
    file_name: str
    output_path: Path


def resolve_target(item: Any) -> CopyTarget | ThumbnailTarget:
    """Turn a target instance, preset name or mapping into a typed target.

    Unknown presets and operations raise ``UnknownTargetError``; a known
    operation with bad parameters raises ``InvalidTargetError``.
    """

    if isinstance(item, (CopyTarget, ThumbnailTarget)):
        return item

    if isinstance(item, str):
        try:
            return PRESET_TARGETS[item]
        except KeyError:
            raise UnknownTargetError(item, f"expected one of {sorted(PRESET_TARGETS)}") from None

    if isinstance(item, Mapping):
        operation = item.get("operation")
        try:
            operation = Operation(operation)
        except ValueError:
            raise UnknownTargetError(
                item.get("name", dict(item)), f"unsupported operation {operation!r}"
            ) from None

        try:
            return _TARGET_ADAPTER.validate_python({**item, "operation": operation.value})
        except ValidationError as exc:
            raise InvalidTargetError(f"Invalid target {dict(item)!r}: {exc}") from exc

    raise UnknownTargetError(item)


def parse_target_option(text: str) -> CopyTarget | ThumbnailTarget:
    """Parse ``orig|sm|xs``, ``NAME=copy`` or ``NAME=WIDTHxHEIGHT``."""

    raw = text.strip()
    if "=" not in raw:
        return resolve_target(raw)

    name, _, value = raw.partition("=")
    name = name.strip()
    value = value.strip().lower()

    if value == Operation.COPY.value:
        return resolve_target({"name": name, "operation": Operation.COPY.value})

    match = _SIZE_RE.match(value)
    if match is None:
        raise UnknownTargetError(raw, "expected NAME=copy or NAME=WIDTHxHEIGHT")

    return resolve_target(
        {
            "name": name,
            "operation": Operation.THUMBNAIL.value,
            "width": int(match.group(1)),
            "height": int(match.group(2)),
        }
    )


def validate_local_name(local_name: str) -> str:
    """Reject base names that could leave the storage directory."""

    if not _NAME_RE.fullmatch(local_name):
        raise ValueError(f"Invalid local name {local_name!r}: use letters, digits, '_', '-' or '.'")
    return local_name
