"""Variant generation: verbatim copies and exact-size thumbnails."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from PIL import Image, ImageOps

from thumbforge.errors import DecodeError, StorageIOError, UnknownTargetError
from thumbforge.models import CopyTarget, StagedImage, ThumbnailTarget, VariantResult

logger = logging.getLogger(__name__)

_RESAMPLE = Image.Resampling.BICUBIC
_JPEG_MODES = {"RGB", "L", "CMYK"}


def output_location(storage_dir: Path, local_name: str, target_name: str, extension: str) -> tuple[Path, str]:
    """Return the output path and bare file name for one variant."""

    file_name = f"{local_name}.{target_name}{extension}"
    return storage_dir / file_name, file_name


def copy_original(
    staged: StagedImage, local_name: str, target: CopyTarget, storage_dir: Path
) -> VariantResult:
    output_path, file_name = output_location(storage_dir, local_name, target.name, staged.extension)
    try:
        shutil.copyfile(staged.path, output_path)
    except OSError as exc:
        raise StorageIOError(f"Failed to copy {staged.path} to {output_path}: {exc}") from exc
    return VariantResult(name=target.name, file_name=file_name, output_path=output_path)


def _encode_format(extension: str, source_format: str | None) -> str | None:
    return Image.registered_extensions().get(extension.lower()) or source_format


def make_thumbnail(
    staged: StagedImage, local_name: str, target: ThumbnailTarget, storage_dir: Path
) -> VariantResult:
    """Write a rendition cropped and resized to exactly width x height."""

    output_path, file_name = output_location(storage_dir, local_name, target.name, staged.extension)

    try:
        handle = staged.path.open("rb")
    except OSError as exc:
        raise StorageIOError(f"Failed to open staged image {staged.path}: {exc}") from exc

    with handle:
        try:
            with Image.open(handle) as source:
                source.load()
                source_format = source.format
                oriented = ImageOps.exif_transpose(source)
                thumb = ImageOps.fit(oriented, (target.width, target.height), method=_RESAMPLE)
        except (OSError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Failed to decode {staged.source_url} as an image: {exc}") from exc

    image_format = _encode_format(staged.extension, source_format)
    if image_format == "JPEG" and thumb.mode not in _JPEG_MODES:
        thumb = thumb.convert("RGB")

    try:
        thumb.save(output_path, format=image_format)
    except (OSError, ValueError, KeyError) as exc:
        raise StorageIOError(f"Failed to write thumbnail {output_path}: {exc}") from exc

    return VariantResult(name=target.name, file_name=file_name, output_path=output_path)


def generate_variant(
    staged: StagedImage,
    local_name: str,
    target: CopyTarget | ThumbnailTarget,
    storage_dir: Path,
) -> VariantResult:
    """Produce one named variant of the staged image in storage_dir."""

    match target:
        case CopyTarget():
            result = copy_original(staged, local_name, target, storage_dir)
        case ThumbnailTarget():
            result = make_thumbnail(staged, local_name, target, storage_dir)
        case _:
            raise UnknownTargetError(target)

    logger.info("Wrote variant %s to %s", result.name, result.output_path)
    return result
