"""Fetch, stage, derive variants and clean up in one call."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import httpx

from thumbforge.config import PipelineConfig
from thumbforge.models import resolve_target, validate_local_name
from thumbforge.staging import acquire
from thumbforge.variants import generate_variant

logger = logging.getLogger(__name__)

DEFAULT_PRESETS = ("orig", "sm", "xs")


class VariantPipeline:
    """Produce named renditions of a remote image in the storage directory.

    ``run`` returns a mapping of target name to bare output file name, or
    raises the first error. The staged download is removed on every exit
    path. Variant files already written stay on disk when a later step
    fails, and a failure to remove the staged download after every variant
    succeeded fails the whole call.
    """

    def __init__(self, config: PipelineConfig, *, client: httpx.Client | None = None) -> None:
        self.config = config
        self._client = client

    @contextmanager
    def _http_client(self) -> Iterator[httpx.Client]:
        if self._client is not None:
            yield self._client
            return

        with httpx.Client(
            timeout=self.config.timeout_seconds,
            follow_redirects=self.config.follow_redirects,
        ) as client:
            yield client

    def run(self, remote_url: str, local_name: str, targets: Sequence[Any]) -> dict[str, str]:
        """Fetch remote_url once and write one variant per target, in order.

        local_name must be a plain file name component. Targets may be typed
        targets, preset names or mappings; each is resolved just before it is
        generated, so an unknown target halts the loop at its position.
        """

        validate_local_name(local_name)

        with self._http_client() as client:
            staged = acquire(
                remote_url,
                client=client,
                max_orig_size_bytes=self.config.max_orig_size_bytes,
                temp_dir=self.config.temp_dir,
            )

        results: dict[str, str] = {}
        try:
            with staged:
                for item in targets:
                    target = resolve_target(item)
                    result = generate_variant(staged.image, local_name, target, self.config.storage_dir)
                    results[result.name] = result.file_name
        except Exception as exc:
            logger.warning("Processing %s as %s failed: %s", remote_url, local_name, exc)
            raise

        logger.info("Produced %d variant(s) of %s as %s", len(results), remote_url, local_name)
        return results

    def run_presets(self, remote_url: str, local_name: str, names: Iterable[str] = DEFAULT_PRESETS) -> dict[str, str]:
        return self.run(remote_url, local_name, list(names))
