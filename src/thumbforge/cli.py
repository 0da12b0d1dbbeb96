"""Typer CLI entrypoint for thumbforge."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from thumbforge.config import PipelineConfig
from thumbforge.errors import PipelineError
from thumbforge.models import parse_target_option, validate_local_name
from thumbforge.pipeline import DEFAULT_PRESETS, VariantPipeline

app = typer.Typer(help="Fetch a remote image and write named copies and thumbnails.", no_args_is_help=True)


@app.callback()
def main() -> None:
    """thumbforge command group."""


@app.command()
def fetch(
    url: str = typer.Argument(..., help="Remote image URL."),
    name: str = typer.Option(..., "--name", help="Base name for the output files."),
    storage_dir: Path = typer.Option(Path("."), file_okay=False),
    target: list[str] = typer.Option(
        list(DEFAULT_PRESETS),
        "--target",
        help="orig, sm, xs, NAME=copy or NAME=WIDTHxHEIGHT. Repeatable.",
    ),
    max_size: int = typer.Option(0, min=0, help="Reject downloads larger than this many bytes (0 = no limit)."),
    timeout_seconds: float = typer.Option(20.0, min=0.1),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Write each requested variant of URL into the storage directory."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = PipelineConfig(
            storage_dir=storage_dir,
            max_orig_size_bytes=max_size,
            timeout_seconds=timeout_seconds,
        )
        targets = [parse_target_option(item) for item in target]
        validate_local_name(name)
    except (ValueError, PipelineError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    try:
        results = VariantPipeline(config).run(url, name, targets)
    except PipelineError as exc:
        typer.echo(f"Processing failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    for variant_name, file_name in results.items():
        typer.echo(f"{variant_name}: {file_name}")
