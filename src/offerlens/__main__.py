"""CLI entry point for offerlens."""

import logging
import sys
from datetime import datetime
from pathlib import Path

import click
import yaml

from .adapters.decoders import default_decoders
from .adapters.structuring import create_structuring_adapter
from .config import Settings, load_settings
from .domain.errors import DecodeFailed, UnsupportedFormat
from .domain.models import DocumentFormat, ExtractionResult
from .domain.normalize import detect_format
from .domain.services import ExtractionService

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_service(settings: Settings) -> ExtractionService:
    """Wire up adapters from settings."""
    return ExtractionService(
        decoders=default_decoders(),
        structuring=create_structuring_adapter(settings.structuring),
        min_text_length=settings.pipeline.min_text_length,
        extracted_text_limit=settings.pipeline.extracted_text_limit,
        text_quality_bonus=settings.pipeline.text_quality_bonus,
    )


def render_record(result: ExtractionResult) -> str:
    return yaml.dump(
        result.as_record(), default_flow_style=False, allow_unicode=True, sort_keys=False
    )


def write_sidecar(path: Path, result: ExtractionResult) -> Path:
    """Write the extraction record next to the source document."""
    sidecar_path = path.with_suffix(".yaml")
    data = result.as_record()
    data["processed_at"] = datetime.now().isoformat()

    logger.info(f"Writing sidecar: {sidecar_path.name}")
    sidecar_path.write_text(
        yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False),
        encoding="utf-8",
    )
    return sidecar_path


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-c", "--config", type=click.Path(exists=True), help="Config file path")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """Offerlens - commercial offer extraction."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "declared_format",
    type=click.Choice([f.value for f in DocumentFormat]),
    help="Document format (default: from file extension)",
)
@click.option("--sidecar", is_flag=True, help="Write <file>.yaml next to the document")
@click.pass_context
def extract(
    ctx: click.Context,
    file: Path,
    declared_format: str | None,
    sidecar: bool,
) -> None:
    """Extract a commercial offer from a PDF or Word document."""
    settings = load_settings(ctx.obj["config_path"])
    try:
        service = build_service(settings)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    try:
        document_format = declared_format or detect_format(None, file.name)
        result = service.extract(file.read_bytes(), file.name, document_format)
    except (UnsupportedFormat, DecodeFailed) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(render_record(result), nl=False)
    if sidecar:
        click.echo(f"sidecar: {write_sidecar(file, result)}")


if __name__ == "__main__":
    cli()
