"""Command-line interface for arscene.

Usage:
    arscene compile experience.json [options]
    arscene regenerate records/ [options]
    arscene inspect experience.json
    arscene config [--output FILE]
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core.config import ArsceneConfig
from .core.errors import ExperienceCompileError
from .document.assembler import DocumentAssembler
from .document.manifest import asset_id_for, build_document_manifest
from .document.writer import ExperienceWriter
from .scene.models import Experience
from .scene.normalizer import normalize_experience
from .scene.transform import TransformResolver

console = Console()
# Log records go to stderr so `compile --stdout` emits only the document
err_console = Console(stderr=True)


def log_handler() -> RichHandler:
    """Rich log handler writing to stderr."""
    return RichHandler(console=err_console, show_time=False)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich output."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[log_handler()],
    )
    # Route MarkerDimensionParseWarning and friends through the log
    logging.captureWarnings(True)


def _load_config(config_path: str | None) -> ArsceneConfig:
    """Load configuration from file (if given), then apply AR_* variables."""
    base = ArsceneConfig.from_file(config_path) if config_path else None
    return ArsceneConfig.from_env(base=base)


def _load_records(path: Path) -> list[dict[str, Any]]:
    """Load experience records from a JSON file or a directory of them.

    A file may hold one record or a list of records.
    """
    files = sorted(path.glob("*.json")) if path.is_dir() else [path]
    records: list[dict[str, Any]] = []
    for file in files:
        with open(file, encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, list):
            records.extend(r for r in data if isinstance(r, dict))
        elif isinstance(data, dict):
            records.append(data)
        else:
            logging.getLogger(__name__).warning(f"Skipping {file}: not an experience record")
    return records


def _load_experience(record_path: str) -> Experience:
    records = _load_records(Path(record_path))
    if len(records) != 1:
        console.print(f"[bold red]Expected one experience record in {record_path}, found {len(records)}[/bold red]")
        raise click.Abort()
    return normalize_experience(records[0])


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """arscene - AR experience compiler."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


@main.command("compile")
@click.argument("record_path", type=click.Path(exists=True))
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(),
    default=None,
    help="Directory for generated documents (default: ./experiences)",
)
@click.option(
    "--stdout",
    is_flag=True,
    help="Print the document instead of saving it",
)
def compile_cmd(record_path: str, config: str | None, output_dir: str | None, stdout: bool) -> None:
    """Compile one experience record into its AR document."""
    cfg = _load_config(config)
    if output_dir:
        cfg.output.experiences_dir = Path(output_dir)

    experience = _load_experience(record_path)
    assembler = DocumentAssembler.from_config(cfg)

    try:
        if stdout:
            click.echo(assembler.assemble(experience), nl=False)
            return
        writer = ExperienceWriter(cfg.output)
        url = writer.publish(experience, assembler)
    except ExperienceCompileError as e:
        console.print(f"[bold red]Cannot compile experience {experience.id}: {e}[/bold red]")
        raise click.Abort()

    console.print(f"[green]Saved {writer.experience_path(experience.id)}[/green]")
    console.print(f"[dim]Served at {url}[/dim]")


@main.command()
@click.argument("records_path", type=click.Path(exists=True))
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(),
    default=None,
    help="Directory for generated documents (default: ./experiences)",
)
def regenerate(records_path: str, config: str | None, output_dir: str | None) -> None:
    """Regenerate the documents of every stored experience record.

    A record that fails to compile is reported and skipped.
    """
    cfg = _load_config(config)
    if output_dir:
        cfg.output.experiences_dir = Path(output_dir)

    records = _load_records(Path(records_path))
    assembler = DocumentAssembler.from_config(cfg)
    writer = ExperienceWriter(cfg.output)

    console.print(f"\n[bold]Regenerating {len(records)} experience document(s)[/bold]\n")

    success = 0
    for record in records:
        experience = normalize_experience(record)
        try:
            writer.publish(experience, assembler)
        except ExperienceCompileError as e:
            console.print(f"[red]Failed {experience.id}: {e}[/red]")
            continue
        success += 1
        console.print(f"[green]Regenerated {experience.id}[/green] [dim]({experience.title})[/dim]")

    console.print(f"\nDone. {success}/{len(records)} regenerated.")
    if success < len(records):
        sys.exit(1)


@main.command()
@click.argument("record_path", type=click.Path(exists=True))
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
def inspect(record_path: str, config: str | None) -> None:
    """Show resolved placements and asset ids without writing anything."""
    cfg = _load_config(config)
    experience = _load_experience(record_path)
    resolver = TransformResolver(cfg.policy)

    info = Table(title="Experience")
    info.add_column("Property", style="cyan")
    info.add_column("Value", style="green")
    info.add_row("ID", experience.id)
    info.add_row("Title", experience.title or "-")
    info.add_row("Mode", "multi-target" if experience.is_multi_target else "single-target")
    info.add_row("Mind file", experience.mind_file or "[red]missing[/red]")
    info.add_row("Marker image", experience.marker_image or "[red]missing[/red]")
    info.add_row("Scene objects", str(experience.scene_object_count))
    console.print(info)

    anchors = experience.anchors()
    manifest = {ref.id for ref in build_document_manifest(anchors, experience.is_multi_target)}

    table = Table(title="Resolved Placements")
    table.add_column("Anchor", style="cyan")
    table.add_column("Object", style="cyan")
    table.add_column("Type", style="yellow")
    table.add_column("Position", style="green")
    table.add_column("Rotation", style="green")
    table.add_column("Scale", style="green")
    table.add_column("Asset", style="dim")

    for index, objects in enumerate(anchors):
        for obj in objects:
            placement = resolver.resolve(obj)
            asset_id = asset_id_for(obj.id, index if experience.is_multi_target else None)
            table.add_row(
                str(index),
                obj.id,
                obj.content_type or "-",
                placement.position,
                placement.rotation,
                placement.scale,
                asset_id if asset_id in manifest else "-",
            )

    console.print(table)


@main.command("config")
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write the effective configuration to this file",
)
def config_cmd(output: str | None) -> None:
    """Show the effective configuration (defaults plus AR_* variables)."""
    cfg = ArsceneConfig.from_env()
    if output:
        cfg.to_file(output)
        console.print(f"[green]Configuration saved to {output}[/green]")
        return
    console.print_json(data=cfg.model_dump(mode="json"))


if __name__ == "__main__":
    main()
