"""
CLI module - Command line interface for guse-zip

Entry point for the `gusezip` command using Typer.
"""

import hashlib
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import AppConfig, load_config
from .errors import FormatError, NotFoundError
from .locator import write_stream
from .workflow import WorkflowArchive

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(
    name="gusezip",
    help="guse-zip - Inspect, edit and rewrite gUSE workflow zip archives.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    if value:
        console.print(f"gusezip version {__version__}")
        raise typer.Exit()


# Type aliases for common options
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config file", exists=True, dir_okay=False),
]
ArchiveArgument = Annotated[Path, typer.Argument(help="Workflow zip archive", exists=True, dir_okay=False)]
ForceOption = Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing output file")]


def setup_logging(config: AppConfig, verbose: bool = False) -> None:
    """Route log records through Rich at the configured level."""
    level = logging.DEBUG if verbose else config.logging.level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=config.logging.rich_tracebacks)],
        force=True,
    )


def get_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration, exiting on invalid values."""
    try:
        return load_config(config_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid config: {e}")
        raise typer.Exit(1) from None


def _load_archive(path: Path) -> WorkflowArchive:
    try:
        return WorkflowArchive.from_path(path)
    except FormatError as e:
        console.print(f"[red]Error:[/red] {path.name} is not a valid workflow archive: {e}")
        raise typer.Exit(1) from None


def _save_archive(archive: WorkflowArchive, output: Path, config: AppConfig, force: bool) -> int:
    try:
        stream = archive.as_zip_stream(config.archive.compression_method, config.archive.compress_level)
    except FormatError as e:
        console.print(f"[red]Error:[/red] Cannot write workflow archive: {e}")
        raise typer.Exit(1) from None

    try:
        return write_stream(stream, output, overwrite=force or config.output.overwrite)
    except FileExistsError:
        console.print(f"[yellow]Warning:[/yellow] Output file exists: {output}")
        console.print("Use --force to replace, or specify a different output")
        raise typer.Exit(1) from None


def format_size(size: int) -> str:
    """Format a byte count as a human-readable string."""
    if size < 1024:
        return f"{size} B"
    return f"{size / 1024:.1f} KB"


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool, typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging")] = False,
    config: ConfigOption = None,
):
    """guse-zip - Inspect, edit and rewrite gUSE workflow zip archives."""
    # Shared with every command through the context
    ctx.obj = get_config(config)
    setup_logging(ctx.obj, verbose)


@app.command()
def info(archive_path: ArchiveArgument):
    """Show the nodes and files of a workflow archive."""
    archive = _load_archive(archive_path)

    table = Table(title=f"Workflow: {archive_path.name}")
    table.add_column("Node", style="cyan")
    table.add_column("File", style="green")
    table.add_column("Size", justify="right")
    table.add_column("SHA256", style="dim")

    for node_name in sorted(archive.list_node_names()):
        node = archive.nodes[node_name]
        if node.is_empty():
            table.add_row(node_name, "[yellow](empty)[/yellow]", "-", "-")
            continue
        for file_name in node.file_names():
            data = node.files[file_name]
            digest = hashlib.sha256(data).hexdigest()[:12]
            table.add_row(node_name, file_name, format_size(len(data)), digest)

    base = f"{archive.base_name}/" if archive.base_name is not None else "(none)"
    console.print(f"[bold]Base directory:[/bold] {base}")
    console.print(f"[bold]Manifest:[/bold] {format_size(len(archive.manifest))}")
    console.print(table)

    multi = sorted(name for name, node in archive.nodes.items() if len(node.files) > 1)
    if multi:
        console.print(f"\n[yellow]Warning:[/yellow] Nodes with more than one file: {', '.join(multi)}")


@app.command()
def cat(
    archive_path: ArchiveArgument,
    node: Annotated[str, typer.Argument(help="Node name")],
    file_name: Annotated[str, typer.Argument(help="File name on the node")],
):
    """Write one node file to stdout."""
    archive = _load_archive(archive_path)
    try:
        data = archive.get_file(node, file_name).read()
    except NotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    typer.echo(data, nl=False)


@app.command()
def manifest(archive_path: ArchiveArgument):
    """Write the workflow.xml manifest to stdout."""
    archive = _load_archive(archive_path)
    typer.echo(archive.manifest, nl=False)


@app.command()
def add(
    ctx: typer.Context,
    archive_path: ArchiveArgument,
    node: Annotated[str, typer.Argument(help="Existing node to store the file on")],
    file_path: Annotated[Path, typer.Argument(help="Local file to add", exists=True, dir_okay=False)],
    name: Annotated[str | None, typer.Option("--name", "-n", help="File name inside the archive")] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output archive")] = None,
    force: ForceOption = False,
):
    """
    Store a local file on a node and write the updated archive.

    [bold]Examples:[/bold]

        gusezip add workflow.zip jobA ./run.sh

        gusezip add workflow.zip jobA ./run_v2.sh --name run.sh -o updated.zip
    """
    cfg: AppConfig = ctx.obj
    archive = _load_archive(archive_path)

    if output is None:
        output = archive_path.parent / f"{archive_path.stem}_out.zip"
        console.print(f"[dim]Output not specified, using: {output}[/dim]")

    file_name = name or file_path.name
    try:
        archive.add_file(node, file_name, file_path.read_bytes())
    except NotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print(f"Available: {', '.join(sorted(archive.list_node_names()))}")
        raise typer.Exit(1) from None

    written = _save_archive(archive, output, cfg, force)
    console.print(f"[green]✓[/green] {node}/{file_name} stored, wrote {format_size(written)} to {output}")


@app.command()
def repack(
    ctx: typer.Context,
    archive_path: ArchiveArgument,
    output: Annotated[Path, typer.Argument(help="Output archive", dir_okay=False)],
    force: ForceOption = False,
):
    """Decode and re-encode a workflow archive in canonical form."""
    cfg: AppConfig = ctx.obj
    archive = _load_archive(archive_path)
    written = _save_archive(archive, output, cfg, force)
    console.print(f"[green]✓[/green] {len(archive.nodes)} nodes, wrote {format_size(written)} to {output}")


if __name__ == "__main__":
    app()
