"""CLI entry point for the Regions of Interest generator."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from roigen.config.settings import get_settings
from roigen.errors.exceptions import RegionsError

console = Console()


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose):
    """Regions of Interest generator: one trace-viewer region file per event provider."""
    setup_logging("DEBUG" if verbose else get_settings().log_level)


@cli.command()
@click.argument("root_name")
@click.option(
    "--measure", "-m", "measure_args", multiple=True, type=(str, str, str),
    metavar="NAME START STOP", help="A measure; repeat for more.",
)
@click.option("--measures-file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="JSON/YAML list of {Name, Start, Stop} records.")
@click.option("--providers-file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="JSON/YAML list of {Name, Provider, Id, Version, FieldName} records.")
@click.option("--output", "-o", "output_dir", type=click.Path(file_okay=False), default=None,
              help="Output directory (default: ROIGEN_OUTPUT_DIR or the current directory).")
@click.option("--dry-run", is_flag=True, help="Print the documents instead of writing them.")
def generate(root_name, measure_args, measures_file, providers_file, output_dir, dry_run):
    """Generate region files for ROOT_NAME from measures given inline or in a file."""
    from roigen.services.generate_service import generate_regions
    from roigen.utils.validator import build_request, load_record_list

    try:
        measures = []
        if measures_file:
            measures.extend(load_record_list(measures_file, "measures"))
        measures.extend({"Name": name, "Start": start, "Stop": stop} for name, start, stop in measure_args)

        providers = load_record_list(providers_file, "providers") if providers_file else None

        request = build_request(root_name, measures, providers)
        result = generate_regions(request, output_dir=output_dir, dry_run=dry_run)
        _display_result(result)
    except RegionsError as exc:
        console.print(f"[bold red]Error:[/] {exc.message}", style="red")
        sys.exit(1)


@cli.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", "output_dir", type=click.Path(file_okay=False), default=None,
              help="Output directory (overrides the manifest's output_dir).")
@click.option("--dry-run", is_flag=True, help="Print the documents instead of writing them.")
def build(manifest, output_dir, dry_run):
    """Generate region files from a YAML/JSON manifest."""
    from roigen.services.generate_service import generate_from_manifest

    try:
        console.print(Panel(f"[bold blue]Building from:[/] {manifest}", title="Regions", border_style="blue"))
        result = generate_from_manifest(manifest, output_dir=output_dir, dry_run=dry_run)
        _display_result(result)
    except RegionsError as exc:
        console.print(f"[bold red]Error:[/] {exc.message}", style="red")
        sys.exit(1)


@cli.command()
def providers():
    """List the built-in default providers."""
    table = Table(title="Default Providers", show_header=True)
    table.add_column("Name", style="bold")
    table.add_column("Provider", style="cyan")
    table.add_column("Id", justify="right")
    table.add_column("Version", justify="right")
    table.add_column("FieldName")

    for record in get_settings().default_providers():
        table.add_row(
            record["Name"], record["Provider"], str(record["Id"]),
            str(record["Version"]), record["FieldName"],
        )

    console.print(table)


def _display_result(result: dict):
    if result["dry_run"]:
        for doc in result["documents"]:
            console.print(Panel(
                Syntax(doc.content.decode("utf-8"), "xml", word_wrap=True),
                title=doc.file_name, border_style="dim",
            ))

    table = Table(title="Region Files", show_header=True)
    table.add_column("Provider", style="bold")
    table.add_column("Path", style="cyan")
    table.add_column("Status", justify="center")
    status = "[dim]dry run[/]" if result["dry_run"] else "[green]written[/]"
    for entry in result["files"]:
        table.add_row(entry["provider"], entry["path"], status)

    console.print(Panel(
        f"[bold]Root:[/]      {result['root_name']}\n"
        f"[bold]Root GUID:[/] {result['root_guid']}\n"
        f"[bold]Measures:[/]  {result['measures']}",
        title="Generated", border_style="green",
    ))
    console.print(table)


if __name__ == "__main__":
    cli()
