"""gotir CLI: inspect the typed IR of a Go source file."""

import json
import logging
import sys

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from gotir import __version__

console = Console()
err_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug diagnostics")
def main(verbose: bool):
    """gotir: typed IR for Go type declarations.

    Lift the imports and type declarations of a Go file, apply a transform
    pipeline, and report what survives.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _build(source: str, package: str | None, transforms_path: str | None):
    from gotir.builder import file_from_path
    from gotir.config import Pipeline, load_pipeline
    from gotir.parser.go_parser import GoSyntaxError

    try:
        pipeline = load_pipeline(transforms_path) if transforms_path else Pipeline()
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Invalid transforms file:[/] {e}")
        sys.exit(1)

    try:
        return file_from_path(source, package or pipeline.package, *pipeline.transforms)
    except (GoSyntaxError, UnicodeDecodeError) as e:
        console.print(f"[red]Failed to parse {source}:[/] {e}")
        sys.exit(1)


def _describe(t) -> tuple[str, str]:
    from gotir.ir.models import ArrayType, MapType, PlainType, StructType

    if isinstance(t, StructType):
        return "struct", ", ".join(t.field_names)
    if isinstance(t, ArrayType):
        return "array", "[]" + t.type
    if isinstance(t, MapType):
        return "map", f"map[{t.key_type}]{t.value_type}"
    if isinstance(t, PlainType):
        return "plain", t.type
    return type(t).__name__, ""


# ── Inspect ──────────────────────────────────────────────────────────


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--package", "-p", default=None, help="Package name for the output")
@click.option("--transforms", "-t", "transforms_path", default=None, help="YAML transform pipeline")
@click.option(
    "--format", "-f", "fmt", default="table", type=click.Choice(["table", "yaml", "json"])
)
def inspect(source: str, package: str | None, transforms_path: str | None, fmt: str):
    """Lift SOURCE into the typed IR and print it."""
    f = _build(source, package, transforms_path)

    if fmt == "json":
        click.echo(json.dumps(f.to_dict(), indent=2))
        return
    if fmt == "yaml":
        click.echo(yaml.safe_dump(f.to_dict(), sort_keys=False))
        return

    console.print(f"\n[bold blue]package[/] {f.package}\n")

    table = Table(title=f"Types ({len(f.code)})")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Type / Fields")
    for t in f.code:
        kind, detail = _describe(t)
        table.add_row(t.name, kind, detail)
    console.print(table)

    _print_imports(f)


# ── Imports ──────────────────────────────────────────────────────────


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--transforms", "-t", "transforms_path", default=None, help="YAML transform pipeline")
def imports(source: str, transforms_path: str | None):
    """List the imports SOURCE's surviving types still reference."""
    f = _build(source, None, transforms_path)
    _print_imports(f)


def _print_imports(f) -> None:
    if not f.imports:
        console.print("[yellow]No imports in use.[/]")
        return

    table = Table(title=f"Imports ({len(f.imports)})")
    table.add_column("Name", style="cyan")
    table.add_column("Path")
    for imp in f.sorted_imports():
        table.add_row(imp.key, imp.path)
    console.print(table)


if __name__ == "__main__":
    main()
