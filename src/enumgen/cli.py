"""
enumgen CLI.

Commands:
- generate: Scan Go files and write ``<type>_enum.go`` companions
- scan: List the enum directives found, without writing anything
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from enumgen import __version__
from enumgen.core.errors import ConfigError
from enumgen.core.manifest import GeneratorConfig, GuardMode, resolve_config
from enumgen.generator import GenerationResult
from enumgen.pipeline import PipelineError, Stage, discover, run, scan

console = Console(soft_wrap=True)

app = typer.Typer(
    name="enumgen",
    help="Generate enum helpers for Go types annotated with //enum: directives.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"enumgen version {__version__}")
        typer.echo(f"Python {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """enumgen main callback for global options."""
    pass


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _fail(message: str) -> NoReturn:
    typer.echo(message)
    raise typer.Exit(code=1)


_STAGE_LABELS = {
    Stage.DISCOVER: "Error finding files",
    Stage.INFER: "Error inferring defaults",
    Stage.SCAN: "Error parsing files",
    Stage.GENERATE: "Error generating files",
}


def _fail_stage(e: PipelineError) -> NoReturn:
    if e.stage == Stage.GENERATE and e.type_name:
        _fail(f"Error generating file for {e.type_name}: {e.error}")
    _fail(f"{_STAGE_LABELS[e.stage]}: {e.error}")


def _print_result(result: GenerationResult) -> None:
    for path in result.files_created:
        console.print(f"[green]Generated[/green] {escape(str(path))}")
    for path in result.files_skipped:
        console.print(f"[dim]Skipped[/dim] {escape(str(path))} (already generated)")


def _print_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        console.print(f"[yellow]Warning[/yellow] {escape(warning)}")


def _load_config(config_file: Path | None) -> GeneratorConfig:
    try:
        return resolve_config(Path.cwd(), config_file)
    except ConfigError as e:
        _fail(f"Error loading configuration: {e}")


@app.command("generate")
def generate_command(
    input_glob: str | None = typer.Option(None, "--input", "-i", help="Input files glob [default: *]"),
    output_dir: Path | None = typer.Option(
        None, "--output", "-o", help="Output directory for generated files"
    ),
    package: str | None = typer.Option(None, "--pkg", "-p", help="Package name for generated files"),
    strict: bool | None = typer.Option(
        None, "--strict/--no-strict", help="Reject empty, invalid or duplicate member names"
    ),
    guard: GuardMode | None = typer.Option(
        None, "--guard", help="How existing files are detected as already generated"
    ),
    templates: Path | None = typer.Option(
        None, "--templates", help="Directory with an enum.go.j2 overriding the built-in template"
    ),
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="Path to enumgen.toml or pyproject.toml"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Generate companion files for every annotated type.

    Output directory and package default to those of the first matched
    Go file. Existing files that already carry the generated header are
    left untouched.
    """
    _configure_logging(verbose)

    config = _load_config(config_file).merge(
        input=input_glob,
        output_dir=output_dir,
        package=package,
        strict=strict,
        guard=guard,
        template_dir=templates,
    )

    try:
        result = run(config, on_result=_print_result)
    except PipelineError as e:
        _fail_stage(e)

    _print_warnings(result.warnings)
    typer.echo("Enum generation completed!")


@app.command("scan")
def scan_command(
    input_glob: str | None = typer.Option(None, "--input", "-i", help="Input files glob [default: *]"),
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="Path to enumgen.toml or pyproject.toml"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    List annotated enums without generating anything.
    """
    _configure_logging(verbose)
    config = _load_config(config_file).merge(input=input_glob)

    try:
        files = discover(config)
        enums, warnings = scan(files, strict=config.strict)
    except PipelineError as e:
        _fail_stage(e)

    _print_warnings(warnings)
    if not enums:
        typer.echo("No enum directives found.")
        return

    table = Table(title="Enums")
    table.add_column("Type", style="cyan")
    table.add_column("Base")
    table.add_column("Members")
    table.add_column("Source", style="dim")

    for enum in enums:
        members = ", ".join(f"{v.name}={v.value}" for v in enum.values)
        location = f"{enum.source}:{enum.line}" if enum.source else ""
        table.add_row(enum.type_name, enum.base_type, escape(members), escape(location))

    console.print(table)
    typer.echo(f"Found {len(enums)} enum(s) in {len(files)} file(s).")


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
