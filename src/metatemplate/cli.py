"""CLI interface for metatemplate.

Typer-based command-line interface with Rich output formatting.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from metatemplate import __version__
from metatemplate.config import load_config, unknown_formats
from metatemplate.exceptions import MetaTemplateError, TemplateCompileError
from metatemplate.pipeline import TemplateCompiler
from metatemplate.project import ProjectManager
from metatemplate.registry import default_registry
from metatemplate.templates_engine import TemplateEngine
from metatemplate.types import TemplateInput
from metatemplate.usage import parse_usages
from metatemplate.writer import write_files

__all__ = ["app"]

app = typer.Typer(
    name="metatemplate",
    help="Compile one canonical HTML+CSS template into Mustache, SilverStripe and React.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _require_project() -> ProjectManager:
    pm = ProjectManager()
    if not pm.is_initialized:
        console.print(
            "[yellow]No metatemplate project found.[/yellow] "
            "Run [bold]metatemplate init[/bold] first."
        )
        raise typer.Exit(code=1)
    return pm


@app.command()
def version() -> None:
    """Show metatemplate version."""
    console.print(f"metatemplate {__version__}")


@app.command()
def init(
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Project name"),
    ] = "",
    formats: Annotated[
        list[str] | None,
        typer.Option("--format", "-f", help="Output format id (repeatable)"),
    ] = None,
) -> None:
    """Initialize a new metatemplate project in the current directory."""
    pm = ProjectManager()
    try:
        project_dir = pm.init(name=name, formats=formats)
    except (MetaTemplateError, OSError) as e:
        console.print(f"[red]Failed to initialize project:[/red] {e}")
        raise typer.Exit(code=1) from e

    console.print(f"[green]Initialized metatemplate project[/green] at {project_dir}")

    console.print("\nCreated:")
    console.print(f"  {pm.config_path}")

    status = pm.status()
    if status.config:
        console.print(f"\n  Formats: [bold]{', '.join(status.config.output.formats)}[/bold]")
        for format_id in unknown_formats(status.config):
            console.print(f"  [yellow]Unknown format:[/yellow] {format_id}")

    console.print("\nNext steps:")
    console.print("  Add <id>.html (and optionally <id>.css) to the templates directory")
    console.print("  metatemplate build     Compile every template")


@app.command()
def status() -> None:
    """Show project status: templates, formats, output directory."""
    pm = _require_project()
    try:
        st = pm.status()
    except MetaTemplateError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e

    project_name = st.config.project.name if st.config else st.root.name
    console.print(f"[bold]metatemplate project:[/bold] {project_name}")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("metric", style="dim")
    table.add_column("value", style="bold")
    table.add_row("Templates", str(st.template_count))
    if st.config:
        table.add_row("Formats", ", ".join(st.config.output.formats))
        table.add_row("Output", st.config.output.directory)
    console.print(table)

    if st.template_count == 0:
        console.print(
            "\n[dim]No templates found. Add <id>.html files to the templates directory.[/dim]"
        )


@app.command()
def formats() -> None:
    """List the available output formats."""
    table = Table(title="Output formats")
    table.add_column("Id", style="bold")
    table.add_column("Description")
    for format_id in default_registry.list_formats():
        table.add_row(format_id, default_registry.get(format_id).description)
    console.print(table)


@app.command()
def usage(
    file: Annotated[Path, typer.Argument(help="JSON usage tree")],
    format_id: Annotated[str, typer.Option("--format", "-f", help="Format id to render for")],
    import_prefix: Annotated[
        str,
        typer.Option("--import-prefix", help="Path from the example to the output directory"),
    ] = "./",
) -> None:
    """Print example code that uses compiled templates."""
    try:
        usages = parse_usages(json.loads(file.read_text(encoding="utf-8")))
        fmt = default_registry.create(format_id, TemplateInput(id="usage", html=""))
        result = fmt.make_usage(usages, import_prefix)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Cannot read {file}:[/red] {e}")
        raise typer.Exit(code=1) from e
    except MetaTemplateError as e:
        console.print(f"[red]Usage failed:[/red] {e}")
        raise typer.Exit(code=1) from e

    if not result.code:
        console.print(f"[yellow]Format {format_id} has no usage syntax.[/yellow]")
        return
    console.print(result.code, markup=False, highlight=False, emoji=False, soft_wrap=True, end="")


@app.command()
def build(
    formats: Annotated[
        list[str] | None,
        typer.Option("--format", "-f", help="Override configured format ids (repeatable)"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Override configured output directory"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Compile every template in the project into every configured format."""
    _configure_logging(verbose)
    pm = _require_project()

    try:
        config = load_config(pm.config_path)
        format_ids = list(formats) if formats else config.output.formats
        output_dir = output or pm.output_dir(config)
        templates = pm.load_templates(config)
        if not templates:
            console.print("[yellow]No templates to build.[/yellow]")
            raise typer.Exit(code=0)

        compiler = TemplateCompiler(format_ids, engine=TemplateEngine(project_root=pm.root))
        files = asyncio.run(compiler.compile_many(templates, index=config.output.index))
        written = write_files(files, output_dir)
    except TemplateCompileError as e:
        console.print(f"[red]Failed to compile {e.template_id or 'template'}:[/red] {e.message}")
        if e.key:
            console.print(f"  Key: [bold]{e.key}[/bold]")
        if e.html_snippet:
            console.print(f"  {e.html_snippet}", style="dim", markup=False)
        raise typer.Exit(code=1) from e
    except MetaTemplateError as e:
        console.print(f"[red]Build failed:[/red] {e}")
        raise typer.Exit(code=1) from e

    console.print(
        f"[green]Built {len(templates)} template(s)[/green] "
        f"into {len(written)} file(s) at {output_dir}"
    )
