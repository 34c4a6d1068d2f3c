"""propshape CLI: report the props shapes of exported UI components."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ..analysis.events import AnalysisEvent
from ..analysis.service import PropsAnalyzer, classify_file
from ..config import Settings, load_settings
from ..facade.base import FacadeError
from ..models.records import FileReport
from ..models.shapes import to_plain
from ..sources import discover_sources

console = Console()
app = typer.Typer(add_completion=False, no_args_is_help=True)


def _resolve_settings(
    config_path: Optional[Path],
    max_depth: Optional[int],
    ui_module: Optional[str],
) -> Settings:
    settings = load_settings(config_path)
    overrides: Dict[str, Any] = {}
    if max_depth is not None:
        overrides["max_depth"] = max_depth
    if ui_module:
        overrides["ui_module"] = ui_module
    if overrides:
        settings = Settings(**{**settings.model_dump(), **overrides})
    return settings


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _sources_or_exit(paths: List[Path], settings: Settings) -> List[Path]:
    sources = discover_sources(paths, settings)
    if not sources:
        console.print("[red]No source files found.[/red]")
        raise typer.Exit(1)
    return sources


def _add_shape(tree: Tree, value: Any) -> None:
    # type texts such as "[string, number]" must not be read as markup
    if isinstance(value, dict):
        for name, child in value.items():
            if isinstance(child, (dict, list)):
                _add_shape(tree.add(f"[cyan]{escape(name)}[/cyan]"), child)
            else:
                tree.add(f"[cyan]{escape(name)}[/cyan]: {escape(str(child))}")
    elif isinstance(value, list):
        for item in value:
            if isinstance(item, (dict, list)):
                _add_shape(tree.add("[dim]Array of[/dim]"), item)
            else:
                tree.add(f"[dim]Array of[/dim] {escape(str(item))}")
    else:
        tree.add(escape(str(value)))


def _render_report(path: Path, report: FileReport) -> None:
    if report.failed:
        console.print(f"[red]{escape(str(path))}:[/red] {escape(report.error or '')}")
        return
    tree = Tree(f"[bold]{escape(str(path))}[/bold] [dim]({report.skipped} skipped)[/dim]")
    if not report.components:
        tree.add("[yellow]no components found[/yellow]")
    for name, shape in report.components.items():
        plain = to_plain(shape)
        if isinstance(plain, (dict, list)):
            _add_shape(tree.add(f"[green]{escape(name)}[/green]"), plain)
        else:
            tree.add(f"[green]{escape(name)}[/green]: {escape(str(plain))}")
    console.print(tree)


def _log_event(event: AnalysisEvent) -> None:
    logging.getLogger("propshape.progress").info(
        "%s %s%s%s",
        event.kind,
        event.path,
        f" {event.name}" if event.name else "",
        f" ({event.message})" if event.message else "",
    )


@app.command()
def analyze(
    paths: List[Path] = typer.Argument(..., help="Files or directories to analyze"),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", "-d", min=0, help="Maximum nesting depth"),
    ui_module: Optional[str] = typer.Option(None, "--ui-module", help="Module forwardRef is imported from"),
    as_json: bool = typer.Option(False, "--json", help="Print one JSON object per file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the aggregate report as JSON"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to propshape.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress"),
):
    """Resolve the props shape of every exported component."""
    _configure_logging(verbose)
    settings = _resolve_settings(config, max_depth, ui_module)
    sources = _sources_or_exit(paths, settings)

    analyzer = PropsAnalyzer(settings, progress=_log_event if verbose else None)
    aggregate: Dict[str, Any] = {}
    for path, report in analyzer.iter_reports(sources):
        aggregate[str(path)] = report.to_dict()
        if as_json:
            typer.echo(json.dumps({"path": str(path), **report.to_dict()}))
        else:
            _render_report(path, report)

    if output:
        output.write_text(json.dumps(aggregate, indent=2) + "\n")
        if not as_json:
            console.print(f"[dim]Wrote {output}[/dim]")


@app.command()
def classify(
    paths: List[Path] = typer.Argument(..., help="Files or directories to inspect"),
    ui_module: Optional[str] = typer.Option(None, "--ui-module", help="Module forwardRef is imported from"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to propshape.yaml"),
):
    """List exported declarations and how each one is classified."""
    _configure_logging(False)
    settings = _resolve_settings(config, None, ui_module)
    sources = _sources_or_exit(paths, settings)

    table = Table(title="Exported declarations")
    table.add_column("File", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Classification")

    for path in sources:
        try:
            rows = classify_file(path, settings)
        except (FacadeError, ValueError) as exc:
            console.print(f"[red]{escape(str(path))}:[/red] {escape(str(exc))}")
            continue
        for name, kind, classification in rows:
            style = "green" if classification.is_component else "yellow"
            table.add_row(escape(str(path)), escape(name), kind, f"[{style}]{classification.value}[/{style}]")

    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
