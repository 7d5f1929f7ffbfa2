"""CLI entry point for repolens."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path, PurePosixPath
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text
from rich.tree import Tree

from repolens.config import RepolensConfig, load_config
from repolens.config.loader import DEFAULT_CONFIG_TEMPLATE, PROJECT_CONFIG_NAME
from repolens.context import ContextBuilder
from repolens.generator import DocEngine, EngineState
from repolens.graph import build_graph, layout, to_mermaid
from repolens.ingest import (
    DirectoryIngester,
    Entry,
    IngestionSession,
    LocalDirectoryHandle,
    Snapshot,
    find_entry,
    iter_entries,
)
from repolens.output import MarkdownWriter

app = typer.Typer(
    name="repolens",
    help="Map a project directory into a layered graph and LLM-ready README context.",
)

config_app = typer.Typer(help="Manage repolens configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: RepolensConfig | None = None

_LOG_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "warn": logging.WARNING, "error": logging.ERROR}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _configure_logging(cfg: RepolensConfig) -> None:
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(show_path=False, rich_tracebacks=True)
    logging.basicConfig(level=_LOG_LEVELS[cfg.log_level], handlers=[handler], force=True)


def _get_config() -> RepolensConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to repolens.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _configure_logging(_config)


def _load(path: str, cfg: RepolensConfig) -> Snapshot:
    """Ingest *path* through a session, exiting if it cannot be opened."""
    session = IngestionSession(DirectoryIngester(cfg.ingest))

    async def opener() -> LocalDirectoryHandle:
        return LocalDirectoryHandle.open(path)

    snapshot = asyncio.run(session.load(opener))
    if snapshot is None:
        rprint(f"[red]Error:[/red] cannot open directory {path}")
        raise typer.Exit(1)
    return snapshot


def _add_branch(parent: Tree, entries: tuple[Entry, ...]) -> None:
    for entry in entries:
        if entry.is_dir:
            branch = parent.add(f"[bold blue]{escape(entry.name)}/[/bold blue]")
            _add_branch(branch, entry.children or ())
        else:
            size = f" [dim]({len(entry.content)} chars)[/dim]" if entry.content is not None else " [dim](unread)[/dim]"
            parent.add(f"[green]{escape(entry.name)}[/green]{size}")


@app.command()
def scan(path: str = typer.Argument(".", help="Directory to scan")) -> None:
    """Scan a directory and show the ingested tree."""
    cfg = _get_config()
    snapshot = _load(path, cfg)

    files = dirs = 0
    for entry in iter_entries(snapshot.entries):
        if entry.is_dir:
            dirs += 1
        else:
            files += 1

    tree = Tree(f"[bold]{escape(snapshot.title)}[/bold] ({files} files, {dirs} directories)")
    _add_branch(tree, snapshot.entries)
    rprint(tree)


@app.command()
def context(
    path: str = typer.Argument(".", help="Directory to scan"),
    max_depth: Annotated[
        int | None, typer.Option("--max-depth", help="Override tree listing depth")
    ] = None,
) -> None:
    """Print the tree listing, manifest excerpt, and key-file snippets."""
    cfg = _get_config()
    ctx_cfg = cfg.context
    if max_depth is not None:
        ctx_cfg = ctx_cfg.model_copy(update={"tree_max_depth": max_depth})

    snapshot = _load(path, cfg)
    ctx = ContextBuilder(ctx_cfg).build(snapshot.entries, snapshot.title)

    rprint(Panel(Text(ctx.file_tree or "(empty)"), title="File Structure", border_style="blue"))
    rprint(Panel(Text(ctx.manifest), title="Dependencies", border_style="yellow"))
    rprint(Panel(Text(ctx.snippets or "(no key files)"), title="Code Snippets", border_style="green"))


@app.command()
def graph(
    path: str = typer.Argument(".", help="Directory to scan"),
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: json or mermaid")
    ] = "json",
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Write to file instead of stdout")
    ] = None,
) -> None:
    """Emit the laid-out structure graph."""
    if format not in ("json", "mermaid"):
        rprint(f"[red]Error:[/red] unknown format {format!r} (use json or mermaid)")
        raise typer.Exit(1)

    cfg = _get_config()
    snapshot = _load(path, cfg)
    nodes, edges = build_graph(snapshot.entries)

    if format == "mermaid":
        text = to_mermaid(nodes, edges)
    else:
        positioned = layout(nodes, edges, cfg.layout)
        text = json.dumps(
            {
                "nodes": [n.model_dump() for n in positioned],
                "edges": [e.model_dump() for e in edges],
            },
            indent=2,
        )

    if output:
        Path(output).write_text(text, encoding="utf-8")
        rprint(f"[green]Wrote[/green] {output} ({len(nodes)} nodes, {len(edges)} edges)")
    else:
        typer.echo(text)


def _status_printer(state: EngineState) -> None:
    if state is EngineState.LOADING:
        rprint("[dim]Loading LLM provider...[/dim]")
    elif state is EngineState.GENERATING:
        rprint("[dim]Generating...[/dim]")


@app.command()
def readme(
    path: str = typer.Argument(".", help="Directory to document"),
    title: Annotated[
        str | None, typer.Option("--title", "-t", help="Project title (default: directory name)")
    ] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Override output directory")
    ] = None,
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without writing"),
) -> None:
    """Generate a project README from the directory's context."""
    cfg = _get_config()
    snapshot = _load(path, cfg)
    project_title = title or snapshot.title or "Project Documentation"

    ctx = ContextBuilder(cfg.context).build(snapshot.entries, project_title)
    rprint(f"[bold]Generating[/bold] README for {project_title} (llm: {cfg.llm.provider})...")

    engine = DocEngine.from_config(cfg, on_state_change=_status_printer)
    markdown = asyncio.run(engine.generate_project_readme(ctx))

    if dry_run:
        rprint(Syntax(markdown, "markdown", theme="monokai"))
        return

    out_cfg = cfg.output
    if output:
        out_cfg = out_cfg.model_copy(update={"base_dir": output})
    dest = MarkdownWriter(out_cfg).write(project_title, markdown)
    rprint(Panel(
        f"[dim]File:[/dim]    {dest}\n"
        f"[dim]Title:[/dim]   {project_title}\n"
        f"[dim]Size:[/dim]    {len(markdown)} chars",
        title="README Complete",
        border_style="green",
    ))


def _entry_path(file: str) -> str:
    """Tree path for a user-supplied relative path: ``./src//App.tsx`` -> ``/src/App.tsx``."""
    parts = [p for p in PurePosixPath(file.replace("\\", "/")).parts if p not in ("/", ".")]
    return "/" + "/".join(parts)


@app.command()
def explain(
    path: str = typer.Argument(..., help="Project directory"),
    file: str = typer.Argument(..., help="File path relative to the project, e.g. src/App.tsx"),
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="Save the docs as <filename>_README.md in this directory"),
    ] = None,
) -> None:
    """Generate documentation for a single file of the project."""
    cfg = _get_config()
    snapshot = _load(path, cfg)

    entry = find_entry(snapshot.entries, _entry_path(file))
    if entry is None or entry.is_dir:
        rprint(f"[red]Error:[/red] no file {escape(file)!r} in the scanned tree")
        raise typer.Exit(1)
    if not entry.content:
        rprint(f"[yellow]{escape(file)} has no readable text content.[/yellow]")
        raise typer.Exit(1)

    engine = DocEngine.from_config(cfg, on_state_change=_status_printer)
    markdown = asyncio.run(engine.generate_file_docs(entry.content, entry.name))
    if output is None:
        rprint(Syntax(markdown, "markdown", theme="monokai"))
        return

    out_cfg = cfg.output.model_copy(update={"base_dir": output})
    dest = MarkdownWriter(out_cfg).write_file_docs(entry.name, markdown)
    rprint(f"[green]Saved[/green] {escape(str(dest))}")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default repolens.yaml in current directory."""
    target = Path(PROJECT_CONFIG_NAME)
    if target.exists() and not force:
        rprint(f"[yellow]{target} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
