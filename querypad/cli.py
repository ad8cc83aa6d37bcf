"""CLI commands for querypad using Typer."""

import logging
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console

from .engine.context import DocumentMode
from .repl import start_repl
from .runtime import Workspace, create_default_config, ensure_config_dir, load_catalog, load_config

app = typer.Typer(help="querypad - context-aware completion and a command palette for query documents")
console = Console()


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


def _workspace(catalog: Optional[Path] = None) -> Workspace:
    ensure_config_dir()
    config = load_config()
    _configure_logging(config.verbose)
    registry = load_catalog(catalog) if catalog is not None else None
    return Workspace(config, catalog=registry)


class _ConsoleDocument:
    """Document collaborator for one-shot CLI use: prints instead of editing."""

    def insert_text(self, text: str) -> None:
        console.print(text, markup=False, highlight=False)

    def open_file(self, path: Path) -> None:
        console.print(f"[blue]Open:[/blue] {path}")

    def run_query(self, query: str, label: str) -> None:
        console.print(f"[blue]{label}:[/blue]")
        console.print(query, markup=False, highlight=False)


def _document_mode(mode: str) -> DocumentMode:
    resolved = DocumentMode.lookup(mode)
    if resolved is None:
        names = ", ".join(m.value for m in DocumentMode)
        console.print(f"[red]Error:[/red] Unknown mode '{mode}' (expected one of: {names})")
        raise typer.Exit(1)
    return resolved


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    help_: bool = typer.Option(
        False,
        "--help",
        "-h",
        help="Show this message and exit.",
        is_eager=True,
    ),
) -> None:
    """Default callback to launch REPL when no subcommand is invoked."""
    if ctx.invoked_subcommand is not None:
        return
    if help_:
        typer.echo(ctx.command.get_help(ctx))
        raise typer.Exit()

    start_repl()
    raise typer.Exit()


@app.command()
def complete(
    file_path: Path = typer.Argument(..., help="Document to complete in"),
    offset: Optional[int] = typer.Option(None, "--offset", "-o", help="Caret offset (default: end of file)"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="markdown, sql, q or text (default: from file name)"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c", help="Catalog YAML with tables and servers"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Show the completions available at a caret position in a file."""
    from .repl.renderer import Renderer

    try:
        if not file_path.exists():
            console.print(f"[red]Error:[/red] File {file_path} not found")
            raise typer.Exit(1)

        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()

        workspace = _workspace(catalog)
        if verbose:
            _configure_logging(True)

        doc_mode = _document_mode(mode) if mode else DocumentMode.from_path(file_path)
        caret = len(content) if offset is None else offset
        context = workspace.completions.analyzer.classify(content, caret, doc_mode)
        candidates = workspace.completions.complete(context, workspace.catalog.snapshot())

        if verbose:
            console.print(f"[blue]Info:[/blue] context={context.trigger.value} prefix={context.prefix!r}")
        if not candidates:
            console.print("[yellow]No completions[/yellow]")
            return
        Renderer(console).render_candidates(candidates)

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


@app.command()
def commands(
    query: str = typer.Argument("", help="Words every command title must contain"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Include commands for this document mode"),
    run: Optional[int] = typer.Option(None, "--run", "-r", help="Perform the n-th matching command"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """List palette commands, optionally filtered, or perform one."""
    from .repl.renderer import Renderer

    try:
        workspace = _workspace()
        if verbose:
            _configure_logging(True)
        workspace.install_command_sources(_ConsoleDocument())

        doc_mode = _document_mode(mode) if mode else None
        matches = workspace.commands.search(query, mode=doc_mode)

        if run is None:
            if not matches:
                console.print("[yellow]No matches found[/yellow]")
                return
            Renderer(console).render_commands(matches, workspace.platform)
            return

        if run < 1 or run > len(matches):
            console.print(f"[red]Error:[/red] No command #{run} ({len(matches)} matches)")
            raise typer.Exit(1)
        command = matches[run - 1]
        workspace.dispatcher.submit(command.perform, command.title)
        workspace.dispatcher.run_pending()

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


@app.command()
def recent(
    add: Optional[Path] = typer.Option(None, "--add", "-a", help="Record a document as recently used"),
    folder: Optional[Path] = typer.Option(None, "--folder", "-f", help="Record the last opened folder"),
) -> None:
    """List recently used documents."""
    from .repl.renderer import Renderer

    try:
        workspace = _workspace()
        if add is not None:
            workspace.document_opened(add.expanduser().absolute())
        if folder is not None:
            workspace.folder_selected(folder)

        paths = workspace.recent.recent_file_paths()
        if not paths:
            console.print("[yellow]No recent documents[/yellow]")
            return
        Renderer(console).render_recent(paths)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def init() -> None:
    """Initialize querypad configuration."""
    try:
        path = create_default_config()
        console.print(f"[green]Success:[/green] querypad configuration initialized at {path}")
        console.print("Describe your tables and servers in ~/.querypad/catalog.yaml to get completions.")
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show querypad version information."""
    try:
        from importlib.metadata import version as _v

        ver = _v("querypad")
    except Exception:
        ver = "unknown"
    console.print(f"querypad v{ver}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
