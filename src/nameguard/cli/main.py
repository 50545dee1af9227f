"""nameguard CLI — check object-name paths against ignore patterns."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from nameguard import __version__
from nameguard.config.patterns import (
    DEFAULT_PATTERN_DIR,
    iter_pattern_lines,
    read_pattern_file,
)
from nameguard.core.service import IgnoreNameService, split_name_path
from nameguard.core.tree.tree import TreeNode

console = Console()
err_console = Console(stderr=True)

_LOG_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

app = typer.Typer(
    name="nameguard",
    help="nameguard — glob rules that exempt object-name paths from processing.",
    no_args_is_help=True,
)

def _version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"nameguard v{__version__}")
        raise typer.Exit()

def _configure_logging(level_name: str) -> None:
    level = _LOG_LEVELS.get(level_name.upper())
    if level is None:
        console.print(
            f"[red]Error:[/red] Unknown log level {escape(level_name)!r}. "
            f"Choose from {', '.join(_LOG_LEVELS)}."
        )
        raise typer.Exit(code=1)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )

def _build_service(directory: Path | None, files: list[Path] | None) -> IgnoreNameService:
    """Load patterns from explicit files and/or a pattern directory.

    Without either option the default ``./IgnoreTranslation`` directory is
    used.  Missing inputs are reported as errors rather than created.
    """
    service = IgnoreNameService()

    for file_path in files or []:
        if not file_path.is_file():
            console.print(f"[red]Error:[/red] Not a file: {escape(str(file_path))}")
            raise typer.Exit(code=1)
        service.load_file(file_path)

    if directory is not None or not files:
        target = directory if directory is not None else Path(DEFAULT_PATTERN_DIR)
        if not target.is_dir():
            console.print(
                f"[red]Error:[/red] No pattern directory at {escape(str(target.resolve()))}."
            )
            raise typer.Exit(code=1)
        service.load_directory(target)

    return service

@app.callback()
def main(
    version: Optional[bool] = typer.Option(  # noqa: N803
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level for diagnostics."),
) -> None:
    """nameguard — glob rules that exempt object-name paths from processing."""
    _configure_logging(log_level)

@app.command()
def check(
    path: str = typer.Argument(..., help="Outermost-first name path, e.g. ItemList/ii/Item."),
    directory: Optional[Path] = typer.Option(
        None, "--dir", "-d", help="Directory of *.txt pattern files."
    ),
    files: Optional[list[Path]] = typer.Option(
        None, "--file", "-f", help="Pattern file to load (repeatable)."
    ),
) -> None:
    """Check whether a name path is ignored. Exits 0 if ignored, 1 if not."""
    service = _build_service(directory, files)

    if service.is_ignored(split_name_path(path)):
        console.print(f"[green]ignored[/green] {escape(path)}")
        return

    console.print(f"[yellow]not ignored[/yellow] {escape(path)}")
    raise typer.Exit(code=1)

@app.command()
def validate(
    files: list[Path] = typer.Argument(..., help="Pattern files to validate."),
) -> None:
    """Report pattern lines that would be rejected."""
    table = Table(title="Rejected patterns")
    table.add_column("File")
    table.add_column("Line", justify="right")
    table.add_column("Pattern")

    rejected = 0
    failed_files = 0
    checked = 0
    for file_path in files:
        try:
            lines = read_pattern_file(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            console.print(f"[red]Error:[/red] Cannot read {escape(str(file_path))}: {escape(str(exc))}")
            failed_files += 1
            continue

        service = IgnoreNameService()
        for number, line in iter_pattern_lines(lines):
            checked += 1
            if not service.add_pattern(line):
                table.add_row(escape(file_path.name), str(number), escape(line))
                rejected += 1

    if rejected:
        console.print(table)

    if rejected or failed_files:
        console.print(
            f"[bold red]Validation failed:[/bold red] {rejected} rejected line(s), "
            f"{failed_files} unreadable file(s)."
        )
        raise typer.Exit(code=1)

    console.print(f"[green]Success:[/green] {checked} pattern(s) valid.")

def _add_branch(parent: Tree, service: IgnoreNameService, node: TreeNode) -> None:
    label = escape(str(node.matcher))
    if node.is_leaf:
        label += " [green](leaf)[/green]"
    branch = parent.add(label)
    for child in service.tree.children_of(node.handle):
        _add_branch(branch, service, child)

@app.command()
def tree(
    directory: Optional[Path] = typer.Option(
        None, "--dir", "-d", help="Directory of *.txt pattern files."
    ),
    files: Optional[list[Path]] = typer.Option(
        None, "--file", "-f", help="Pattern file to load (repeatable)."
    ),
) -> None:
    """Render the merged pattern tree (innermost token at the top)."""
    service = _build_service(directory, files)
    stats = service.stats()

    root = Tree(
        f"[bold]Ignore tree[/bold] ({stats['nodes']} nodes, {stats['leaves']} leaves)"
    )
    for node in service:
        _add_branch(root, service, node)
    console.print(root)

@app.command()
def patterns(
    directory: Optional[Path] = typer.Option(
        None, "--dir", "-d", help="Directory of *.txt pattern files."
    ),
    files: Optional[list[Path]] = typer.Option(
        None, "--file", "-f", help="Pattern file to load (repeatable)."
    ),
) -> None:
    """List the effective rule set after merging."""
    service = _build_service(directory, files)
    for pattern in service.patterns():
        console.print(pattern, markup=False, highlight=False)

@app.command()
def watch(
    directory: Path = typer.Option(
        Path(DEFAULT_PATTERN_DIR), "--dir", "-d", help="Directory of *.txt pattern files."
    ),
) -> None:
    """Watch mode — reload patterns whenever a pattern file changes."""
    import asyncio

    from nameguard.core.watcher import watch_patterns

    service = IgnoreNameService()
    count = service.load_directory(directory)
    console.print(
        f"[bold]{count} pattern(s) loaded.[/bold] Watching for changes (Ctrl+C to stop): "
        f"{escape(str(directory))}"
    )

    def on_reload(loaded: int) -> None:
        stats = service.stats()
        console.print(f"Reloaded {loaded} pattern(s): {stats['nodes']} nodes, {stats['leaves']} leaves")

    try:
        asyncio.run(watch_patterns(directory, service, on_reload=on_reload))
    except KeyboardInterrupt:
        console.print("\n[bold]Watch stopped.[/bold]")
