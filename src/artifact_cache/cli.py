"""CLI interface for artifact-cache.

Requires the 'cli' extra: pip install artifact-cache[cli]
"""

from __future__ import annotations

import sys
from pathlib import Path

try:
    import typer
    from rich.console import Console
    from rich.table import Table
except ImportError:
    print(
        "CLI dependencies not installed. Install with: pip install artifact-cache[cli]",
        file=sys.stderr,
    )
    sys.exit(1)

from artifact_cache import __version__
from artifact_cache.cache import ArtifactCache
from artifact_cache.exceptions import ArtifactCacheError
from artifact_cache.models.config import DEFAULT_DIRECTORY, DEFAULT_POOL
from artifact_cache.ttl import format_ttl

app = typer.Typer(
    name="artifact-cache",
    help="Inspect and maintain file-backed artifact caches.",
    add_completion=False,
)
console = Console()


def _open(directory: Path, pool: str, subdivide: bool) -> ArtifactCache:
    # Maintenance commands never create the cache directory.
    if not directory.is_dir():
        console.print(f"[yellow]No cache directory at {str(directory)!r}[/yellow]")
        raise typer.Exit(code=1)
    try:
        return ArtifactCache(directory=directory, pool=pool, subdivide=subdivide)
    except ArtifactCacheError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
) -> None:
    if version:
        console.print(f"artifact-cache {__version__}")
        raise typer.Exit()


@app.command()
def info() -> None:
    """Show information about the artifact-cache installation."""
    table = Table(title="artifact-cache info")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Version", __version__)
    table.add_row("Python", sys.version.split()[0])

    for dep_name in ["pydantic", "typer", "rich"]:
        try:
            mod = __import__(dep_name)
            ver = getattr(mod, "__version__", "installed")
            table.add_row(dep_name, str(ver))
        except ImportError:
            table.add_row(dep_name, "[red]not installed[/red]")

    console.print(table)


@app.command()
def inspect(
    key: str = typer.Argument(..., help="Cache key"),
    directory: Path = typer.Option(  # noqa: B008
        DEFAULT_DIRECTORY, "--directory", "-d", help="Cache directory"
    ),
    pool: str = typer.Option(DEFAULT_POOL, "--pool", "-p", help="Cache pool"),
    subdivide: bool = typer.Option(False, "--subdivide", help="Artifacts are sharded"),
) -> None:
    """Show the header metadata of a key's artifact."""
    cache = _open(directory, pool, subdivide)
    try:
        artifact = cache.inspect(key)
    except ArtifactCacheError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    if artifact is None:
        console.print(f"[yellow]No artifact for key {key!r}[/yellow]")
        raise typer.Exit(code=1)

    table = Table(title=f"artifact {key!r}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Path", str(artifact.path))
    table.add_row("Kind", artifact.kind.name)
    table.add_row("Pool", artifact.pool)
    table.add_row("Created", artifact.created_at.isoformat())
    table.add_row("TTL", format_ttl(artifact.ttl))
    table.add_row("Expired", "yes" if artifact.is_expired() else "no")
    table.add_row("Size", f"{artifact.size} bytes")
    console.print(table)


@app.command()
def get(
    key: str = typer.Argument(..., help="Cache key"),
    directory: Path = typer.Option(  # noqa: B008
        DEFAULT_DIRECTORY, "--directory", "-d", help="Cache directory"
    ),
    pool: str = typer.Option(DEFAULT_POOL, "--pool", "-p", help="Cache pool"),
    subdivide: bool = typer.Option(False, "--subdivide", help="Artifacts are sharded"),
) -> None:
    """Print the cached value of a key."""
    cache = _open(directory, pool, subdivide)
    missing = object()
    try:
        value = cache.get(key, missing)
    except ArtifactCacheError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    if value is missing:
        console.print(f"[yellow]Key {key!r} is not cached[/yellow]")
        raise typer.Exit(code=1)
    console.print(repr(value), markup=False, highlight=False)


@app.command()
def delete(
    key: str = typer.Argument(..., help="Cache key"),
    directory: Path = typer.Option(  # noqa: B008
        DEFAULT_DIRECTORY, "--directory", "-d", help="Cache directory"
    ),
    pool: str = typer.Option(DEFAULT_POOL, "--pool", "-p", help="Cache pool"),
    subdivide: bool = typer.Option(False, "--subdivide", help="Artifacts are sharded"),
) -> None:
    """Delete a key's artifact."""
    cache = _open(directory, pool, subdivide)
    try:
        deleted = cache.delete(key)
    except ArtifactCacheError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    if not deleted:
        console.print(f"[yellow]Key {key!r} was not deleted[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"[green]Deleted {key!r}[/green]")


@app.command()
def clear(
    directory: Path = typer.Option(  # noqa: B008
        DEFAULT_DIRECTORY, "--directory", "-d", help="Cache directory"
    ),
    pool: str = typer.Option(DEFAULT_POOL, "--pool", "-p", help="Cache pool"),
    subdivide: bool = typer.Option(False, "--subdivide", help="Artifacts are sharded"),
) -> None:
    """Delete every artifact of a pool."""
    cache = _open(directory, pool, subdivide)
    if not cache.clear():
        console.print(f"[red]Pool {pool!r} was only partially cleared[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Cleared pool {pool!r}[/green]")


if __name__ == "__main__":
    app()
