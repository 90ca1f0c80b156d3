"""Typer CLI: render, batch, search, and inspect icon collections."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from iconcache.config import load_config
from iconcache.icons.service import IconService, build_service
from iconcache.schemas.config import IconConfig
from iconcache.schemas.icons import RenderOptions

# Load .env file from project root (if it exists)
load_dotenv()

app = typer.Typer(
    name="iconcache",
    help="Iconify icon service: render, batch-render, and search local icon sets.",
    no_args_is_help=True,
)
console = Console()

_CONFIG_HELP = "Path to iconcache.yml (defaults apply when omitted)."
_DATA_DIR_HELP = "Directory of <collection>.json icon sets (overrides the config)."


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )


def _resolve_config(config: Path | None, data_dir: Path | None) -> IconConfig:
    if config is not None:
        cfg = load_config(config)
        if data_dir is not None:
            cfg = IconConfig(**{**cfg.model_dump(), "data_dir": str(data_dir)})
        return cfg
    if data_dir is not None:
        return IconConfig(data_dir=str(data_dir))
    return IconConfig()


def _service(config: Path | None, data_dir: Path | None) -> IconService:
    """Build the icon service, exiting with code 1 on a bad config."""
    try:
        cfg = _resolve_config(config, data_dir)
        return build_service(cfg)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)


def _options(size: int | None, class_name: str | None, color: str | None) -> RenderOptions:
    return RenderOptions(size=size, class_name=class_name, color=color)


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", envvar="ICONCACHE_CONFIG", help="Path to iconcache.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file without loading any icons."""
    _setup_logging(verbose)

    try:
        cfg = load_config(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Data dir:      {cfg.data_dir}")
    console.print(f"  Fallback icon: {cfg.fallback_icon}")
    console.print(f"  Search limit:  {cfg.search_limit}")
    console.print(f"  Pre-cache:     {len(cfg.precache)}")
    for name in cfg.precache:
        console.print(f"    - {name}")


@app.command()
def render(
    identifier: str = typer.Argument(..., help="Icon identifier, e.g. lucide:home"),
    size: int = typer.Option(None, "--size", "-s", min=1, help="Width and height in pixels."),
    class_name: str = typer.Option(None, "--class", help="CSS class for the <svg> element."),
    color: str = typer.Option(None, "--color", help="Literal colour replacing currentColor."),
    fallback: bool = typer.Option(False, "--fallback", help="Render the fallback icon on a miss."),
    config: Path = typer.Option(None, "--config", "-c", envvar="ICONCACHE_CONFIG", help=_CONFIG_HELP),
    data_dir: Path = typer.Option(None, "--data-dir", "-d", envvar="ICONCACHE_DATA_DIR", help=_DATA_DIR_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print the SVG for one icon. Exits with code 1 when it can't be found."""
    _setup_logging(verbose)
    service = _service(config, data_dir)

    svg = asyncio.run(
        service.render_icon(identifier, _options(size, class_name, color), use_fallback=fallback)
    )
    if svg is None:
        console.print(f"[red]Icon not found:[/] {identifier}")
        raise typer.Exit(code=1)
    typer.echo(svg)


@app.command()
def batch(
    identifiers: list[str] = typer.Argument(..., help="Icon identifiers (collection:name)."),
    size: int = typer.Option(None, "--size", "-s", min=1, help="Width and height in pixels."),
    class_name: str = typer.Option(None, "--class", help="CSS class for every <svg> element."),
    color: str = typer.Option(None, "--color", help="Literal colour replacing currentColor."),
    config: Path = typer.Option(None, "--config", "-c", envvar="ICONCACHE_CONFIG", help=_CONFIG_HELP),
    data_dir: Path = typer.Option(None, "--data-dir", "-d", envvar="ICONCACHE_DATA_DIR", help=_DATA_DIR_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Render many icons at once and print a JSON mapping of identifier to SVG.

    Example:

        iconcache batch lucide:home simple-icons:github --size 24
    """
    _setup_logging(verbose)
    service = _service(config, data_dir)

    icons = asyncio.run(service.render_batch(identifiers, _options(size, class_name, color)))
    typer.echo(json.dumps(icons, indent=2))


@app.command()
def search(
    query: str = typer.Argument(..., help="Name substring; 'collection:term' scopes to one collection."),
    limit: int = typer.Option(None, "--limit", "-l", min=1, help="Maximum number of hits."),
    collection: str = typer.Option(None, "--collection", help="Only search this collection."),
    config: Path = typer.Option(None, "--config", "-c", envvar="ICONCACHE_CONFIG", help=_CONFIG_HELP),
    data_dir: Path = typer.Option(None, "--data-dir", "-d", envvar="ICONCACHE_DATA_DIR", help=_DATA_DIR_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Search icon names across the pre-cache collections (or one collection)."""
    _setup_logging(verbose)
    service = _service(config, data_dir)

    hits = asyncio.run(service.search_icons(query, limit, collection=collection))
    if not hits:
        console.print(f"[yellow]No icons match:[/] {query}")
        return

    table = Table(title=f"{len(hits)} icon(s) matching '{query}'")
    table.add_column("Identifier", style="cyan")
    table.add_column("Collection")
    table.add_column("Name")
    for hit in hits:
        table.add_row(hit.identifier, hit.collection, hit.name)
    console.print(table)


@app.command()
def collections(
    config: Path = typer.Option(None, "--config", "-c", envvar="ICONCACHE_CONFIG", help=_CONFIG_HELP),
    data_dir: Path = typer.Option(None, "--data-dir", "-d", envvar="ICONCACHE_DATA_DIR", help=_DATA_DIR_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """List the known icon collections."""
    _setup_logging(verbose)
    service = _service(config, data_dir)

    summaries = asyncio.run(service.list_collections())
    if not summaries:
        console.print("[yellow]No icon collections could be loaded.[/]")
        raise typer.Exit(code=1)

    table = Table(title="Icon collections")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Icons", justify="right")
    table.add_column("Category")
    for summary in summaries:
        table.add_row(summary.id, summary.name, str(summary.total), summary.category or "")
    console.print(table)


@app.command()
def warm(
    config: Path = typer.Option(None, "--config", "-c", envvar="ICONCACHE_CONFIG", help=_CONFIG_HELP),
    data_dir: Path = typer.Option(None, "--data-dir", "-d", envvar="ICONCACHE_DATA_DIR", help=_DATA_DIR_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Load every pre-cache collection and report how many succeeded."""
    _setup_logging(verbose)
    service = _service(config, data_dir)

    cached = asyncio.run(service.precache())
    wanted = len(service.precache_collections)
    style = "green" if cached == wanted else "yellow"
    console.print(f"[{style}]Cached {cached}/{wanted} collection(s)[/]")


@app.command()
def preview(
    identifiers: list[str] = typer.Argument(..., help="Icon identifiers (collection:name)."),
    output: Path = typer.Option(..., "--output", "-o", help="Where to write the HTML gallery."),
    size: int = typer.Option(None, "--size", "-s", min=1, help="Width and height in pixels."),
    color: str = typer.Option(None, "--color", help="Literal colour replacing currentColor."),
    config: Path = typer.Option(None, "--config", "-c", envvar="ICONCACHE_CONFIG", help=_CONFIG_HELP),
    data_dir: Path = typer.Option(None, "--data-dir", "-d", envvar="ICONCACHE_DATA_DIR", help=_DATA_DIR_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Batch-render icons into a self-contained HTML gallery."""
    from iconcache.output.preview import render_preview

    _setup_logging(verbose)
    service = _service(config, data_dir)

    icons = asyncio.run(service.render_batch(identifiers, _options(size, None, color)))
    output.write_text(render_preview(icons, requested=identifiers))
    console.print(f"[green]Preview written to:[/] {output}")
