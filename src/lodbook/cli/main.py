from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from lodbook.settings import settings

console = Console()


def _configure_logging() -> None:
    level = (settings.log_level or "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@click.group()
def cli():
    """LODBook - link narrative pages to entity records as linked open data"""
    pass


@cli.command()
def version():
    """Print the installed version"""
    from lodbook import __version__

    click.echo(__version__)


@cli.command()
@click.argument("source", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--out", "out_dir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Output directory")
def build(source, out_dir):
    """Enrich narrative pages and publish page and entity graphs"""
    _configure_logging()
    from lodbook.knowledge_graph.pipeline import LodBuild
    from lodbook.site import load_site, read_documents, write_outputs

    site = load_site(source, settings)
    documents = read_documents(source / settings.pages_dir, site.ctx)
    result = LodBuild(site.ctx, codec=site.codec, collections=site.config.data_collections).run(documents)
    written = write_outputs(result, site, out_dir or source / settings.output_dir)

    table = Table(title=f"Build of {source}")
    table.add_column("Pages", style="cyan")
    table.add_column("Entities", style="green")
    table.add_column("Skipped", style="yellow")
    table.add_column("Mentions", style="magenta")
    table.add_column("Files", style="blue")
    table.add_row(
        str(result.stats.documents),
        str(result.stats.entities),
        str(result.stats.skipped_records),
        str(result.stats.mentions),
        str(len(written)),
    )
    console.print(table)

    for advisory in result.advisories:
        console.print(f"[red]{advisory}[/red]")


@cli.command()
@click.argument("source", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("name")
def graph(source, name):
    """Print the hydrated graph of one record"""
    _configure_logging()
    from lodbook.knowledge_graph.compiler import GraphCompiler
    from lodbook.site import load_site

    site = load_site(source, settings)
    node = GraphCompiler(site.ctx).hydrate_name(name)
    if node is None:
        console.print(f"[yellow]No record named {name!r}[/yellow]")
        raise SystemExit(1)
    click.echo(json.dumps({"@context": site.ctx.context, "@graph": node.to_graph()}, indent=2, ensure_ascii=False))


def app() -> None:
    cli()


if __name__ == "__main__":
    app()
