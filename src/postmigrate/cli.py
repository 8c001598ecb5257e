"""Typer CLI entrypoint for postmigrate."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from postmigrate.config import MigrationConfig, RunMode
from postmigrate.logging_utils import setup_logging
from postmigrate.posts import generate_posts
from postmigrate.redirects import generate_links

app = typer.Typer(
    help="Import a Posterous RSS export into an Octopress source tree. Run from the Octopress base directory.",
    add_completion=False,
)


@app.command()
def main(
    feed: Path = typer.Argument(..., help="Path to the exported RSS feed (wordpress_export_1.xml)."),
    base_path: str = typer.Argument("/", help="Base path of the blog's URLs, e.g. / or /blog."),
    links: bool = typer.Option(
        False,
        "--links",
        help="Write redirect pages for the old permalinks instead of importing posts.",
    ),
) -> None:
    """Import posts, or with --links generate redirects from the old permalinks."""

    try:
        config = MigrationConfig(base_path=base_path)
    except ValidationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    setup_logging()
    mode = RunMode.LINKS if links else RunMode.POSTS

    try:
        if mode == RunMode.LINKS:
            report = generate_links(feed, config)
        else:
            report = generate_posts(feed, config)
    except Exception as exc:
        typer.echo(f"Migration failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Processed {report.total} entr{'y' if report.total == 1 else 'ies'}: wrote {len(report.outputs)} file(s).")

    if report.warnings:
        typer.echo("Warnings:", err=True)
        for warning in report.warnings:
            typer.echo(f"- {warning}", err=True)
