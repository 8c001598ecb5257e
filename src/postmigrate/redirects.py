"""Redirect stubs from legacy permalinks to the new post locations."""

from __future__ import annotations

import logging
from importlib.resources import files
from pathlib import Path

from jinja2 import Environment, Template, select_autoescape

from postmigrate.config import MigrationConfig
from postmigrate.feed import load_feed
from postmigrate.models import FeedEntry, MigrationReport
from postmigrate.permalinks import PermalinkIndex, post_href, redirect_path

_log = logging.getLogger(__name__)


def load_redirect_template() -> Template:
    template_source = files("postmigrate.templates").joinpath("redirect.html.j2").read_text(encoding="utf-8")
    environment = Environment(autoescape=select_autoescape(default_for_string=True), keep_trailing_newline=True)
    return environment.from_string(template_source)


def render_redirect(entry: FeedEntry, config: MigrationConfig, template: Template | None = None) -> str:
    """HTML page that meta-refreshes to the entry's new permalink."""

    template = template or load_redirect_template()
    return template.render(
        title=entry.title,
        href=post_href(entry, config.base_path),
        stylesheet=f"{config.base_path}{config.stylesheet}",
    )


def generate_links(feed_path: Path, config: MigrationConfig) -> MigrationReport:
    """Write ``source/<slug>/index.html`` for every entry of the feed."""

    entries = load_feed(feed_path, config.private_prefix)
    index = PermalinkIndex.build(entries, config)

    template = load_redirect_template()

    report = MigrationReport(total=len(entries))
    report.warnings.extend(f"Duplicate permalink slug: {slug}" for slug in index.duplicates)

    for entry in entries:
        filename = redirect_path(entry, config)
        _log.info("Linking %s to %s", filename, post_href(entry, config.base_path))

        filename.parent.mkdir(parents=True, exist_ok=True)
        filename.write_text(render_redirect(entry, config, template), encoding="utf-8")
        report.outputs.append(filename)

    return report
