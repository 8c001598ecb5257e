"""Generation of Octopress post files from an RSS export."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import Callable
from urllib.parse import urlparse

import httpx
import yaml
from bs4 import BeautifulSoup, Tag

from postmigrate.config import MigrationConfig
from postmigrate.feed import load_feed
from postmigrate.models import FeedEntry, MigrationReport
from postmigrate.permalinks import (
    PermalinkIndex,
    image_dir,
    post_href,
    server_dir,
    slug_from_href,
    source_image_dir,
)
from postmigrate.rewriter import Download, LocalSearch, Suppress, Transform, Unresolved, rewrite_sources

_log = logging.getLogger(__name__)


def front_matter(entry: FeedEntry) -> str:
    """YAML header for a post, keys in the order Octopress writes them."""

    header = {
        "layout": "post",
        "title": entry.title,
        "date": entry.published,
        "comments": True,
        "categories": entry.tags,
        "published": not entry.private,
    }
    dumped = yaml.safe_dump(header, sort_keys=False, explicit_start=True, allow_unicode=True)
    return f"{dumped}---\n"


def link_resolver(
    entry: FeedEntry,
    index: PermalinkIndex,
    base_path: str,
) -> Callable[[Tag, str], str]:
    """Build the href transform that points links between posts at their new permalinks."""

    def resolve(_element: Tag, href: str) -> str:
        link = urlparse(href)
        if link.netloc != entry.host:
            return href

        slug = slug_from_href(href)
        target = index.get(slug)
        if target is None:
            raise Unresolved(f"No match found for {href}")

        new_href = post_href(target.entry, base_path)
        if link.fragment:
            new_href += f"#{link.fragment}"
        _log.info("    Using %s (%s)", target.entry.title, new_href)
        return new_href

    return resolve


def _link_pattern(entry: FeedEntry, config: MigrationConfig) -> re.Pattern[str]:
    if not entry.host:
        return config.legacy_host_re
    own_host = rf"https?://{re.escape(entry.host)}/"
    return re.compile(f"(?:{config.legacy_host_pattern})|(?:{own_host})")


def render_post(
    entry: FeedEntry,
    index: PermalinkIndex,
    config: MigrationConfig,
    *,
    feed_dir: Path,
    client: httpx.Client,
) -> tuple[str, list[str]]:
    """Rewrite one entry's body and return the full post text and its warnings."""

    media_dir = image_dir(entry, config)
    media_url = server_dir(entry, config)
    media_dir.mkdir(parents=True, exist_ok=True)

    body = html.unescape(entry.body) if config.unescape_body else entry.body
    container_id = f"import_{entry.slug}"
    document = BeautifulSoup(f'<div id="{container_id}">{body}</div>', "html.parser")
    legacy = config.legacy_host_re

    warnings: list[str] = []
    warnings += rewrite_sources(
        document,
        LocalSearch(source_image_dir(feed_dir, entry), media_dir, media_url),
        pattern=legacy,
    )
    warnings += rewrite_sources(
        document,
        Download(media_dir, media_url, client),
        tag="source",
        pattern=legacy,
    )
    warnings += rewrite_sources(document, Suppress(), tag="video", attr="poster", pattern=legacy)
    warnings += rewrite_sources(
        document,
        Transform(link_resolver(entry, index, config.base_path)),
        tag="a",
        attr="href",
        pattern=_link_pattern(entry, config),
    )

    container = document.find("div", id=container_id)
    content = container.decode_contents() if container is not None else ""
    return f"{front_matter(entry)}{content}\n", warnings


def generate_posts(feed_path: Path, config: MigrationConfig) -> MigrationReport:
    """Write every entry of the feed as a post under ``source/_posts``."""

    entries = load_feed(feed_path, config.private_prefix)
    index = PermalinkIndex.build(entries, config)
    feed_dir = feed_path.resolve().parent

    report = MigrationReport(total=len(entries))
    report.warnings.extend(f"Duplicate permalink slug: {slug}" for slug in index.duplicates)

    with httpx.Client(timeout=config.download_timeout, follow_redirects=True) as client:
        for entry in entries:
            filename = index[entry.slug].post_path
            _log.info("Generating %s%s", filename, "" if not entry.private else " (unpublished)")

            text, warnings = render_post(entry, index, config, feed_dir=feed_dir, client=client)

            filename.parent.mkdir(parents=True, exist_ok=True)
            filename.write_text(text, encoding="utf-8")
            report.outputs.append(filename)
            report.warnings.extend(warnings)

    return report
