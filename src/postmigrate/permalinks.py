"""Permalink index and the path templates of the Octopress layout."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from postmigrate.config import MigrationConfig
from postmigrate.models import FeedEntry, IndexEntry, last_path_segment

_log = logging.getLogger(__name__)


def slug_from_href(href: str) -> str:
    """Final path segment of a link with any fragment removed."""

    return last_path_segment(href)


def post_path(entry: FeedEntry, config: MigrationConfig) -> Path:
    name = f"{entry.published:%Y-%m-%d}-{entry.slug}.html"
    return config.site_root / config.posts_dir / name


def post_href(entry: FeedEntry, base_path: str) -> str:
    """New permalink, following Octopress' /:year/:month/:day/:title/ format."""

    return f"{base_path}{entry.published:%Y/%m/%d}/{entry.slug}/"


def image_dir(entry: FeedEntry, config: MigrationConfig) -> Path:
    return config.site_root / config.images_dir / f"{entry.published:%Y/%m/%d}" / entry.slug


def server_dir(entry: FeedEntry, config: MigrationConfig) -> str:
    return f"/{config.images_dir}/{entry.published:%Y/%m/%d}/{entry.slug}/"


def source_image_dir(feed_dir: Path, entry: FeedEntry) -> Path:
    """Directory of the export's original-resolution images for the entry's month."""

    return feed_dir / "image" / f"{entry.published:%Y}" / f"{entry.published:%m}"


def redirect_path(entry: FeedEntry, config: MigrationConfig) -> Path:
    return config.site_root / entry.slug / "index.html"


class PermalinkIndex:
    """Read-only slug lookup over every entry of a feed."""

    def __init__(self, entries: dict[str, IndexEntry], duplicates: list[str] | None = None):
        self._entries = entries
        self.duplicates = duplicates or []

    @classmethod
    def build(cls, entries: Iterable[FeedEntry], config: MigrationConfig) -> "PermalinkIndex":
        mapping: dict[str, IndexEntry] = {}
        duplicates: list[str] = []
        for entry in entries:
            slug = entry.slug
            if slug in mapping:
                # Later entries win; their outputs overwrite the earlier ones.
                _log.warning(
                    "Duplicate permalink slug '%s': %s replaces %s",
                    slug,
                    entry.link,
                    mapping[slug].entry.link,
                )
                duplicates.append(slug)
            mapping[slug] = IndexEntry(entry=entry, post_path=post_path(entry, config))
        return cls(mapping, duplicates)

    def get(self, slug: str) -> IndexEntry | None:
        return self._entries.get(slug)

    def __getitem__(self, slug: str) -> IndexEntry:
        return self._entries[slug]

    def __contains__(self, slug: object) -> bool:
        return slug in self._entries

    def __len__(self) -> int:
        return len(self._entries)
