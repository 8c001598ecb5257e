"""Domain models used by postmigrate."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field


def last_path_segment(url: str) -> str:
    """Final non-empty segment of a URL path, so '/my-post/' gives 'my-post'."""

    return urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]


class FeedCategory(BaseModel):
    """A ``<category>`` element; ``domain`` separates tags from other terms."""

    model_config = ConfigDict(frozen=True)

    term: str
    domain: str | None = None


class FeedEntry(BaseModel):
    """One blog post as recorded in the exported feed."""

    model_config = ConfigDict(frozen=True)

    title: str
    link: str
    published: datetime
    categories: list[FeedCategory] = Field(default_factory=list)
    body: str = ""
    private: bool = False

    @property
    def slug(self) -> str:
        return last_path_segment(self.link)

    @property
    def host(self) -> str:
        return urlparse(self.link).netloc

    @property
    def tags(self) -> list[str]:
        return [category.term for category in self.categories if category.domain == "tag"]


class IndexEntry(BaseModel):
    """Permalink index value: the entry and the post file it is written to."""

    model_config = ConfigDict(frozen=True)

    entry: FeedEntry
    post_path: Path


class MigrationReport(BaseModel):
    """Summary returned by generate_posts and generate_links."""

    total: int
    outputs: list[Path] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
