"""Configuration models and enums for postmigrate."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_LEGACY_HOST_PATTERN = r"https?://[^/]*posterous\.com/"


class RunMode(str, Enum):
    POSTS = "posts"
    LINKS = "links"


class MigrationConfig(BaseModel):
    """Settings for one import run against an Octopress base directory."""

    base_path: str = "/"
    output_root: Path = Path(".")
    site_dir: str = "source"
    posts_dir: str = "_posts"
    images_dir: str = "images"
    stylesheet: str = "stylesheets/screen.css"
    private_prefix: str = "/private/"
    legacy_host_pattern: str = DEFAULT_LEGACY_HOST_PATTERN
    unescape_body: bool = True
    download_timeout: float = Field(default=20.0, gt=0)

    @field_validator("base_path")
    @classmethod
    def normalize_base_path(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            value = f"/{value}"
        if not value.endswith("/"):
            value = f"{value}/"
        return value

    @field_validator("legacy_host_pattern")
    @classmethod
    def validate_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"legacy_host_pattern is not a valid regex: {exc}") from exc
        return value

    @property
    def legacy_host_re(self) -> re.Pattern[str]:
        return re.compile(self.legacy_host_pattern)

    @property
    def site_root(self) -> Path:
        return self.output_root / self.site_dir
