"""Relocation of legacy-hosted media and links inside parsed post markup.

Only attributes that look like a legacy hosting URL are touched. How the new
value is found depends on the strategy passed to :func:`rewrite_sources`:

* :class:`LocalSearch` looks for the original file in an export directory and
  copies it next to the post.
* :class:`Download` fetches the hosted file.
* :class:`Transform` hands the element and old value to a function and uses
  whatever it returns. The function raises :class:`Unresolved` to leave the
  element alone.
* :class:`Suppress` drops the attribute.

Problems never abort a post. They are logged and returned to the caller, and
the element keeps its old value.
"""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup, Tag

from postmigrate.config import DEFAULT_LEGACY_HOST_PATTERN
from postmigrate.media import MediaDownloadError, copy_media, download_media, find_candidates, short_name

_log = logging.getLogger(__name__)

LEGACY_HOST_RE = re.compile(DEFAULT_LEGACY_HOST_PATTERN)


@dataclass(frozen=True)
class LocalSearch:
    source_dir: Path
    dest_dir: Path
    server_dir: str


@dataclass(frozen=True)
class Download:
    dest_dir: Path
    server_dir: str
    client: httpx.Client


class Unresolved(Exception):
    """Raised by a transform to keep the element unchanged and report why."""


@dataclass(frozen=True)
class Transform:
    func: Callable[[Tag, str], str | None]


@dataclass(frozen=True)
class Suppress:
    pass


Strategy = LocalSearch | Download | Transform | Suppress


def _server_url(server_dir: str, filename: str) -> str:
    return quote(posixpath.join(server_dir, filename))


def _resolve_local(strategy: LocalSearch, value: str, tag: str) -> tuple[str | None, list[str]]:
    warnings: list[str] = []
    matches = find_candidates(strategy.source_dir, value)

    if not matches:
        warnings.append(f"No match found for {value} in {strategy.source_dir}")
        return None, warnings

    if len(matches) > 1:
        warnings.append(
            f"More than one match found for {short_name(value)}: {', '.join(matches)}; "
            f"using {matches[0]}, double-check {tag} tags in {strategy.dest_dir}"
        )

    filename = matches[0]
    _log.info("    Using %s for %s", filename, short_name(value))
    copy_media(strategy.source_dir, filename, strategy.dest_dir)
    return _server_url(strategy.server_dir, filename), warnings


def _resolve_download(strategy: Download, value: str) -> tuple[str | None, list[str]]:
    _log.info("    Downloading %s", short_name(value))
    try:
        path = download_media(value, strategy.dest_dir, strategy.client)
    except MediaDownloadError as exc:
        return None, [str(exc)]
    return _server_url(strategy.server_dir, path.name), []


def _unwrap_legacy_link(element: Tag, pattern: re.Pattern[str]) -> None:
    parent = element.parent
    if parent is None or parent.name != "a":
        return
    href = parent.get("href")
    if isinstance(href, str) and pattern.search(href):
        _log.info("    Removing parent link: %s", href)
        parent.replace_with(element)


def rewrite_sources(
    document: BeautifulSoup | Tag,
    strategy: Strategy,
    tag: str = "img",
    attr: str = "src",
    pattern: re.Pattern[str] = LEGACY_HOST_RE,
) -> list[str]:
    """Rewrite ``attr`` of every ``tag`` element whose value matches pattern.

    Returns the warnings raised for elements that could not be resolved. After
    an element is handled, an enclosing ``<a>`` that also points at a legacy
    host is replaced by the element itself.
    """

    _log.info("  Fixing %s tags' %s attribute", tag, attr)
    warnings: list[str] = []

    for element in document.find_all(tag):
        value = element.get(attr)
        if not isinstance(value, str) or not pattern.search(value):
            continue

        _log.info("  %s: %s", tag, short_name(value))

        if isinstance(strategy, Suppress):
            del element[attr]
        elif isinstance(strategy, Transform):
            try:
                new_value = strategy.func(element, value)
            except Unresolved as exc:
                _log.warning(str(exc))
                warnings.append(str(exc))
                continue
            if new_value:
                element[attr] = new_value
            else:
                del element[attr]
        else:
            if isinstance(strategy, Download):
                new_value, problems = _resolve_download(strategy, value)
            else:
                new_value, problems = _resolve_local(strategy, value, tag)
            for problem in problems:
                _log.warning(problem)
            warnings.extend(problems)
            if new_value is None:
                continue
            element[attr] = new_value

        _unwrap_legacy_link(element, pattern)

    return warnings
