"""RSS export parsing."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse
from xml.etree import ElementTree as ET

from dateutil import parser as date_parser

from postmigrate.models import FeedCategory, FeedEntry

_log = logging.getLogger(__name__)

XML_NAMESPACES = {
    "content": "http://purl.org/rss/1.0/modules/content/",
}


def _text(el: ET.Element, path: str, strip: bool = True) -> str | None:
    child = el.find(path, XML_NAMESPACES)
    if child is None or child.text is None:
        return None
    return child.text.strip() if strip else child.text


def _parse_item(el: ET.Element, position: int, private_prefix: str) -> FeedEntry:
    link = _text(el, "link")
    if not link:
        raise ValueError(f"Feed item {position} has no <link>")

    raw_date = _text(el, "pubDate")
    if not raw_date:
        raise ValueError(f"Feed item {position} ({link}) has no <pubDate>")
    try:
        published = date_parser.parse(raw_date)
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Feed item {position} ({link}) has an invalid <pubDate>: {raw_date}") from exc

    categories = [
        FeedCategory(term=(cat.text or "").strip(), domain=cat.get("domain"))
        for cat in el.findall("category")
        if (cat.text or "").strip()
    ]

    body = _text(el, "content:encoded", strip=False)
    if body is None:
        body = _text(el, "description") or ""

    return FeedEntry(
        title=_text(el, "title") or "",
        link=link,
        published=published,
        categories=categories,
        body=body,
        private=urlparse(link).path.startswith(private_prefix),
    )


def load_feed(path: Path, private_prefix: str = "/private/") -> list[FeedEntry]:
    """Load every ``<item>`` of an RSS export, in feed order."""

    if not path.exists() or not path.is_file():
        raise ValueError(f"Feed file not found: {path}")

    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise ValueError(f"Could not parse feed {path}: {exc}") from exc

    channel = root.find("channel")
    if channel is None:
        raise ValueError(f"Feed {path} has no <channel> element")

    entries = [
        _parse_item(el, position, private_prefix)
        for position, el in enumerate(channel.findall("item"), start=1)
    ]
    _log.debug("Loaded %d entries from %s", len(entries), path)
    return entries
