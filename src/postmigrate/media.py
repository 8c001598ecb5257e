"""Media name matching, copying and downloading utilities."""

from __future__ import annotations

import re
import shutil
from pathlib import Path
from urllib.parse import urlparse

import httpx

from postmigrate.models import last_path_segment

_SCALED_MARKER = ".scaled"
_WHITESPACE_RE = re.compile(r"\s+")


class MediaDownloadError(RuntimeError):
    """Raised when a media asset fails to download."""


def short_name(url: str) -> str:
    """File name of a hosted resource without the ``.scaled<N>`` size suffix.

    ``http://x.posterous.com/99/IMG_1.JPG.scaled1000.jpg`` becomes ``IMG_1.JPG``.
    """

    return last_path_segment(url).split(_SCALED_MARKER)[0]


def media_extension(url: str) -> str:
    """Lowercased extension of the short name, or of the served file if it has none."""

    name = short_name(url)
    if "." not in name:
        name = Path(urlparse(url).path).name
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def _contains_stem(filename: str, stem: str) -> bool:
    return stem in _WHITESPACE_RE.sub("_", filename)


def find_candidates(source_dir: Path, url: str) -> list[str]:
    """Files in source_dir that may be the original of url.

    An empty result means nothing matched. More than one result means the match
    is ambiguous and the caller decides which candidate to use.
    """

    if not source_dir.is_dir():
        return []

    name = short_name(url)
    stem = name.split(".")[0]
    extension = media_extension(url)
    files = sorted(path.name for path in source_dir.iterdir() if path.is_file())

    matches = [
        filename
        for filename in files
        if filename.lower().endswith(extension) and _contains_stem(filename, stem)
    ]
    if not matches:
        matches = [filename for filename in files if _contains_stem(filename, stem)]

    if len(matches) > 1:
        reduced = [filename for filename in matches if name in filename]
        if len(reduced) == 1:
            return reduced

    return matches


def copy_media(source_dir: Path, filename: str, dest_dir: Path) -> Path:
    dest_dir.mkdir(parents=True, exist_ok=True)
    return Path(shutil.copy(source_dir / filename, dest_dir / filename))


def download_media(url: str, dest_dir: Path, client: httpx.Client) -> Path:
    """Download url into dest_dir under its short name."""

    dest_dir.mkdir(parents=True, exist_ok=True)
    file_path = dest_dir / short_name(url)

    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise MediaDownloadError(f"Failed to download media '{url}': {exc}") from exc

    file_path.write_bytes(response.content)
    return file_path
