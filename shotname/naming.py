"""Download names for captured pages."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone

from shotname.extract import day_date_string
from shotname.filename import UrlParseError, parse_url, url_to_filename
from shotname.title import sanitize_title, title_part_for_filename, trim_title

DEFAULT_PREFIX = "[ihbh]"
FALLBACK_NAME = "screenshot"

# Page content can only be captured from these schemes.
CAPTURABLE_SCHEMES = ("http", "https", "file", "ftp")


def download_filename(
    url: str,
    title: str = "",
    *,
    prefix: str = DEFAULT_PREFIX,
    extension: str = ".jpg",
    settings_by_host: Mapping | None = None,
) -> str:
    """Compose `<prefix><url name><title part><extension>`.

    Invalid URLs fall back to `<prefix> <title or "screenshot"><extension>`.
    """
    extension = _normalize_extension(extension)
    try:
        name = url_to_filename(url) + title_part_for_filename(title, url, settings_by_host)
    except UrlParseError:
        fallback = sanitize_title(title).strip() or FALLBACK_NAME
        return " ".join(part for part in (prefix, fallback) if part) + extension
    return prefix + name + extension


def is_capturable(url: str) -> bool:
    """Whether the page at url can be captured."""
    try:
        return parse_url(url).scheme in CAPTURABLE_SCHEMES
    except UrlParseError:
        return False


def build_metadata(
    url: str,
    title: str = "",
    settings_by_host: Mapping | None = None,
    date: datetime | str | int | float | None = None,
    prefix: str = DEFAULT_PREFIX,
    extension: str = ".jpg",
) -> dict:
    """Collect the naming details of one capture."""
    try:
        trimmed = trim_title(title, url, settings_by_host)
    except UrlParseError:
        trimmed = title.strip()

    return {
        "url": url.strip(),
        "title": title,
        "trimmed_title": trimmed,
        "filename": download_filename(
            url, title,
            prefix=prefix, extension=extension, settings_by_host=settings_by_host,
        ),
        "date": day_date_string(date if date is not None else datetime.now(timezone.utc)),
    }


def _normalize_extension(extension: str) -> str:
    if extension and not extension.startswith("."):
        return "." + extension
    return extension
