"""Page titles and capture dates."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from bs4 import BeautifulSoup


def extract_title(html: str) -> str:
    """Extract the page title from saved HTML.

    Prefers og:title, falls back to <title>. Returns "" when neither exists.
    """
    if not html.strip():
        return ""
    soup = BeautifulSoup(html, "lxml")
    return _get_meta(soup, "og:title") or _get_title(soup)


def day_date_string(value: datetime | str | int | float, utc: bool = True) -> str:
    """Format a date as YYYY.MM.DD.

    Accepts datetimes, RFC 2822 / ISO 8601 strings and epoch milliseconds.
    Naive values are taken as UTC. With utc=False the local date is used.

        "Sun, 10 Jan 2021 22:22:22 GMT" -> "2021.01.10"
    """
    dt = _to_datetime(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc) if utc else dt.astimezone()
    return dt.strftime("%Y.%m.%d")


# --- Private helpers ---


def _get_meta(soup: BeautifulSoup, name: str) -> str | None:
    """Get content from a meta tag by name or property."""
    tag = soup.find("meta", attrs={"name": name})
    if tag and tag.get("content"):
        return tag["content"].strip()
    tag = soup.find("meta", attrs={"property": name})
    if tag and tag.get("content"):
        return tag["content"].strip()
    return None


def _get_title(soup: BeautifulSoup) -> str:
    """Get page title."""
    title_tag = soup.find("title")
    return title_tag.get_text(strip=True) if title_tag else ""


def _to_datetime(value: datetime | str | int | float) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)

    text = value.strip()
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError):
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"Unrecognized date: {value!r}") from None
