"""Page title trimming and the title part of download names.

Per-host trim rules strip boilerplate that sites add to their titles:

    {"github.com": {"trimEnd": [" · GitHub"]},
     "www.youtube.com": {"trimEnd": [" - YouTube"], "trimStart": ["(1) "]}}
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

import orjson

from shotname.filename import parse_url


class TrimSettingsError(ValueError):
    """Raised for unreadable or ill-shaped trim settings."""


@dataclass(frozen=True)
class HostTrimRules:
    """Trim rules for one hostname."""

    trim_start_end: tuple[tuple[str, str], ...] = ()
    trim_start: tuple[str, ...] = ()
    trim_end: tuple[str, ...] = ()


def load_trim_settings(path: Path) -> dict[str, HostTrimRules]:
    """Load per-host trim rules from a JSON file."""
    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as e:
        raise TrimSettingsError(f"{path}: invalid JSON ({e})") from e
    return parse_trim_settings(data)


def parse_trim_settings(data: object) -> dict[str, HostTrimRules]:
    """Validate decoded JSON settings and convert them to HostTrimRules."""
    if not isinstance(data, Mapping):
        raise TrimSettingsError("Trim settings must be an object keyed by hostname")

    settings: dict[str, HostTrimRules] = {}
    for host, rules in data.items():
        if isinstance(rules, HostTrimRules):
            settings[host] = rules
            continue
        if not isinstance(rules, Mapping):
            raise TrimSettingsError(f"Rules for {host!r} must be an object")
        settings[host] = HostTrimRules(
            trim_start_end=tuple(
                _pair(value, host) for value in _list(rules, "trimStartEnd", host)
            ),
            trim_start=tuple(_string(value, host) for value in _list(rules, "trimStart", host)),
            trim_end=tuple(_string(value, host) for value in _list(rules, "trimEnd", host)),
        )
    return settings


def trim_title(title: str, url: str, settings_by_host: Mapping | None = None) -> str:
    """Apply the URL host's trim rules to a title.

    Paired prefix/suffix rules go first, then prefixes, then suffixes.
    The result is always stripped of outer whitespace.
    """
    settings = parse_trim_settings(settings_by_host or {})
    rules = settings.get(parse_url(url).host)
    if rules is None:
        return title.strip()

    trimmed = title
    for prefix, suffix in rules.trim_start_end:
        if trimmed.startswith(prefix) and trimmed.endswith(suffix) \
                and len(trimmed) >= len(prefix) + len(suffix):
            trimmed = trimmed[len(prefix):len(trimmed) - len(suffix)]
    for prefix in rules.trim_start:
        if prefix and trimmed.startswith(prefix):
            trimmed = trimmed[len(prefix):]
    for suffix in rules.trim_end:
        if suffix and trimmed.endswith(suffix):
            trimmed = trimmed[:-len(suffix)]
    return trimmed.strip()


def sanitize_title(title: str) -> str:
    """Drop characters that are invalid in file names and collapse whitespace."""
    cleaned = re.sub(r'[<>:"\\|?*]+', "", title)
    cleaned = cleaned.replace("/", " ")
    return re.sub(r"\s+", " ", cleaned)


def title_part_for_filename(
    title: str,
    url: str,
    settings_by_host: Mapping | None = None,
) -> str:
    """Return `" — <title>"`, or "" when the URL already carries the title."""
    if not title or title in url or title in unquote(url):
        return ""

    cleaned = sanitize_title(trim_title(title, url, settings_by_host))
    if not cleaned.strip():
        return ""
    return " — " + cleaned


# --- Private helpers ---


def _list(rules: Mapping, key: str, host: str) -> list:
    values = rules.get(key) or []
    if not isinstance(values, list):
        raise TrimSettingsError(f"{host}.{key} must be a list")
    return values


def _string(value: object, host: str) -> str:
    if not isinstance(value, str):
        raise TrimSettingsError(f"Trim values for {host!r} must be strings, got {value!r}")
    return value


def _pair(value: object, host: str) -> tuple[str, str]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise TrimSettingsError(f"trimStartEnd entries for {host!r} must be [prefix, suffix]")
    return _string(value[0], host), _string(value[1], host)
