"""URL to file name canonicalization.

Maps an absolute URL of any scheme to a filesystem-safe, readable name:

    https://example.com/xxx/yyy?q=1#top  ->  [example.com] xxx·yyy q=1#top
    file:///C:/Users/me/shot.png         ->  [file·C] Users·me·shot.png
    chrome://flags/                      ->  [chrome·flags]
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from urllib.parse import SplitResult, unquote, urlsplit

MID_DOT = "·"

# Characters that are unsafe in file names on common filesystems.
BASE_ESCAPES: tuple[tuple[str, str], ...] = (
    (" ", "%20"),
    ('"', "%22"),
    ("/", "%2F"),
    ("*", "%2A"),
    (":", "%3A"),
    ("<", "%3C"),
    (">", "%3E"),
    ("?", "%3F"),
    ("\\", "%5C"),
    ("|", "%7C"),
)

SEARCH_OVERRIDES: tuple[tuple[str, str], ...] = (("#", "%23"), (MID_DOT, "%C2%B7"))
HASH_OVERRIDES: tuple[tuple[str, str], ...] = (("/", MID_DOT), (MID_DOT, "%C2%B7"))
PATH_OVERRIDES: tuple[tuple[str, str], ...] = (("#", "%23"), (MID_DOT, "%C2%B7"))

_SPECIAL_SCHEMES = ("http", "https", "ftp", "ws", "wss")
_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")
_C0_OR_SPACE = "".join(chr(code) for code in range(0x21))
_TAB_OR_NEWLINE_RE = re.compile(r"[\t\n\r]")
_DISK_LETTER_RE = re.compile(r"([a-z])%3A", re.IGNORECASE)
_DRIVE_HOST_RE = re.compile(r"([a-zA-Z])[:|]")
_DRIVE_PATH_RE = re.compile(r"^/([a-zA-Z])\|(?=/|$)")
_FORBIDDEN_HOST_RE = re.compile(r"[ #%/:<>?@\[\\\]^|]")


class UrlParseError(ValueError):
    """Raised for relative or malformed URLs."""


@dataclass(frozen=True)
class ParsedUrl:
    """The URL parts the file name is built from."""

    scheme: str
    host: str
    path: str
    search: str
    hash: str


class SchemeKind(Enum):
    """How a scheme contributes to the bracketed header."""

    HTTP = "http"
    FILE = "file"
    OTHER = "other"

    @classmethod
    def of(cls, scheme: str) -> SchemeKind:
        if scheme.startswith("http"):
            return cls.HTTP
        if scheme == "file":
            return cls.FILE
        return cls.OTHER


def make_encoder(overrides: Iterable[tuple[str, str]] = ()) -> Callable[[str], str]:
    """Build a one-pass character substitution from BASE_ESCAPES plus overrides.

    An override for a character already in the base table replaces it.
    Replacement output is never re-scanned.
    """
    table = dict(BASE_ESCAPES)
    for char, replacement in overrides:
        if len(char) != 1:
            raise ValueError(f"Encoder keys must be single characters, got {char!r}")
        table[char] = replacement

    pattern = re.compile("[" + "".join(re.escape(char) for char in table) + "]")

    def encode(text: str) -> str:
        return pattern.sub(lambda match: table[match.group()], text)

    return encode


encode_search = make_encoder(SEARCH_OVERRIDES)
encode_hash = make_encoder(HASH_OVERRIDES)
encode_path = make_encoder(PATH_OVERRIDES)


def parse_url(url: str) -> ParsedUrl:
    """Parse an absolute URL, raising UrlParseError for anything else.

    Surrounding whitespace and embedded tabs/newlines are ignored. For special
    schemes and file, backslashes before the query act as slashes.
    """
    cleaned = _TAB_OR_NEWLINE_RE.sub("", url.strip(_C0_OR_SPACE))
    match = _SCHEME_RE.match(cleaned)
    if not match:
        raise UrlParseError(f"Not an absolute URL: {url!r}")

    scheme = match.group(1).lower()
    special = scheme in _SPECIAL_SCHEMES or scheme == "file"
    if special:
        cleaned = _backslashes_to_slashes(cleaned)

    try:
        parts = urlsplit(cleaned)
        parts.port  # validates the port range
    except ValueError as e:
        raise UrlParseError(f"Invalid URL: {url!r} ({e})") from e

    if scheme == "file":
        host, path = _file_host_and_path(parts)
    else:
        host, path = _get_host(parts, special), parts.path

    if special and not host.startswith("[") and _FORBIDDEN_HOST_RE.search(host):
        raise UrlParseError(f"Invalid host {host!r}: {url!r}")
    if scheme in _SPECIAL_SCHEMES and not host:
        raise UrlParseError(f"Missing host: {url!r}")

    path = _remove_dot_segments(path)
    if special and not path:
        path = "/"

    return ParsedUrl(
        scheme=scheme,
        host=host,
        path=path,
        search=parts.query,
        hash=parts.fragment,
    )


def normalize_segments(parsed: ParsedUrl) -> list[str]:
    """Hostname followed by the non-empty path pieces, decoded and re-encoded."""
    pieces = [parsed.host, *_collapse_slashes(parsed.path).split("/")]
    return [encode_path(unquote(piece)) for piece in pieces if piece]


def build_header(parsed: ParsedUrl, segments: list[str]) -> tuple[str, list[str]]:
    """Return the bracketed header and the segments left after it."""
    kind = SchemeKind.of(parsed.scheme)

    if kind is SchemeKind.HTTP:
        host = parsed.host[4:] if parsed.host.startswith("www.") else parsed.host
        return f"[{host}]", segments[1:]

    if kind is SchemeKind.FILE:
        match = _DISK_LETTER_RE.fullmatch(segments[0]) if segments else None
        if match:
            return f"[file{MID_DOT}{match.group(1)}]", segments[1:]
        return "[file]", list(segments)

    if not segments:
        return f"[{parsed.scheme}]", []
    return f"[{parsed.scheme}{MID_DOT}{segments[0]}]", segments[1:]


def format_query(parsed: ParsedUrl) -> str:
    """Format the search part, including its leading padding."""
    if not parsed.search:
        return ""

    path = _collapse_slashes(parsed.path)
    if path.endswith("/"):
        pad = "  " if len(path) == 1 else f"{MID_DOT} "
    else:
        pad = " "

    query = pad + encode_search(unquote(parsed.search))
    query = query.replace("%20", "+").replace("%2F", MID_DOT)
    if query.endswith(MID_DOT) and not parsed.hash:
        query = query[:-1]
    return query


def format_fragment(parsed: ParsedUrl, query: str, segments: list[str]) -> str:
    """Format the hash part; a bare fragment gets a space after the header."""
    if not parsed.hash:
        return ""

    fragment = "#" + encode_hash(unquote(parsed.hash))
    if not query and not segments:
        fragment = " " + fragment
    if fragment.endswith(MID_DOT):
        fragment = fragment[:-1]
    return fragment


def assemble(header: str, segments: list[str], query: str, fragment: str) -> str:
    """Join header and segments with a space, then append query and fragment."""
    main = MID_DOT.join(segments)
    return " ".join(part for part in (header, main) if part) + query + fragment


def url_to_filename(url: str) -> str:
    """Convert an absolute URL to a file name (without extension).

    Raises:
        UrlParseError: if the URL is relative or malformed.
    """
    parsed = parse_url(url)
    header, segments = build_header(parsed, normalize_segments(parsed))
    query = format_query(parsed)
    fragment = format_fragment(parsed, query, segments)
    return assemble(header, segments, query, fragment)


# --- Private helpers ---


def _collapse_slashes(path: str) -> str:
    return re.sub(r"/+", "/", path)


def _get_host(parts: SplitResult, special: bool) -> str:
    """Host without userinfo or port. Only special schemes are case-folded."""
    if special:
        host = parts.hostname or ""
    else:
        host = parts.netloc.rpartition("@")[2]
        if not host.endswith("]"):
            host = re.sub(r":\d*$", "", host)
        host = host.strip("[]")
    if ":" in host:
        return f"[{host}]"
    return host


def _file_host_and_path(parts: SplitResult) -> tuple[str, str]:
    """A drive letter in the host moves to the path; localhost means no host.

        file://C:/x      ->  ("", "/C:/x")
        file:///C|/x     ->  ("", "/C:/x")
        file://localhost/C:/x  ->  ("", "/C:/x")
    """
    drive = _DRIVE_HOST_RE.fullmatch(parts.netloc)
    if drive:
        return "", f"/{drive.group(1)}:{parts.path}"

    host = _get_host(parts, special=True)
    if host == "localhost":
        host = ""
    return host, _DRIVE_PATH_RE.sub(r"/\1:", parts.path)


def _backslashes_to_slashes(url: str) -> str:
    """Replace `\\` with `/` up to the query or fragment."""
    ends = [i for i in (url.find("?"), url.find("#")) if i != -1]
    end = min(ends) if ends else len(url)
    return url[:end].replace("\\", "/") + url[end:]


def _remove_dot_segments(path: str) -> str:
    """Resolve `.` and `..` pieces of an absolute path."""
    if not path.startswith("/"):
        return path

    pieces = path[1:].split("/")
    output: list[str] = []
    for i, piece in enumerate(pieces):
        is_last = i == len(pieces) - 1
        lowered = piece.lower()
        if lowered in (".", "%2e"):
            if is_last:
                output.append("")
        elif lowered in ("..", ".%2e", "%2e.", "%2e%2e"):
            if output:
                output.pop()
            if is_last:
                output.append("")
        else:
            output.append(piece)
    return "/" + "/".join(output)
