"""File writers: screenshot, bookmark, metadata."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

import orjson
from PIL import Image


def save_screenshot(
    screenshot_bytes: bytes,
    output_path: Path,
    quality: int = 92,
    max_width: int | None = None,
) -> int:
    """Save screenshot bytes to file, re-encoding for the target suffix.

    Returns file size in bytes.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.open(BytesIO(screenshot_bytes))

    if max_width and img.width > max_width:
        ratio = max_width / img.width
        new_height = max(1, int(img.height * ratio))
        img = img.resize((max_width, new_height), Image.Resampling.LANCZOS)

    suffix = output_path.suffix.lower()
    if suffix in (".jpg", ".jpeg"):
        if img.mode in ("RGBA", "P", "LA"):
            img = img.convert("RGB")
        img.save(output_path, "JPEG", quality=quality, optimize=True)
    else:
        img.save(output_path, "PNG", optimize=True)

    return output_path.stat().st_size


def save_bookmark(url: str, output_path: Path) -> None:
    """Save an Internet Shortcut (.url) file pointing at url."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    content = f"[InternetShortcut]\r\nURL={url.strip()}\r\n"
    output_path.write_text(content, encoding="utf-8", newline="")


def save_metadata(metadata: dict, output_path: Path) -> None:
    """Save metadata as indented JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(orjson.dumps(metadata, option=orjson.OPT_INDENT_2))
