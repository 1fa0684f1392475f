"""shotname CLI - Click command definitions and main entry point."""

from __future__ import annotations

from pathlib import Path

import click
import orjson
from PIL import UnidentifiedImageError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from shotname.extract import extract_title
from shotname.filename import UrlParseError, parse_url, url_to_filename
from shotname.naming import DEFAULT_PREFIX, build_metadata, download_filename
from shotname.output import save_bookmark, save_metadata, save_screenshot
from shotname.title import HostTrimRules, TrimSettingsError, load_trim_settings

console = Console(stderr=True)

_DEFAULT_EXTENSIONS = {
    "name": "",
    "screenshot": ".jpg",
    "bookmark": ".url",
    "metadata": ".json",
}


@click.command()
@click.argument("url")
@click.option(
    "-m", "--mode",
    type=click.Choice(["name", "screenshot", "bookmark", "metadata"]),
    default="name",
    help="Output mode (default: name)",
)
@click.option("-t", "--title", default=None, help="Page title to append to the name")
@click.option("--html", "html_path", default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Saved page to read the title from (when --title is omitted)")
@click.option("-i", "--image", "image_path", default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Captured screenshot to save under the computed name")
@click.option("-o", "--output", "output_path", type=click.Path(), default=None,
              help="Output file or directory. Omit for stdout.")
@click.option("-p", "--prefix", envvar="SHOTNAME_PREFIX", default=DEFAULT_PREFIX,
              show_default=True, help="Prefix for generated names")
@click.option("-e", "--ext", "extension", default=None,
              help="File extension (default depends on mode)")
@click.option("--settings", "settings_path", envvar="SHOTNAME_TRIM_SETTINGS", default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="JSON file with per-host title trim rules")
@click.option("--quality", default=92, type=click.IntRange(1, 100),
              help="JPEG quality for screenshots")
@click.option("--max-width", default=None, type=click.IntRange(min=1),
              help="Max screenshot width (resize if larger)")
@click.option("--bare", is_flag=True, help="Print only the URL part of the name")
@click.option("-v", "--verbose", is_flag=True, help="Verbose progress output")
def main(
    url: str,
    mode: str,
    title: str | None,
    html_path: Path | None,
    image_path: Path | None,
    output_path: str | None,
    prefix: str,
    extension: str | None,
    settings_path: Path | None,
    quality: int,
    max_width: int | None,
    bare: bool,
    verbose: bool,
):
    """Turn a page URL into a readable, filesystem-safe file name.

    \b
    Examples:
        shotname https://example.com/xxx/yyy          # [ihbh][example.com] xxx·yyy
        shotname https://example.com --bare           # [example.com]
        shotname https://example.com -t "Example Domain"
        shotname https://example.com -m screenshot -i shot.png -o out/
        shotname https://example.com -m bookmark -o out/
        shotname https://example.com -m metadata
    """
    settings = _load_settings(settings_path, verbose)

    if title is None:
        title = _read_title(html_path, verbose) if html_path else ""

    # Metadata records the capture name with the requested extension, but saves as .json.
    capture_extension = extension if extension is not None else _DEFAULT_EXTENSIONS["screenshot"]
    if extension is None or mode == "metadata":
        extension = _DEFAULT_EXTENSIONS[mode]

    if verbose:
        console.print(Panel(
            f"[bold]shotname[/bold]\n{escape(url)}\nMode: {mode}",
            expand=False,
        ))

    if bare:
        try:
            click.echo(url_to_filename(url))
        except UrlParseError as e:
            raise click.ClickException(str(e)) from e
        return

    try:
        parse_url(url)
    except UrlParseError:
        console.print(f"[yellow]Not an absolute URL, using fallback name:[/yellow] {escape(url)}")

    name = download_filename(
        url, title, prefix=prefix, extension=extension, settings_by_host=settings,
    )

    if mode == "name":
        click.echo(name)

    elif mode == "screenshot":
        if not image_path:
            raise click.ClickException("Screenshot mode requires -i/--image")
        if not output_path:
            raise click.ClickException("Screenshot mode requires -o/--output")
        out = _resolve_output(output_path, name)
        try:
            size = save_screenshot(
                image_path.read_bytes(), out, quality=quality, max_width=max_width,
            )
        except UnidentifiedImageError as e:
            raise click.ClickException(f"Not an image: {image_path}") from e
        size_str = f" ({size // 1024}KB)" if verbose else ""
        console.print(f"[green]Saved:[/green] {escape(str(out))}{size_str}")

    elif mode == "bookmark":
        if not output_path:
            raise click.ClickException("Bookmark mode requires -o/--output")
        out = _resolve_output(output_path, name)
        save_bookmark(url, out)
        console.print(f"[green]Saved:[/green] {escape(str(out))}")

    elif mode == "metadata":
        metadata = build_metadata(
            url, title, settings_by_host=settings, prefix=prefix,
            extension=capture_extension,
        )
        if output_path:
            out = _resolve_output(output_path, name)
            save_metadata(metadata, out)
            console.print(f"[green]Saved:[/green] {escape(str(out))}")
        else:
            click.echo(orjson.dumps(metadata, option=orjson.OPT_INDENT_2).decode())


def _load_settings(settings_path: Path | None, verbose: bool) -> dict[str, HostTrimRules]:
    """Load trim settings before any title is trimmed."""
    if not settings_path:
        return {}
    try:
        settings = load_trim_settings(settings_path)
    except TrimSettingsError as e:
        raise click.BadParameter(str(e), param_hint="--settings") from e
    if verbose:
        console.print(f"[dim]Loaded trim rules for {len(settings)} hosts[/dim]")
    return settings


def _read_title(html_path: Path, verbose: bool) -> str:
    """Read the page title from a saved HTML file."""
    title = extract_title(html_path.read_text(encoding="utf-8", errors="replace"))
    if verbose:
        console.print(f"[dim]Title: {escape(title) or '(none)'}[/dim]")
    return title


def _resolve_output(output_path: str, name: str) -> Path:
    """Use output_path as a directory when it is one (or ends with /)."""
    out = Path(output_path)
    if out.is_dir() or output_path.endswith("/"):
        out.mkdir(parents=True, exist_ok=True)
        out = out / name
    return out


if __name__ == "__main__":
    main()
