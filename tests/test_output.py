"""Tests for shotname.output module."""

from io import BytesIO

import orjson
from PIL import Image

from shotname.output import save_bookmark, save_metadata, save_screenshot


def _png_bytes(size=(40, 20), mode="RGB") -> bytes:
    buffer = BytesIO()
    Image.new(mode, size).save(buffer, "PNG")
    return buffer.getvalue()


class TestSaveScreenshot:
    def test_saves_jpeg(self, tmp_path):
        out = tmp_path / "[ihbh][example.com] a·b.jpg"
        size = save_screenshot(_png_bytes(), out)
        assert size == out.stat().st_size
        with Image.open(out) as img:
            assert img.format == "JPEG"
            assert img.size == (40, 20)

    def test_rgba_to_jpeg(self, tmp_path):
        out = tmp_path / "shot.jpg"
        save_screenshot(_png_bytes(mode="RGBA"), out)
        with Image.open(out) as img:
            assert img.mode == "RGB"

    def test_png_suffix_keeps_png(self, tmp_path):
        out = tmp_path / "shot.png"
        save_screenshot(_png_bytes(), out)
        with Image.open(out) as img:
            assert img.format == "PNG"

    def test_max_width(self, tmp_path):
        out = tmp_path / "shot.jpg"
        save_screenshot(_png_bytes(size=(400, 200)), out, max_width=100)
        with Image.open(out) as img:
            assert img.size == (100, 50)

    def test_smaller_image_not_upscaled(self, tmp_path):
        out = tmp_path / "shot.jpg"
        save_screenshot(_png_bytes(size=(40, 20)), out, max_width=100)
        with Image.open(out) as img:
            assert img.size == (40, 20)

    def test_creates_parent_dirs(self, tmp_path):
        out = tmp_path / "a" / "b" / "shot.jpg"
        save_screenshot(_png_bytes(), out)
        assert out.exists()


class TestSaveBookmark:
    def test_internet_shortcut(self, tmp_path):
        out = tmp_path / "[ihbh][example.com].url"
        save_bookmark("  https://example.com/  ", out)
        assert out.read_bytes() == b"[InternetShortcut]\r\nURL=https://example.com/\r\n"


class TestSaveMetadata:
    def test_writes_json(self, tmp_path):
        out = tmp_path / "meta.json"
        save_metadata({"url": "https://example.com", "title": "Привет"}, out)
        assert orjson.loads(out.read_bytes()) == {"url": "https://example.com", "title": "Привет"}
