"""Tests for zkpass_verifier.qr — QRCodeRenderer."""
from __future__ import annotations

import base64
import io
from pathlib import Path

import pytest

from zkpass_verifier.config import QROptions
from zkpass_verifier.qr import QRCodeRenderer, RenderError

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_URL = "https://zkpassport.id/r?id=1&scope=age-verification&disclose=age"


@pytest.fixture()
def renderer() -> QRCodeRenderer:
    return QRCodeRenderer()


class TestRender:
    def test_writes_png_to_stream(self, renderer: QRCodeRenderer) -> None:
        buffer = io.BytesIO()
        renderer.render(buffer, _URL, QROptions())
        assert buffer.getvalue().startswith(_PNG_SIGNATURE)

    def test_writes_png_to_path(self, renderer: QRCodeRenderer, tmp_path: Path) -> None:
        target = tmp_path / "request.png"
        renderer.render(target, _URL, QROptions())
        assert target.read_bytes().startswith(_PNG_SIGNATURE)

    def test_empty_url_raises(self, renderer: QRCodeRenderer) -> None:
        with pytest.raises(RenderError):
            renderer.render(io.BytesIO(), "", QROptions())

    def test_oversized_url_raises(self, renderer: QRCodeRenderer) -> None:
        with pytest.raises(RenderError):
            renderer.render(io.BytesIO(), "x" * 5000, QROptions())

    def test_unwritable_path_raises(self, renderer: QRCodeRenderer, tmp_path: Path) -> None:
        with pytest.raises(RenderError):
            renderer.render(tmp_path / "missing-dir" / "request.png", _URL, QROptions())


class TestDataUri:
    def test_prefix_and_payload(self, renderer: QRCodeRenderer) -> None:
        uri = renderer.to_data_uri(_URL, QROptions(width=150, margin=4))
        prefix = "data:image/png;base64,"
        assert uri.startswith(prefix)
        assert base64.b64decode(uri[len(prefix):]).startswith(_PNG_SIGNATURE)
