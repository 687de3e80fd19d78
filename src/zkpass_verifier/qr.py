"""QR rendering of request URLs.

:class:`QRRenderer` is the seam the session renders through; hosts with
their own display surface (a canvas, a terminal) subclass it.
:class:`QRCodeRenderer` is the default, PNG-producing implementation built
on the ``qrcode`` package.
"""
from __future__ import annotations

import base64
import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Union

import qrcode
from qrcode.exceptions import DataOverflowError

from zkpass_verifier.config import QROptions

logger = logging.getLogger(__name__)

RenderTarget = Union[BinaryIO, Path]


class RenderError(Exception):
    """Raised when a URL cannot be rendered as a QR code."""


class QRRenderer(ABC):
    """Draws a request URL onto a display surface."""

    @abstractmethod
    def render(self, target: RenderTarget, url: str, options: QROptions) -> None:
        """Render *url* onto *target*.

        Raises
        ------
        RenderError
            If rendering fails for any reason.
        """


class QRCodeRenderer(QRRenderer):
    """Renders PNG images with the ``qrcode`` package.

    The module size is chosen so the image is at most ``options.width``
    pixels wide, never smaller than one pixel per module.
    """

    def render(self, target: RenderTarget, url: str, options: QROptions) -> None:
        image = self._make_image(url, options)
        try:
            if isinstance(target, Path):
                with target.open("wb") as fh:
                    image.save(fh, format="PNG")
            else:
                image.save(target, format="PNG")
        except OSError as exc:
            raise RenderError(f"Could not write QR image: {exc}") from exc
        logger.debug("Rendered QR code for %d-character URL", len(url))

    def to_data_uri(self, url: str, options: QROptions) -> str:
        """Return the PNG as a ``data:image/png;base64`` URI."""
        buffer = io.BytesIO()
        self.render(buffer, url, options)
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
        return f"data:image/png;base64,{encoded}"

    @staticmethod
    def _make_image(url: str, options: QROptions):  # type: ignore[no-untyped-def]
        if not url:
            raise RenderError("Cannot render an empty URL")
        code = qrcode.QRCode(border=options.margin)
        try:
            code.add_data(url)
            code.make(fit=True)
        except (DataOverflowError, ValueError) as exc:
            raise RenderError(f"URL does not fit in a QR code: {exc}") from exc
        modules = code.modules_count + 2 * options.margin
        code.box_size = max(1, options.width // modules)
        try:
            return code.make_image(fill_color=options.dark, back_color=options.light)
        except ValueError as exc:
            raise RenderError(f"Invalid QR colours: {exc}") from exc
