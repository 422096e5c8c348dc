"""libotp.qr -- render provisioning uris as QR code images"""

from __future__ import annotations

import dataclasses
import io
import os
from typing import TYPE_CHECKING, Optional, Protocol, Union

import qrcode
import qrcode.constants
from PIL import Image
from qrcode.image.pil import PilImage

from libotp._logging import logger

if TYPE_CHECKING:
    from qrcode.image.base import BaseImage

__all__ = [
    "QRRenderer",
    "QRCodeRenderer",
    "render_qr_code",
    "write_qr_code",
]

DEFAULT_SIZE = 200
DEFAULT_FORMAT = "PNG"


class QRRenderer(Protocol):
    def render(self, data: str, width: int, height: int, format: str) -> bytes:
        """Encodes <data> as a QR code, returns the image encoded in <format>."""
        ...


@dataclasses.dataclass
class QRCodeRenderer(QRRenderer):
    """:class:`QRRenderer` backed by the ``qrcode`` package & Pillow"""

    error_correction: int = qrcode.constants.ERROR_CORRECT_M
    border: int = 4
    fill_color: str = "black"
    back_color: str = "white"

    def _make_image(self, data: str) -> BaseImage:
        qr = qrcode.QRCode(
            error_correction=self.error_correction,
            border=self.border,
            image_factory=PilImage,
        )
        qr.add_data(data)
        qr.make(fit=True)
        return qr.make_image(fill_color=self.fill_color, back_color=self.back_color)

    def render(self, data: str, width: int, height: int, format: str) -> bytes:
        image = self._make_image(data).get_image()
        # NOTE: nearest neighbour keeps module edges sharp when scaling
        image = image.convert("RGB").resize(
            (width, height), resample=Image.Resampling.NEAREST
        )
        buffer = io.BytesIO()
        image.save(buffer, format=format)
        return buffer.getvalue()


def _check_size(width: int, height: int) -> None:
    if width < 1 or height < 1:
        msg = f"width and height must be >= 1, got {width}x{height}"
        raise ValueError(msg)


def render_qr_code(
    uri: str,
    width: int = DEFAULT_SIZE,
    height: int = DEFAULT_SIZE,
    format: str = DEFAULT_FORMAT,
    renderer: Optional[QRRenderer] = None,
) -> bytes:
    """render **uri** as a QR code image, returning the encoded image bytes"""
    _check_size(width, height)
    renderer = renderer or QRCodeRenderer()
    return renderer.render(uri, width, height, format)


def write_qr_code(
    uri: str,
    path: Union[str, os.PathLike[str]],
    width: int = DEFAULT_SIZE,
    height: int = DEFAULT_SIZE,
    format: str = DEFAULT_FORMAT,
    renderer: Optional[QRRenderer] = None,
) -> None:
    """
    Create a QR code image that can be scanned by an authenticator app.

    :arg uri: data to encode, usually from :func:`libotp.uri.build_uri`.
    :arg path: file to write the image to. Existing files are overwritten.
    :arg width: image width in pixels.
    :arg height: image height in pixels.
    :arg format: image format understood by Pillow (``"PNG"`` by default).
    :param renderer: :class:`QRRenderer` to use instead of :class:`QRCodeRenderer`.
    """
    data = render_qr_code(uri, width, height, format, renderer)
    with open(path, "wb") as stream:
        stream.write(data)
    logger.debug("wrote %dx%d %s QR code to %r", width, height, format, os.fspath(path))
