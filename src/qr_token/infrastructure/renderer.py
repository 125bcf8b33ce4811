"""QR code rendering for issued tokens.

Thin adapter over the ``qrcode`` library. The token text is drawn as-is;
this module never inspects it.
"""

import io
import os
from typing import Union

import qrcode
from qrcode.exceptions import DataOverflowError

from qr_token.logging_config import get_logger

logger = get_logger(__name__)

Destination = Union[str, "os.PathLike[str]"]

DEFAULT_BOX_SIZE = 10
DEFAULT_BORDER = 4


class RenderError(Exception):
    """Base exception for QR rendering errors."""

    pass


class PayloadTooLargeError(RenderError):
    """Raised when the token text exceeds QR code capacity."""

    pass


class DestinationUnwritableError(RenderError):
    """Raised when the QR image cannot be written to the destination."""

    pass


def _make_image(payload_text: str, box_size: int, border: int):
    qr = qrcode.QRCode(
        version=None,  # smallest version that fits
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload_text)
    try:
        qr.make(fit=True)
    except DataOverflowError as e:
        raise PayloadTooLargeError(
            f"Payload of {len(payload_text)} characters does not fit in a QR code"
        ) from e
    return qr.make_image(fill_color="black", back_color="white")


def render(
    payload_text: str,
    destination: Destination,
    *,
    box_size: int = DEFAULT_BOX_SIZE,
    border: int = DEFAULT_BORDER,
) -> None:
    """Render text as a PNG QR code file.

    Args:
        payload_text: Text to encode (the token string)
        destination: File path to write
        box_size: Pixels per QR module
        border: Quiet zone width in modules

    Raises:
        PayloadTooLargeError: If the text exceeds QR capacity
        DestinationUnwritableError: If the destination is empty or cannot be written
    """
    if not os.fspath(destination):
        raise DestinationUnwritableError("Output destination cannot be empty")

    img = _make_image(payload_text, box_size, border)

    try:
        img.save(destination)
    except OSError as e:
        raise DestinationUnwritableError(f"Cannot write QR image to {destination}: {e}") from e

    logger.debug("qr_image_written", destination=os.fspath(destination))


def render_png(
    payload_text: str,
    *,
    box_size: int = DEFAULT_BOX_SIZE,
    border: int = DEFAULT_BORDER,
) -> bytes:
    """Render text as PNG QR code bytes.

    Raises:
        PayloadTooLargeError: If the text exceeds QR capacity
    """
    img = _make_image(payload_text, box_size, border)
    buffer = io.BytesIO()
    img.save(buffer)
    return buffer.getvalue()
