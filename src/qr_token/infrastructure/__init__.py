"""Infrastructure adapters for the QR token service."""

from qr_token.infrastructure.renderer import (
    DestinationUnwritableError,
    PayloadTooLargeError,
    RenderError,
    render,
    render_png,
)

__all__ = [
    "RenderError",
    "PayloadTooLargeError",
    "DestinationUnwritableError",
    "render",
    "render_png",
]
