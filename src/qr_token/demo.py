#!/usr/bin/env python3
"""
Issue an encrypted QR code and validate it back.

Uses QR_TOKEN_ENCRYPTION_KEY when configured, otherwise a fixed sample key.

    python -m qr_token.demo [output_file]
"""

import sys
from typing import Optional

from qr_token.config import settings
from qr_token.domain.exceptions import InvalidTokenError, TokenError
from qr_token.domain.services import create_qr_code, validate_token
from qr_token.infrastructure.renderer import RenderError
from qr_token.logging_config import configure_logging

SAMPLE_KEY = b"samplekey12345678901234567890123"  # 32 bytes for AES-256


def main(output_file: Optional[str] = None, key: Optional[bytes] = None) -> int:
    """Run the demo and return a process exit code."""
    output_file = output_file or settings.output_file

    print("\n[1/2] Creating encrypted QR code...")
    try:
        if key is None:
            key = settings.key_bytes() if settings.encryption_key else SAMPLE_KEY
        issued = create_qr_code(
            key,
            output_file,
            settings.default_kind,
            box_size=settings.qr_box_size,
            border=settings.qr_border,
        )
    except (TokenError, RenderError) as e:
        print(f"  ✗ {e}")
        return 1
    print(f"  ✓ Written to {output_file}")
    print(f"  Encrypted QR code data: {issued.token}")

    print("\n[2/2] Validating QR code...")
    try:
        payload = validate_token(issued.token, key)
    except InvalidTokenError as e:
        print(f"  ✗ QR code is invalid ({e.kind.value})")
        return 1
    print(f"  ✓ QR code is valid. Payload: {payload}")
    return 0


if __name__ == "__main__":
    configure_logging(log_level=settings.log_level, format_as_json=settings.log_json)
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else None))
