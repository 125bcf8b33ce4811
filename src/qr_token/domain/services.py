"""Issuance and validation flows for QR tokens.

Issuance:   QRPayload -> serialize -> encode_token -> (render)
Validation: decode_token -> deserialize -> QRPayload

Every validation failure surfaces as an ``InvalidTokenError``. The concrete
subclass is logged with the stage that rejected the token so that
cryptographic failures can be told apart from payload format skew.
"""

import os
from dataclasses import dataclass
from typing import Optional

from qr_token.domain.encryption import decode_token, encode_token
from qr_token.domain.exceptions import (
    FailureKind,
    InvalidTokenError,
    MalformedPayloadError,
)
from qr_token.domain.payload import QRPayload, deserialize, serialize
from qr_token.infrastructure.renderer import (
    DEFAULT_BORDER,
    DEFAULT_BOX_SIZE,
    Destination,
    render,
)
from qr_token.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_KIND = "access"


@dataclass(frozen=True)
class IssuedToken:
    """A freshly issued token and the record it carries."""

    token: str
    payload: QRPayload


@dataclass(frozen=True)
class ValidationResult:
    """Non-raising validation outcome.

    ``failure_kind`` is for diagnostics only and is None when valid.
    """

    valid: bool
    payload: Optional[QRPayload] = None
    failure_kind: Optional[FailureKind] = None


def issue_token(
    key: bytes,
    kind: str = DEFAULT_KIND,
    *,
    payload: Optional[QRPayload] = None,
) -> IssuedToken:
    """Issue an encrypted token for a new (or given) payload record.

    Args:
        key: 32-byte AES-256 key
        kind: Kind tag for a newly created record
        payload: Existing record to encrypt instead of creating one

    Returns:
        IssuedToken with the token text and its record

    Raises:
        InvalidKeyError: If key is not 32 bytes
        EntropyUnavailableError: If a nonce cannot be drawn
    """
    record = payload or QRPayload.create(kind=kind)
    token = encode_token(serialize(record), key)

    logger.info(
        "qr_token_issued",
        identifier=record.identifier,
        kind=record.kind or None,
        token_length=len(token),
    )
    return IssuedToken(token=token, payload=record)


def validate_token(token: str, key: bytes) -> QRPayload:
    """Decrypt and parse a token back into its payload record.

    Args:
        token: Token text read from a QR code
        key: 32-byte AES-256 key used at issuance

    Returns:
        Verified QRPayload

    Raises:
        InvalidTokenError: If the token is malformed, tampered, issued under
            another key, or carries an unreadable payload
        InvalidKeyError: If key is not 32 bytes
    """
    try:
        return deserialize(decode_token(token, key))
    except MalformedPayloadError as e:
        logger.warning(
            "qr_token_validation_failed",
            stage="payload",
            failure_kind=e.kind.value,
            error=str(e),
        )
        raise
    except InvalidTokenError as e:
        logger.warning(
            "qr_token_validation_failed",
            stage="crypto",
            failure_kind=e.kind.value,
        )
        raise


def check_token(token: str, key: bytes) -> ValidationResult:
    """Validate a token without raising on an invalid token.

    Raises:
        InvalidKeyError: If key is not 32 bytes
    """
    try:
        payload = validate_token(token, key)
    except InvalidTokenError as e:
        return ValidationResult(valid=False, failure_kind=e.kind)
    return ValidationResult(valid=True, payload=payload)


def create_qr_code(
    key: bytes,
    destination: Destination,
    kind: str = DEFAULT_KIND,
    *,
    box_size: int = DEFAULT_BOX_SIZE,
    border: int = DEFAULT_BORDER,
) -> IssuedToken:
    """Issue a token and render it as a QR code image file.

    Args:
        key: 32-byte AES-256 key
        destination: Path of the PNG file to write
        kind: Kind tag for the new record
        box_size: Pixels per QR module
        border: Quiet zone width in modules

    Returns:
        IssuedToken that was drawn into the image

    Raises:
        InvalidKeyError: If key is not 32 bytes
        PayloadTooLargeError: If the token exceeds QR capacity
        DestinationUnwritableError: If the image cannot be written
    """
    issued = issue_token(key, kind)
    render(issued.token, destination, box_size=box_size, border=border)

    logger.info(
        "qr_code_created",
        identifier=issued.payload.identifier,
        destination=os.fspath(destination),
    )
    return issued
