"""QR token domain layer.

This package contains the payload record, the authenticated transport
codec, the error taxonomy, and the issuance/validation services.
"""

from qr_token.domain.encryption import (
    KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    decode_token,
    encode_token,
)
from qr_token.domain.exceptions import (
    AuthenticationFailedError,
    EntropyUnavailableError,
    FailureKind,
    InvalidKeyError,
    InvalidTokenError,
    MalformedEncodingError,
    MalformedPayloadError,
    TokenError,
    TruncatedCiphertextError,
)
from qr_token.domain.payload import QRPayload, deserialize, new_identifier, serialize
from qr_token.domain.services import (
    IssuedToken,
    ValidationResult,
    check_token,
    create_qr_code,
    issue_token,
    validate_token,
)

__all__ = [
    # Payload
    "QRPayload",
    "serialize",
    "deserialize",
    "new_identifier",
    # Transport codec
    "KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "encode_token",
    "decode_token",
    # Exceptions
    "FailureKind",
    "TokenError",
    "InvalidKeyError",
    "EntropyUnavailableError",
    "InvalidTokenError",
    "MalformedEncodingError",
    "TruncatedCiphertextError",
    "AuthenticationFailedError",
    "MalformedPayloadError",
    # Services
    "IssuedToken",
    "ValidationResult",
    "issue_token",
    "validate_token",
    "check_token",
    "create_qr_code",
]
