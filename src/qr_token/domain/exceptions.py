"""Exceptions for QR token issuance and validation.

The failure set is closed. Every exception carries a ``FailureKind`` so
callers can branch on ``exc.kind`` instead of matching message strings.

Two groups exist:
- ``InvalidKeyError`` and ``EntropyUnavailableError`` are caller or
  environment bugs. They are fatal to the call and are never retried.
- ``InvalidTokenError`` subclasses all mean "validation failed". Callers
  treat them as one outcome; the subclass is kept for diagnostics only.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Tag identifying which check rejected a call."""

    INVALID_KEY = "invalid_key"
    ENTROPY_UNAVAILABLE = "entropy_unavailable"
    MALFORMED_ENCODING = "malformed_encoding"
    TRUNCATED_CIPHERTEXT = "truncated_ciphertext"
    AUTHENTICATION_FAILED = "authentication_failed"
    MALFORMED_PAYLOAD = "malformed_payload"


class TokenError(Exception):
    """Base exception for QR token errors."""

    kind: FailureKind


class InvalidKeyError(TokenError, ValueError):
    """Raised when the symmetric key is not exactly 32 bytes."""

    kind = FailureKind.INVALID_KEY


class EntropyUnavailableError(TokenError):
    """Raised when the secure random source cannot supply a nonce."""

    kind = FailureKind.ENTROPY_UNAVAILABLE


class InvalidTokenError(TokenError):
    """Base exception for a token that failed validation."""


class MalformedEncodingError(InvalidTokenError):
    """Raised when the token text is not valid URL-safe base64."""

    kind = FailureKind.MALFORMED_ENCODING


class TruncatedCiphertextError(InvalidTokenError):
    """Raised when the decoded token is too short to hold a nonce and tag."""

    kind = FailureKind.TRUNCATED_CIPHERTEXT


class AuthenticationFailedError(InvalidTokenError):
    """Raised when the authentication tag does not verify.

    Wrong key, tampered ciphertext and altered nonce are deliberately
    indistinguishable.
    """

    kind = FailureKind.AUTHENTICATION_FAILED


class MalformedPayloadError(InvalidTokenError, ValueError):
    """Raised when decrypted bytes are not a valid payload record."""

    kind = FailureKind.MALFORMED_PAYLOAD
