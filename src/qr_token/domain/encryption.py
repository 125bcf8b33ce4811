"""Authenticated transport encoding for QR tokens.

A token is the URL-safe base64 text of ``nonce || ciphertext || tag``
produced by AES-256-GCM with no associated data:

    +----------------+---------------------------+-------------+
    | nonce (12 B)   | ciphertext (len(payload)) | tag (16 B)  |
    +----------------+---------------------------+-------------+

Encoding emits padded base64url. Decoding accepts padded or unpadded input
but rejects anything outside the URL-safe alphabet and non-canonical text.

Both operations are stateless. The key is passed on every call and never
retained.
"""

import base64
import binascii
import os
import re
from typing import Callable

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from qr_token.domain.exceptions import (
    AuthenticationFailedError,
    EntropyUnavailableError,
    InvalidKeyError,
    MalformedEncodingError,
    TruncatedCiphertextError,
)

KEY_SIZE = 32  # AES-256
NONCE_SIZE = 12  # 96-bit GCM nonce
TAG_SIZE = 16  # 128-bit GCM tag

NonceSource = Callable[[int], bytes]

_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def _build_cipher(key: bytes) -> AESGCM:
    """Construct an AES-256-GCM cipher, rejecting any key that is not 32 bytes.

    AESGCM itself accepts 16 and 24 byte keys, so the length is checked here.

    Raises:
        InvalidKeyError: If key is not 32 bytes
    """
    if not isinstance(key, (bytes, bytearray)):
        raise InvalidKeyError(
            f"Encryption key must be {KEY_SIZE} bytes, got {type(key).__name__}"
        )
    if len(key) != KEY_SIZE:
        raise InvalidKeyError(f"Encryption key must be {KEY_SIZE} bytes, got {len(key)}")
    return AESGCM(bytes(key))


def _draw_nonce(nonce_source: NonceSource) -> bytes:
    try:
        nonce = nonce_source(NONCE_SIZE)
    except (OSError, NotImplementedError) as e:
        raise EntropyUnavailableError(f"Secure random source unavailable: {e}") from e

    if len(nonce) != NONCE_SIZE:
        raise EntropyUnavailableError(
            f"Random source returned {len(nonce)} bytes, expected {NONCE_SIZE}"
        )
    return nonce


def _b64_decode(token: str) -> bytes:
    """Decode URL-safe base64 text, tolerating missing padding.

    Raises:
        MalformedEncodingError: On empty input, foreign characters, non-zero
            trailing bits, bad padding, or an impossible length
    """
    if not isinstance(token, str):
        raise MalformedEncodingError(f"Token must be a string, got {type(token).__name__}")
    if not token:
        raise MalformedEncodingError("Token is empty")
    if not _TOKEN_PATTERN.fullmatch(token):
        raise MalformedEncodingError("Token contains characters outside the base64url alphabet")

    body = token.rstrip("=")
    if len(body) % 4 == 1:
        raise MalformedEncodingError("Token has an invalid base64url length")
    if body != token and len(token) % 4 != 0:
        raise MalformedEncodingError("Token has invalid base64url padding")

    try:
        raw = base64.urlsafe_b64decode(body + "=" * (-len(body) % 4))
    except (binascii.Error, ValueError) as e:
        raise MalformedEncodingError(f"Invalid base64url token: {e}") from e

    # Unused trailing bits must be zero so each byte string has one spelling
    if base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=") != body:
        raise MalformedEncodingError("Token is not canonical base64url")
    return raw


def encode_token(
    plaintext: bytes,
    key: bytes,
    *,
    nonce_source: NonceSource = os.urandom,
) -> str:
    """Encrypt plaintext with AES-256-GCM and encode it as base64url text.

    Args:
        plaintext: Bytes to seal (typically a serialized QRPayload)
        key: 32-byte AES-256 key
        nonce_source: Random byte source; replace only in tests

    Returns:
        URL-safe base64 token string

    Raises:
        InvalidKeyError: If key is not 32 bytes
        EntropyUnavailableError: If a nonce cannot be drawn
    """
    aesgcm = _build_cipher(key)
    nonce = _draw_nonce(nonce_source)

    sealed = aesgcm.encrypt(nonce, plaintext, associated_data=None)

    return base64.urlsafe_b64encode(nonce + sealed).decode("ascii")


def decode_token(token: str, key: bytes) -> bytes:
    """Decode a base64url token and open it with AES-256-GCM.

    Args:
        token: Token text produced by ``encode_token``
        key: 32-byte AES-256 key used at issuance

    Returns:
        Verified plaintext bytes

    Raises:
        MalformedEncodingError: If the text is not valid base64url
        InvalidKeyError: If key is not 32 bytes
        TruncatedCiphertextError: If the decoded token cannot hold a nonce and tag
        AuthenticationFailedError: If the tag does not verify
    """
    raw = _b64_decode(token)
    aesgcm = _build_cipher(key)

    if len(raw) < NONCE_SIZE + TAG_SIZE:
        raise TruncatedCiphertextError(
            f"Decoded token is {len(raw)} bytes, need at least {NONCE_SIZE + TAG_SIZE}"
        )

    nonce, sealed = raw[:NONCE_SIZE], raw[NONCE_SIZE:]

    try:
        return aesgcm.decrypt(nonce, sealed, associated_data=None)
    except InvalidTag as e:
        # One generic message whatever the cause
        raise AuthenticationFailedError("Token authentication failed") from e
