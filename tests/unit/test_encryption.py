"""Unit tests for the AES-256-GCM token codec."""

import base64
import json
import os

import pytest

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
    TruncatedCiphertextError,
)
from qr_token.domain.payload import deserialize, serialize

# Token issued for SAMPLE_KEY by the first generation of QR issuers, which
# used the JSON keys id/created/type.
LEGACY_TOKEN = (
    "5CdzP2Ew6PEWz4YDOi0fUd5ejyfJUpGidyBuLvvwE4lebUdn6nFBziMiznKQGwwwJhmGQcpOajPj_"
    "fkCnxdfok1xTo8hkZfvmcbPWV0IWhWz5SL2HO77xdYcWR1XVnpviLfeGUhWrMG1rR138_M="
)


def _raw(token: str) -> bytes:
    return base64.urlsafe_b64decode(token)


def _token(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii")


class TestEncodeToken:
    """Tests for token encoding."""

    def test_token_layout(self, key):
        """Test that decoded bytes are nonce || ciphertext || tag."""
        plaintext = b"payload bytes"

        raw = _raw(encode_token(plaintext, key))

        assert len(raw) == NONCE_SIZE + len(plaintext) + TAG_SIZE

    def test_token_uses_url_safe_alphabet(self, key):
        """Test that tokens never contain + or /."""
        for _ in range(50):
            token = encode_token(os.urandom(40), key)
            assert "+" not in token
            assert "/" not in token

    def test_fresh_nonce_per_call(self, key):
        """Test that encoding the same plaintext twice yields different tokens."""
        plaintext = b"same plaintext"

        token1 = encode_token(plaintext, key)
        token2 = encode_token(plaintext, key)

        assert token1 != token2
        assert _raw(token1)[:NONCE_SIZE] != _raw(token2)[:NONCE_SIZE]

    def test_injected_nonce_is_deterministic(self, key, nonce_source):
        """Test that a fixed nonce source produces a reproducible token."""
        token1 = encode_token(b"data", key, nonce_source=nonce_source)
        token2 = encode_token(b"data", key, nonce_source=nonce_source)

        assert token1 == token2
        assert _raw(token1)[:NONCE_SIZE] == bytes(range(NONCE_SIZE))

    def test_empty_plaintext_is_allowed(self, key):
        """Test that an empty plaintext still yields a tag-only token."""
        token = encode_token(b"", key)

        assert len(_raw(token)) == NONCE_SIZE + TAG_SIZE
        assert decode_token(token, key) == b""

    def test_entropy_failure_raises(self, key):
        """Test that a failing random source is reported as EntropyUnavailable."""

        def broken_source(size: int) -> bytes:
            raise OSError("getrandom failed")

        with pytest.raises(EntropyUnavailableError) as exc_info:
            encode_token(b"data", key, nonce_source=broken_source)

        assert exc_info.value.kind is FailureKind.ENTROPY_UNAVAILABLE

    def test_short_nonce_from_source_raises(self, key):
        """Test that a source returning too few bytes is rejected."""
        with pytest.raises(EntropyUnavailableError):
            encode_token(b"data", key, nonce_source=lambda size: b"\x00" * (size - 1))


class TestKeyLength:
    """Tests for the 32-byte key requirement on both paths."""

    @pytest.mark.parametrize("length", [0, 8, 16, 24, 31, 33, 64])
    def test_encode_rejects_wrong_key_length(self, length):
        """Test that encode rejects every key that is not 32 bytes."""
        with pytest.raises(InvalidKeyError, match="must be 32 bytes"):
            encode_token(b"data", b"k" * length)

    @pytest.mark.parametrize("length", [0, 8, 16, 24, 31, 33, 64])
    def test_decode_rejects_wrong_key_length(self, key, length):
        """Test that decode rejects every key that is not 32 bytes."""
        token = encode_token(b"data", key)

        with pytest.raises(InvalidKeyError, match="must be 32 bytes"):
            decode_token(token, b"k" * length)

    def test_none_key_rejected(self, key):
        """Test that a missing key is an InvalidKey error, not a crash."""
        token = encode_token(b"data", key)

        with pytest.raises(InvalidKeyError):
            encode_token(b"data", None)
        with pytest.raises(InvalidKeyError):
            decode_token(token, None)

    def test_string_key_rejected(self):
        """Test that a 32-character str is not accepted in place of bytes."""
        with pytest.raises(InvalidKeyError):
            encode_token(b"data", "samplekey12345678901234567890123")

    def test_invalid_key_is_not_an_invalid_token(self):
        """Test that key errors are kept apart from token validation failures."""
        assert not issubclass(InvalidKeyError, InvalidTokenError)
        assert InvalidKeyError.kind is FailureKind.INVALID_KEY

    def test_key_size_constant(self):
        assert KEY_SIZE == 32


class TestDecodeToken:
    """Tests for token decoding and authentication."""

    def test_roundtrip(self, key):
        """Test that decode reverses encode."""
        plaintext = b'{"identifier":"abc","issued_at":1}'

        assert decode_token(encode_token(plaintext, key), key) == plaintext

    def test_roundtrip_payload(self, key, sample_payload):
        """Test the full serialize/encode/decode/deserialize chain."""
        token = encode_token(serialize(sample_payload), key)

        assert deserialize(decode_token(token, key)) == sample_payload

    def test_fixed_vector_roundtrip(self, key, sample_payload, nonce_source):
        """Test the sample key/record pair with a fixed nonce."""
        token = encode_token(serialize(sample_payload), key, nonce_source=nonce_source)

        # 12-byte nonce + 92-byte payload + 16-byte tag = 120 bytes, no padding
        assert len(token) == 160
        assert token.startswith("AAECAwQFBgcICQoL")
        assert deserialize(decode_token(token, key)) == sample_payload

    def test_legacy_token_decrypts(self, key):
        """Test interop with tokens issued using the same wire layout."""
        plaintext = decode_token(LEGACY_TOKEN, key)

        assert json.loads(plaintext) == {
            "id": "f34135a1-2fa0-4fe3-9f79-4796e0b2c7d9",
            "created": 1746801058,
            "type": "access",
        }

    def test_accepts_unpadded_token(self, key):
        """Test that stripped base64 padding is tolerated."""
        # 12 + 1 + 16 = 29 bytes encodes with one padding character
        token = encode_token(b"x", key)
        assert token.endswith("=")

        assert decode_token(token.rstrip("="), key) == b"x"

    def test_wrong_key_fails_authentication(self, key, other_key):
        """Test that a token issued under one key never opens under another."""
        token = encode_token(b"data", key)

        with pytest.raises(AuthenticationFailedError):
            decode_token(token, other_key)

    def test_every_single_bit_flip_is_detected(self, key, sample_payload):
        """Test that flipping any bit of the decoded token fails authentication."""
        raw = _raw(encode_token(serialize(sample_payload), key))

        for index in range(len(raw)):
            for bit in range(8):
                tampered = bytearray(raw)
                tampered[index] ^= 1 << bit
                with pytest.raises(AuthenticationFailedError):
                    decode_token(_token(bytes(tampered)), key)

    def test_authentication_failure_message_is_generic(self, key, other_key):
        """Test that wrong key and tampering produce the same error text."""
        token = encode_token(b"data", key)
        raw = bytearray(_raw(token))
        raw[-1] ^= 0x01

        with pytest.raises(AuthenticationFailedError) as wrong_key:
            decode_token(token, other_key)
        with pytest.raises(AuthenticationFailedError) as tampered:
            decode_token(_token(bytes(raw)), key)

        assert str(wrong_key.value) == str(tampered.value)

    def test_appended_bytes_fail_authentication(self, key):
        """Test that extending the ciphertext is detected."""
        raw = _raw(encode_token(b"data", key))

        with pytest.raises(AuthenticationFailedError):
            decode_token(_token(raw + b"\x00"), key)

    @pytest.mark.parametrize("length", [1, 11, 12, 27])
    def test_truncated_token_raises(self, key, length):
        """Test that tokens too short for a nonce and tag are rejected."""
        with pytest.raises(TruncatedCiphertextError) as exc_info:
            decode_token(_token(os.urandom(length)), key)

        assert exc_info.value.kind is FailureKind.TRUNCATED_CIPHERTEXT

    def test_truncated_valid_token_raises(self, key):
        """Test that chopping a real token below the minimum length is detected."""
        raw = _raw(encode_token(b"data", key))

        with pytest.raises(TruncatedCiphertextError):
            decode_token(_token(raw[:NONCE_SIZE - 1]), key)

    @pytest.mark.parametrize(
        "token",
        [
            "",
            "not a token!",
            "abc$def",
            "AAAA+AAA",
            "AAAA/AAA",
            "AAAA\n",
            "A",
            "AAAAA",
            "AAAAA=",
            "AA=",
            "AA=A",
            "AAAA====",
        ],
    )
    def test_malformed_encoding_raises(self, key, token):
        """Test that empty or non-base64url input is rejected, never crashes."""
        with pytest.raises(MalformedEncodingError) as exc_info:
            decode_token(token, key)

        assert exc_info.value.kind is FailureKind.MALFORMED_ENCODING

    def test_non_canonical_trailing_bits_rejected(self, key):
        """Test that a token has exactly one accepted spelling."""
        alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
        # 29 bytes -> last data character carries two unused low bits
        token = encode_token(b"x", key)
        body = token.rstrip("=")
        last = alphabet[alphabet.index(body[-1]) ^ 0x01]
        variant = body[:-1] + last

        assert _raw(variant + "=") == _raw(token)
        with pytest.raises(MalformedEncodingError, match="canonical"):
            decode_token(variant + "=", key)
        with pytest.raises(MalformedEncodingError, match="canonical"):
            decode_token(variant, key)

    def test_non_string_token_raises(self, key):
        """Test that bytes are not accepted as token text."""
        with pytest.raises(MalformedEncodingError):
            decode_token(b"AAAA", key)

    def test_malformed_encoding_checked_before_key(self):
        """Test that text decoding runs before key validation."""
        with pytest.raises(MalformedEncodingError):
            decode_token("not a token!", b"short")

    def test_garbage_base64_is_invalid_token(self, key):
        """Test that syntactically valid but meaningless text is rejected."""
        with pytest.raises(InvalidTokenError):
            decode_token("invalid_encoded_ciphertext", key)
