"""Pytest configuration and shared fixtures for all tests.

This module provides shared test fixtures including:
- The sample AES-256 key and a second, unrelated key
- A fixed payload record
- A deterministic nonce source for reproducible tokens
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from qr_token.domain.payload import QRPayload


SAMPLE_KEY = b"samplekey12345678901234567890123"  # 32 bytes for AES-256
OTHER_KEY = b"otherkey_98765432109876543210987"  # 32 bytes, different key

SAMPLE_IDENTIFIER = "f34135a1-2fa0-4fe3-9f79-4796e0b2c7d9"
SAMPLE_ISSUED_AT = 1746801058


def fixed_nonce(size: int) -> bytes:
    """Deterministic nonce source: 0x00, 0x01, ... 0x0b."""
    return bytes(range(size))


@pytest.fixture
def key() -> bytes:
    """Sample 32-byte key."""
    return SAMPLE_KEY


@pytest.fixture
def other_key() -> bytes:
    """A second 32-byte key that did not issue any test token."""
    return OTHER_KEY


@pytest.fixture
def sample_payload() -> QRPayload:
    """Payload record used for fixed regression vectors."""
    return QRPayload(
        identifier=SAMPLE_IDENTIFIER,
        issued_at=SAMPLE_ISSUED_AT,
        kind="access",
    )


@pytest.fixture
def nonce_source():
    """Nonce source that always returns the same bytes (tests only)."""
    return fixed_nonce
