"""Payload record embedded in a QR token.

The record is serialized as compact JSON with fixed, case-sensitive keys:

    {"identifier":"<uuid>","issued_at":1746801058,"kind":"access"}

``kind`` is omitted from the wire form when empty, so a record always
round-trips byte-for-byte through ``serialize`` and ``deserialize``.
"""

import json
import time
import uuid
from dataclasses import dataclass
from typing import Any

from qr_token.domain.exceptions import MalformedPayloadError

IDENTIFIER_FIELD = "identifier"
ISSUED_AT_FIELD = "issued_at"
KIND_FIELD = "kind"


def new_identifier() -> str:
    """Generate a statistically unique identifier for a new token."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class QRPayload:
    """Structured record carried inside a QR token.

    Attributes:
        identifier: Globally unique identifier for this issuance
        issued_at: Issuance time in seconds since the epoch
        kind: Optional category tag (e.g., "access"); empty means absent
    """

    identifier: str
    issued_at: int
    kind: str = ""

    @classmethod
    def create(cls, kind: str = "") -> "QRPayload":
        """Create a fresh record with a new identifier and the current time.

        Args:
            kind: Optional category tag

        Returns:
            New QRPayload instance
        """
        return cls(
            identifier=new_identifier(),
            issued_at=int(time.time()),
            kind=kind,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire dictionary, dropping an empty kind."""
        result: dict[str, Any] = {
            IDENTIFIER_FIELD: self.identifier,
            ISSUED_AT_FIELD: self.issued_at,
        }
        if self.kind:
            result[KIND_FIELD] = self.kind
        return result


def serialize(record: QRPayload) -> bytes:
    """Serialize a payload record to compact UTF-8 JSON.

    Args:
        record: Payload to serialize

    Returns:
        JSON bytes with keys in a fixed order
    """
    return json.dumps(record.to_dict(), separators=(",", ":")).encode("utf-8")


def deserialize(data: bytes) -> QRPayload:
    """Parse a payload record from bytes produced by ``serialize``.

    Unknown keys are ignored so that newer issuers can add fields.

    Args:
        data: Decrypted payload bytes

    Returns:
        QRPayload instance

    Raises:
        MalformedPayloadError: If the bytes are not a JSON object, or a
            required field is missing or has the wrong type
    """
    try:
        decoded = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedPayloadError(f"Payload is not valid JSON: {e}") from e

    if not isinstance(decoded, dict):
        raise MalformedPayloadError(
            f"Payload must be a JSON object, got {type(decoded).__name__}"
        )

    identifier = decoded.get(IDENTIFIER_FIELD)
    if not isinstance(identifier, str):
        raise MalformedPayloadError(f"'{IDENTIFIER_FIELD}' must be a string")

    issued_at = decoded.get(ISSUED_AT_FIELD)
    # bool is an int subclass; reject it explicitly
    if not isinstance(issued_at, int) or isinstance(issued_at, bool):
        raise MalformedPayloadError(f"'{ISSUED_AT_FIELD}' must be an integer")

    kind = decoded.get(KIND_FIELD, "")
    if not isinstance(kind, str):
        raise MalformedPayloadError(f"'{KIND_FIELD}' must be a string")

    return QRPayload(identifier=identifier, issued_at=issued_at, kind=kind)
