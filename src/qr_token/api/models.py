"""Pydantic models for JSON API requests/responses."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from qr_token.domain.payload import QRPayload


class IssueTokenRequest(BaseModel):
    """JSON request model for issuing a QR token."""

    kind: Optional[str] = Field(
        None, max_length=64, description="Kind tag; defaults to the configured kind"
    )

    model_config = ConfigDict(json_schema_extra={"example": {"kind": "access"}})


class PayloadModel(BaseModel):
    """Payload record carried inside a token."""

    identifier: str = Field(..., description="Unique identifier of this issuance")
    issued_at: int = Field(..., description="Issuance timestamp (Unix epoch)")
    kind: Optional[str] = Field(None, description="Kind tag, if any")

    @classmethod
    def from_domain(cls, payload: QRPayload) -> "PayloadModel":
        return cls(
            identifier=payload.identifier,
            issued_at=payload.issued_at,
            kind=payload.kind or None,
        )


class IssueTokenResponse(BaseModel):
    """JSON response model for token issuance."""

    token: str = Field(..., description="Encrypted base64url token text")
    identifier: str = Field(..., description="Unique identifier of this issuance")
    issued_at: int = Field(..., description="Issuance timestamp (Unix epoch)")
    kind: Optional[str] = Field(None, description="Kind tag, if any")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "token": "5CdzP2Ew6PEWz4YDOi0fUd5ejyfJUpGidyBuLvvwE4le...",
                "identifier": "f34135a1-2fa0-4fe3-9f79-4796e0b2c7d9",
                "issued_at": 1746801058,
                "kind": "access",
            }
        }
    )


class ValidateTokenRequest(BaseModel):
    """JSON request model for validating a scanned token."""

    token: str = Field(..., max_length=4096, description="Token text read from a QR code")


class ValidateTokenResponse(BaseModel):
    """JSON response model for token validation.

    The reason for a rejection is never returned to clients.
    """

    valid: bool = Field(..., description="Whether the token verified")
    payload: Optional[PayloadModel] = Field(None, description="Verified payload")
