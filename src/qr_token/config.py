"""Configuration management for the QR token service."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from qr_token.domain.encryption import KEY_SIZE
from qr_token.domain.exceptions import InvalidKeyError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="QR_TOKEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")
    service_name: str = Field(default="qr-token", description="Service name")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True, description="Render logs as JSON")

    # Encryption
    encryption_key: str | None = Field(
        default=None,
        description="Hex-encoded 32-byte AES-256 key used to issue and validate tokens",
    )

    # Tokens
    default_kind: str = Field(default="access", description="Kind tag for newly issued tokens")

    # QR rendering
    qr_box_size: int = Field(default=10, ge=1, description="Pixels per QR module")
    qr_border: int = Field(default=4, ge=0, description="Quiet zone width in modules")
    output_file: str = Field(default="encrypted_qr.png", description="Default QR image path")

    def key_bytes(self) -> bytes:
        """Decode the configured hex key.

        Returns:
            32-byte key

        Raises:
            InvalidKeyError: If no key is configured, or it is not 32 bytes of hex
        """
        if not self.encryption_key:
            raise InvalidKeyError("QR_TOKEN_ENCRYPTION_KEY is not set")

        try:
            key = bytes.fromhex(self.encryption_key)
        except ValueError as e:
            raise InvalidKeyError(f"Invalid QR_TOKEN_ENCRYPTION_KEY format: {e}") from e

        if len(key) != KEY_SIZE:
            raise InvalidKeyError(f"Encryption key must be {KEY_SIZE} bytes, got {len(key)}")
        return key


# Global settings instance
settings = Settings()
