"""FastAPI dependencies for settings and key injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from qr_token.config import Settings, settings
from qr_token.domain.exceptions import InvalidKeyError
from qr_token.logging_config import get_logger

logger = get_logger(__name__)


def get_settings() -> Settings:
    """Provide application settings."""
    return settings


AppSettings = Annotated[Settings, Depends(get_settings)]


def get_encryption_key(app_settings: AppSettings) -> bytes:
    """Provide the symmetric key for the current request.

    The key is decoded per request and handed to the service functions
    explicitly; nothing retains it.

    Raises:
        HTTPException: 500 if the key is missing or malformed
    """
    try:
        return app_settings.key_bytes()
    except InvalidKeyError as e:
        logger.error("encryption_key_not_configured", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Encryption key not configured",
        ) from e


# Type alias for encryption key dependency
EncryptionKey = Annotated[bytes, Depends(get_encryption_key)]
