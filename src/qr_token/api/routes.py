"""FastAPI routes for the QR token service.

- POST /v1/qr-tokens: Issue a token (JSON)
- POST /v1/qr-tokens/image: Issue a token rendered as a PNG QR code
- POST /v1/qr-tokens/validate: Validate a scanned token (JSON)
"""

from fastapi import APIRouter, HTTPException, Response, status

from qr_token.api.dependencies import AppSettings, EncryptionKey
from qr_token.api.models import (
    IssueTokenRequest,
    IssueTokenResponse,
    PayloadModel,
    ValidateTokenRequest,
    ValidateTokenResponse,
)
from qr_token.domain.services import check_token, issue_token
from qr_token.infrastructure.renderer import RenderError, render_png
from qr_token.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/qr-tokens", tags=["qr-tokens"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=IssueTokenResponse,
)
async def create_qr_token(
    request: IssueTokenRequest,
    key: EncryptionKey,
    app_settings: AppSettings,
) -> IssueTokenResponse:
    """Issue a new encrypted QR token.

    Responses:
        201 Created: Token issued
        500 Internal Server Error: Encryption key not configured
    """
    kind = request.kind if request.kind is not None else app_settings.default_kind
    issued = issue_token(key, kind)

    return IssueTokenResponse(
        token=issued.token,
        identifier=issued.payload.identifier,
        issued_at=issued.payload.issued_at,
        kind=issued.payload.kind or None,
    )


@router.post(
    "/image",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses={201: {"content": {"image/png": {}}}},
)
async def create_qr_token_image(
    request: IssueTokenRequest,
    key: EncryptionKey,
    app_settings: AppSettings,
) -> Response:
    """Issue a new encrypted token and return it as a PNG QR code.

    The token text is also returned in the X-QR-Token header.
    """
    kind = request.kind if request.kind is not None else app_settings.default_kind
    issued = issue_token(key, kind)

    try:
        png = render_png(
            issued.token,
            box_size=app_settings.qr_box_size,
            border=app_settings.qr_border,
        )
    except RenderError as e:
        logger.error("qr_render_failed", identifier=issued.payload.identifier, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to render QR code",
        ) from e

    return Response(
        content=png,
        media_type="image/png",
        status_code=status.HTTP_201_CREATED,
        headers={"X-QR-Token": issued.token},
    )


@router.post("/validate", response_model=ValidateTokenResponse)
async def validate_qr_token(
    request: ValidateTokenRequest,
    key: EncryptionKey,
) -> ValidateTokenResponse:
    """Validate a token read from a QR code.

    Invalid tokens return 200 with valid=false; the rejection reason is
    logged but not returned.
    """
    result = check_token(request.token, key)
    if not result.valid:
        return ValidateTokenResponse(valid=False)

    return ValidateTokenResponse(valid=True, payload=PayloadModel.from_domain(result.payload))
