"""API key authentication for admin endpoints."""
import secrets
from typing import Optional
from fastapi import Depends, HTTPException, Security, status
from fastapi.exceptions import RequestValidationError
from fastapi.security import APIKeyHeader

from .config import Settings, get_settings, settings as default_settings
from .logging import logger


api_key_header = APIKeyHeader(name=default_settings.API_KEY_NAME, auto_error=False)


def verify_api_key(
    x_api_key: Optional[str] = Security(api_key_header),
    settings: Settings = Depends(get_settings),
):
    """
    Verify the API key from the ``API_KEY_NAME`` header (``X-API-Key``).

    Args:
        x_api_key: API key from the header
        settings: Active settings

    Returns:
        API key if valid

    Raises:
        RequestValidationError: If the header is missing
        HTTPException: If API key is invalid
    """
    if x_api_key is None:
        raise RequestValidationError([{
            "loc": ("header", default_settings.API_KEY_NAME),
            "msg": "Field required",
            "type": "missing",
        }])

    if not secrets.compare_digest(x_api_key, settings.API_KEY_SECRET):
        logger.warning(f"Invalid API key attempt: {x_api_key[:4]}...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )

    return x_api_key
