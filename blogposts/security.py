import logging
import secrets

from fastapi import Depends, HTTPException, Security
from fastapi.security.api_key import APIKeyHeader
from starlette.status import HTTP_403_FORBIDDEN

from blogposts.settings import Settings, settings

logger = logging.getLogger(__name__)

API_KEY_NAME = "X-Blog-Key"
api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_api_key(
    api_key_header: str = Security(api_key_header),
    current_settings: Settings = Depends(get_settings),
):
    if api_key_header is not None and secrets.compare_digest(
        api_key_header.encode(), current_settings.BLOG_API_KEY.encode()
    ):
        return api_key_header
    logger.warning("Rejected request with an invalid API key")
    raise HTTPException(
        status_code=HTTP_403_FORBIDDEN,
        detail="Could not validate API key",
    )
