"""
Shared-secret guard for the analyze endpoint.

Clients send the configured API_KEY in the X-API-Key header. With no key
configured (dev mode) the endpoint is open and that fact is logged once.
"""

import logging
import secrets

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from siteguard.core.config import settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"

_api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)
_open_access_logged = False


async def require_api_key(presented: str | None = Security(_api_key_header)) -> None:
    global _open_access_logged
    if not settings.API_KEY:
        if not _open_access_logged:
            logger.warning("API_KEY not set - /analyze accepts unauthenticated requests")
            _open_access_logged = True
        return

    if not presented:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing API key. Provide {API_KEY_HEADER} header.",
        )
    if not secrets.compare_digest(presented.encode(), settings.API_KEY.encode()):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid API key.")
