"""Bearer token authentication for API routes."""
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .utils.logger import logger

bearer_scheme = HTTPBearer(auto_error=False)


async def require_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Require an ``Authorization: Bearer`` header.

    Tokens are issued by the external identity provider. When API_TOKENS is
    set the token must be one of them; otherwise any non-empty token passes.

    Returns:
        The bearer token
    """
    if credentials is None or not credentials.credentials.strip():
        raise HTTPException(
            status_code=401,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = credentials.credentials.strip()
    allowed = settings.allowed_tokens
    if allowed and token not in allowed:
        logger.warning("Rejected request with unknown bearer token")
        raise HTTPException(
            status_code=401,
            detail="Invalid bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token
