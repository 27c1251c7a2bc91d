"""Admin access guard."""

import secrets
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from shuttle.core.config import Settings, get_settings

admin_key_header = APIKeyHeader(name="X-Admin-Key", auto_error=False)


def require_admin(
    api_key: Optional[str] = Depends(admin_key_header),
    settings: Settings = Depends(get_settings),
) -> None:
    """Require the shared admin key on admin routes.

    Session based login is handled in front of this service; the key is the
    contract between that layer and the admin API.
    """
    if not settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access is not configured",
        )
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing admin key",
        )
    if not secrets.compare_digest(api_key, settings.admin_api_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin key",
        )
