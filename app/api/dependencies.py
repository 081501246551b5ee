# ============================================================================
# FILE: app/api/dependencies.py
# Authentication dependencies for staff dashboard routes
# ============================================================================
import secrets
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config.settings import settings

logger = logging.getLogger(__name__)

# ============================================================================
# Security Schemes
# ============================================================================

dashboard_security = HTTPBearer(
    scheme_name="Dashboard Key",
    description="Enter the dashboard API key",
    auto_error=False
)


async def require_dashboard_key(
        credentials: HTTPAuthorizationCredentials = Depends(dashboard_security)
) -> None:
    """
    Dependency guarding staff routes.

    Usage in routes:
        @router.get("/appointments", dependencies=[Depends(require_dashboard_key)])

    Raises:
        HTTPException 401: If the bearer token is missing or wrong
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing dashboard credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not secrets.compare_digest(credentials.credentials, settings.DASHBOARD_API_KEY):
        logger.warning("Rejected dashboard request with invalid key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid dashboard credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
