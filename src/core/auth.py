from typing import Optional

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from src.core.configs import settings
from src.utils.logging import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def fetch_identity(access_token: str) -> Optional[CurrentUser]:
    """
    Resolve an access token into a user through the identity provider.

    Returns:
        CurrentUser or None when the provider rejects the token
    """
    headers = {"Authorization": f"Bearer {access_token}"}
    if settings.AUTH_API_KEY:
        headers["apikey"] = settings.AUTH_API_KEY

    try:
        response = httpx.get(
            f"{settings.AUTH_URL.rstrip('/')}/user",
            headers=headers,
            timeout=settings.AUTH_TIMEOUT_SECONDS,
        )
    except httpx.HTTPError as e:
        logger.error(f"Identity provider unreachable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity provider unavailable",
        ) from e

    if response.status_code != 200:
        logger.warning(f"Identity provider rejected token: {response.status_code}")
        return None

    payload = response.json()
    app_metadata = payload.get("app_metadata") or {}
    return CurrentUser(
        id=payload["id"],
        email=payload.get("email"),
        role=app_metadata.get("role"),
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )

    user = fetch_identity(credentials.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session"
        )
    return user


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
    return user
