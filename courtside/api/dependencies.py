"""FastAPI dependencies for dependency injection."""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException

from courtside.clients.auth import AuthClient, get_auth_client
from courtside.services.session_service import SessionService


@lru_cache
def get_session_service() -> SessionService:
    """Get the process-wide session service."""
    return SessionService()


def get_auth() -> AuthClient:
    """Get auth client dependency."""
    return get_auth_client()


def get_current_user(
    authorization: Optional[str] = Header(None),
    auth: AuthClient = Depends(get_auth),
) -> str:
    """Resolve the bearer credential to a user id, or reject with 401."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Unauthorized")
    scheme, _, credential = authorization.partition(' ')
    if scheme.lower() != 'bearer' or not credential:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user_id = auth.resolve_user(credential)
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id
