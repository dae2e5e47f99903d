"""Services for the badminton session manager."""

from courtside.services.session_service import SessionService
from courtside.services.repository import SessionRepository
from courtside.services.locks import GroupLocks

__all__ = ["SessionService", "SessionRepository", "GroupLocks"]
