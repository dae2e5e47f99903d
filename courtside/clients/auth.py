"""Bearer credential resolution."""

import logging
import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict, Optional

import httpx
from cachetools import TTLCache

from courtside import config

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """The identity provider could not be reached or answered unexpectedly."""
    pass


class AuthClient(ABC):
    """Maps a bearer credential to an opaque user id."""

    @abstractmethod
    def resolve_user(self, credential: str) -> Optional[str]:
        """Return the user id for a credential, or None if it is not valid."""
        pass


class StaticAuthClient(AuthClient):
    """Fixed token table, for local development and tests."""

    def __init__(self, tokens: Dict[str, str]):
        self.tokens = dict(tokens)

    @classmethod
    def from_string(cls, spec: str) -> "StaticAuthClient":
        """Parse ``"token:user,token2:user2"``; malformed entries are ignored."""
        tokens = {}
        for entry in spec.split(','):
            token, sep, user_id = entry.strip().partition(':')
            if sep and token and user_id:
                tokens[token] = user_id
        return cls(tokens)

    def resolve_user(self, credential: str) -> Optional[str]:
        return self.tokens.get(credential)


class SupabaseAuthClient(AuthClient):
    """Resolves Supabase access tokens through the GoTrue user endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        cache_ttl: int = 300,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize the auth client.

        Args:
            base_url: Supabase project URL
            api_key: Project API key, sent as the apikey header
            cache_ttl: Seconds a resolved credential is remembered
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._cache: TTLCache = TTLCache(maxsize=1024, ttl=cache_ttl)
        self._lock = threading.RLock()

    def resolve_user(self, credential: str) -> Optional[str]:
        """
        Look up the user behind an access token.

        Raises:
            AuthError: If the auth endpoint fails for reasons other than a
                rejected credential
        """
        with self._lock:
            cached = self._cache.get(credential)
        if cached:
            logger.debug("Returning cached user for credential")
            return cached

        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {credential}",
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(f"{self.base_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"Auth request failed: {e}")
            raise AuthError(f"Auth service unavailable: {e}") from e

        if response.status_code in (401, 403):
            return None
        if response.status_code != 200:
            raise AuthError(f"Auth service returned {response.status_code}")

        user_id = response.json().get("id")
        if user_id:
            with self._lock:
                self._cache[credential] = user_id
        return user_id


@lru_cache
def get_auth_client() -> AuthClient:
    """
    Get the process-wide auth client.

    AUTH_TYPE selects the implementation:
    - "static" (default): tokens from AUTH_STATIC_TOKENS
    - "supabase": SUPABASE_URL + SUPABASE_KEY
    """
    auth_type = config.AUTH_TYPE.lower()
    logger.info(f"Auth type: {auth_type}")

    if auth_type == 'supabase':
        return SupabaseAuthClient(
            base_url=config.SUPABASE_URL,
            api_key=config.SUPABASE_KEY,
            cache_ttl=config.AUTH_CACHE_TTL_SECONDS,
            timeout=config.AUTH_TIMEOUT_SECONDS,
        )
    if auth_type == 'static':
        return StaticAuthClient.from_string(config.AUTH_STATIC_TOKENS)
    raise ValueError(f"Unknown AUTH_TYPE: {auth_type}. Valid options: static, supabase")
