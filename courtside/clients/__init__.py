"""Clients for external collaborators."""

from courtside.clients.auth import AuthClient, get_auth_client

__all__ = ["AuthClient", "get_auth_client"]
