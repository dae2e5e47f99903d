"""Badminton session manager: player registration, courts and doubles matchmaking."""

__version__ = "1.0.0"
