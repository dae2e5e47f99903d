"""
Exceptions raised by session operations.

Every failure is local to the single requested operation:
- InsufficientPlayers: fewer than four players are free for matchmaking
- NotFound (and per-entity subclasses): a referenced record is absent
- Conflict (and subclasses): the request clashes with current state
- NotGroupAdmin: caller does not own the group
- StoreFailure: the underlying store failed a read or write
"""


class SessionError(Exception):
    """Base exception for session operations."""
    pass


class InsufficientPlayers(SessionError):
    """Fewer than four players are available."""

    def __init__(self, available: int):
        self.available = available
        super().__init__(f"Not enough players for a match ({available} available, 4 needed)")


class InvalidTeams(SessionError):
    """Teams are not two disjoint pairs."""
    pass


class NotFound(SessionError):
    """A referenced record does not exist."""

    entity = "Record"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"{self.entity} not found: {record_id}")


class GroupNotFound(NotFound):
    entity = "Group"


class CourtNotFound(NotFound):
    entity = "Court"


class PlayerNotFound(NotFound):
    entity = "Player"


class MatchNotFound(NotFound):
    entity = "Match"


class Conflict(SessionError):
    """The request is inconsistent with the current state."""
    pass


class CourtOccupied(Conflict):
    """Court already hosts an active match."""
    pass


class PlayerBusy(Conflict):
    """Player is already in an active match."""
    pass


class MatchAlreadyCompleted(Conflict):
    """Match has already been ended."""
    pass


class StaleAggregate(Conflict):
    """Group was modified by another writer since it was read."""
    pass


class NotGroupAdmin(SessionError):
    """Caller is not the group's admin."""
    pass


class StoreFailure(SessionError):
    """Underlying store read or write failed."""
    pass
