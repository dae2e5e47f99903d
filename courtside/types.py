"""
Type definitions for stored session records.

Provides TypedDict classes describing the JSON shapes kept in the
key-value store and returned by the HTTP API.
"""

from typing import Optional, List

from typing_extensions import TypedDict


class PaymentDict(TypedDict):
    """Session payment."""
    method: str  # cash, transfer
    amount: float


class PlayerDict(TypedDict, total=False):
    """Player embedded in a group."""
    id: str
    name: str
    level: str  # BB, BG, NB, N, S, P
    payment: PaymentDict
    userId: Optional[str]
    gamesPlayed: int
    totalPlaytime: int  # milliseconds
    inActiveMatch: bool
    partners: List[str]
    opponents: List[str]
    registeredAt: str


class CourtDict(TypedDict):
    """Court embedded in a group."""
    id: str
    name: str
    isOccupied: bool
    currentMatch: Optional[str]


class GroupDict(TypedDict, total=False):
    """Group record, stored under its own id ("group:...")."""
    id: str
    name: str
    description: str
    adminId: str
    createdAt: str
    players: List[PlayerDict]
    courts: List[CourtDict]
    version: int


class MatchDict(TypedDict, total=False):
    """Match record, stored under its own id ("match:...")."""
    id: str
    groupId: Optional[str]
    team1: List[str]
    team2: List[str]
    courtId: str
    startTime: str
    endTime: Optional[str]
    status: str  # active, completed, cancelled


class HealthDict(TypedDict):
    """Response from /health endpoint."""
    status: str  # ok, degraded
    database: str
    healthy: bool
