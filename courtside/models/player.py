"""Player data model."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_serializer


class SkillLevel(str, Enum):
    """Skill levels in increasing order of ability."""

    BB = "BB"
    BG = "BG"
    NB = "NB"
    N = "N"
    S = "S"
    P = "P"

    @property
    def priority(self) -> int:
        return LEVEL_PRIORITY[self]


LEVEL_PRIORITY = {
    SkillLevel.P: 6,
    SkillLevel.S: 5,
    SkillLevel.N: 4,
    SkillLevel.NB: 3,
    SkillLevel.BG: 2,
    SkillLevel.BB: 1,
}


def level_priority(level) -> int:
    """Priority of a level or raw level string; unknown levels rank 0."""
    try:
        return LEVEL_PRIORITY[SkillLevel(level)]
    except ValueError:
        return 0


class PaymentMethod(str, Enum):
    """How a player paid for the session."""

    CASH = "cash"
    TRANSFER = "transfer"


class Payment(BaseModel):
    """Session payment."""

    method: PaymentMethod = PaymentMethod.CASH
    amount: float = Field(0, ge=0)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Player(BaseModel):
    """A registered player and their running session statistics."""

    id: str
    name: str
    level: SkillLevel
    payment: Payment = Field(default_factory=Payment)
    user_id: Optional[str] = Field(None, alias="userId")
    games_played: int = Field(0, ge=0, alias="gamesPlayed")
    # Milliseconds
    total_playtime: int = Field(0, ge=0, alias="totalPlaytime")
    in_active_match: bool = Field(False, alias="inActiveMatch")
    partners: set[str] = Field(default_factory=set)
    opponents: set[str] = Field(default_factory=set)
    registered_at: datetime = Field(default_factory=utc_now, alias="registeredAt")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True

    @field_serializer("partners", "opponents")
    def _sorted_ids(self, ids: set[str]) -> list[str]:
        return sorted(ids)

    def is_available(self) -> bool:
        """Check if the player can be put into a new match."""
        return not self.in_active_match
