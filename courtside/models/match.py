"""Match data models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class MatchStatus(str, Enum):
    """Match state. Proposals are never persisted, so they have no status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    # Start was rolled back because the group could not be saved
    CANCELLED = "cancelled"


class MatchProposal(BaseModel):
    """A generated doubles pairing that has not been started yet."""

    id: str
    team1: list[str]
    team2: list[str]
    score: float

    @property
    def player_ids(self) -> list[str]:
        """All four proposed players, team 1 first."""
        return self.team1 + self.team2


class Match(BaseModel):
    """A doubles match played on a court."""

    id: str
    group_id: Optional[str] = Field(None, alias="groupId")
    team1: list[str]
    team2: list[str]
    court_id: str = Field(..., alias="courtId")
    start_time: datetime = Field(..., alias="startTime")
    end_time: Optional[datetime] = Field(None, alias="endTime")
    status: MatchStatus = MatchStatus.ACTIVE

    class Config:
        """Pydantic configuration."""

        populate_by_name = True

    @model_validator(mode="after")
    def _disjoint_pairs(self) -> "Match":
        if len(self.team1) != 2 or len(self.team2) != 2:
            raise ValueError("Each team must have exactly two players")
        if len(set(self.player_ids)) != 4:
            raise ValueError("A player cannot appear twice in a match")
        return self

    @property
    def player_ids(self) -> list[str]:
        return self.team1 + self.team2

    @property
    def is_active(self) -> bool:
        return self.status == MatchStatus.ACTIVE

    def teammates_of(self, player_id: str) -> list[str]:
        """Other member(s) of the player's team."""
        team = self.team1 if player_id in self.team1 else self.team2
        return [p for p in team if p != player_id]

    def opponents_of(self, player_id: str) -> list[str]:
        """Members of the opposing team."""
        return list(self.team2 if player_id in self.team1 else self.team1)
