"""Group (session) aggregate."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from courtside.models.court import Court
from courtside.models.player import Player, utc_now


class Group(BaseModel):
    """
    A badminton session: the consistency unit for its players and courts.

    Players and courts are embedded and only change through a single
    read-modify-write of the whole group. ``version`` increases on every
    successful save and is used to detect concurrent writers.
    """

    id: str
    name: str
    description: str = ""
    admin_id: str = Field(..., alias="adminId")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    players: list[Player] = []
    courts: list[Court] = []
    version: int = 0

    class Config:
        """Pydantic configuration."""

        populate_by_name = True

    @model_validator(mode="after")
    def _unique_ids(self) -> "Group":
        player_ids = [p.id for p in self.players]
        if len(player_ids) != len(set(player_ids)):
            raise ValueError(f"Group {self.id} has duplicate player ids")
        court_ids = [c.id for c in self.courts]
        if len(court_ids) != len(set(court_ids)):
            raise ValueError(f"Group {self.id} has duplicate court ids")
        return self

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def find_court(self, court_id: str) -> Optional[Court]:
        for court in self.courts:
            if court.id == court_id:
                return court
        return None

    def available_players(self) -> list[Player]:
        return [p for p in self.players if p.is_available()]

    def available_courts(self) -> list[Court]:
        return [c for c in self.courts if not c.is_occupied]
