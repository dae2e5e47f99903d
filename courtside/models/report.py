"""Player report model."""

from pydantic import BaseModel, Field

from courtside.models.player import SkillLevel


class PlayerReport(BaseModel):
    """Per-player summary for the reports screen."""

    player_name: str = Field(..., alias="playerName")
    games_played: int = Field(..., alias="gamesPlayed")
    # Minutes, rounded
    total_playtime: int = Field(..., alias="totalPlaytime")
    partners: list[str] = []
    opponents: list[str] = []
    level: SkillLevel

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
