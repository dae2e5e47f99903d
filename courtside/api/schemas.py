"""Request bodies for the HTTP API."""

from typing import Optional
from pydantic import BaseModel, Field

from courtside.models.player import PaymentMethod, SkillLevel


class CreateGroupRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""


class RegisterPlayerRequest(BaseModel):
    name: str = Field(..., min_length=1)
    level: SkillLevel
    payment_method: PaymentMethod = Field(PaymentMethod.CASH, alias="paymentMethod")
    payment_amount: float = Field(0, ge=0, alias="paymentAmount")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True


class AddCourtRequest(BaseModel):
    name: str = Field(..., min_length=1)


class AutoMatchRequest(BaseModel):
    # None falls back to DEFAULT_PREFER_SAME_LEVEL
    prefer_same_level: Optional[bool] = Field(None, alias="preferSameLevel")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True


class StartMatchRequest(BaseModel):
    team1: list[str]
    team2: list[str]
    court_id: str = Field(..., alias="courtId")
    # Id of the accepted proposal, if any
    match_id: Optional[str] = Field(None, alias="matchId")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True


class EndMatchRequest(BaseModel):
    group_id: str = Field(..., alias="groupId")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
