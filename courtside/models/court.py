"""Court data model."""

from typing import Optional
from pydantic import BaseModel, Field, model_validator


class Court(BaseModel):
    """A court and the match currently played on it."""

    id: str
    name: str
    is_occupied: bool = Field(False, alias="isOccupied")
    current_match: Optional[str] = Field(None, alias="currentMatch")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True

    @model_validator(mode="after")
    def _occupied_iff_match(self) -> "Court":
        if self.is_occupied != (self.current_match is not None):
            raise ValueError(
                f"Court {self.id}: isOccupied must be set exactly when currentMatch is"
            )
        return self

    def occupy(self, match_id: str) -> None:
        self.is_occupied = True
        self.current_match = match_id

    def release(self) -> None:
        self.is_occupied = False
        self.current_match = None
