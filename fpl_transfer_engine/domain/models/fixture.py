"""Fixture domain model."""

from pydantic import BaseModel, ConfigDict, Field


class TeamFixture(BaseModel):
    """One fixture seen from a single team's side."""

    model_config = ConfigDict(frozen=True)

    event: int = Field(..., ge=1, le=38, description="Gameweek number")
    team_id: int = Field(..., ge=1, description="Team this row describes")
    opponent_id: int = Field(..., ge=1, description="Opponent team ID")
    is_home: bool = Field(..., description="Whether the team is playing at home")
    difficulty: int = Field(..., ge=1, le=5, description="FPL fixture difficulty")

    def __str__(self) -> str:
        venue = "H" if self.is_home else "A"
        return f"GW{self.event} vs {self.opponent_id} ({venue}, FDR {self.difficulty})"
