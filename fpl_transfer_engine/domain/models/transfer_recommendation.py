"""Transfer recommendation domain models: what to do with this week's FTs."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .transfer_plan import Plan


class TransferAction(str, Enum):
    """Recommended use of the gameweek's free transfers."""

    ROLL = "roll"
    HOLD = "hold"
    TRANSFER = "transfer"
    HIT = "hit"


class TransferRecommendation(BaseModel):
    """Decision between rolling, holding, a free transfer and a hit plan."""

    model_config = ConfigDict(frozen=True)

    action: TransferAction
    reason: str = Field(..., min_length=1, description="Why this action")
    free_transfers: int = Field(..., ge=0, description="FTs available this week")
    free_transfers_after: int = Field(
        ..., ge=0, description="FTs expected next week if the action is taken"
    )
    single: Plan = Field(..., description="Best single-transfer plan")
    single_net_gain: float = Field(
        ..., description="Single-transfer gain after any hit it needs"
    )
    hit: Optional[Plan] = Field(None, description="Hit-aware plan, when considered")
    is_partial: bool = Field(default=False, description="A run was cancelled")

    @property
    def plan(self) -> Optional[Plan]:
        """The plan to apply, or None for roll and hold."""
        if self.action == TransferAction.TRANSFER:
            return self.single
        if self.action == TransferAction.HIT:
            return self.hit
        return None

    @property
    def is_transfer(self) -> bool:
        return self.plan is not None

    def __str__(self) -> str:
        return f"{self.action.value.upper()}: {self.reason}"
