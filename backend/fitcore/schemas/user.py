"""User profile and health snapshot schemas."""
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class User(BaseModel):
    """Single local user with daily macro targets."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    avatar: Optional[str] = None
    target_calories: int = Field(..., ge=0)
    target_protein: float = Field(..., ge=0)
    target_carbs: float = Field(..., ge=0)
    target_fat: float = Field(..., ge=0)
    connected_devices: List[str] = Field(default_factory=list)

    @field_validator("connected_devices")
    @classmethod
    def _unique_devices(cls, value: List[str]) -> List[str]:
        # Keep first occurrence order
        return list(dict.fromkeys(value))


class HealthSnapshot(BaseModel):
    """Latest biometric/activity reading from the device feed."""

    model_config = ConfigDict(frozen=True)

    steps: int = Field(default=0, ge=0)
    active_calories: float = Field(default=0.0, ge=0)
    heart_rate: int = Field(default=72, gt=0)
    distance: float = Field(default=0.0, ge=0)
    last_sync: datetime = Field(default_factory=datetime.now)
