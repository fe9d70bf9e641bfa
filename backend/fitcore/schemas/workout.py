"""Workout schemas."""
from datetime import datetime
from typing import Optional, List, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Exercise(BaseModel):
    """Catalog exercise (reference data)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    description: Optional[str] = None
    image_url: Optional[str] = None


class WorkoutPlan(BaseModel):
    """Named, ordered list of exercise slots."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(..., min_length=1)
    exercise_ids: Tuple[str, ...] = Field(..., min_length=1)


class SetLog(BaseModel):
    """One set within an exercise. Mutable while the session is active."""

    model_config = ConfigDict(validate_assignment=True)

    weight: float = Field(default=0.0, ge=0)
    reps: int = Field(default=0, ge=0)


class WorkoutExercise(BaseModel):
    """Exercise slot inside a session."""
    id: str
    exercise_id: str
    sets: List[SetLog] = Field(default_factory=lambda: [SetLog()], min_length=1)


class WorkoutSession(BaseModel):
    """A workout, either in progress or completed."""
    id: str
    plan_id: str
    name: str
    date: datetime
    exercises: List[WorkoutExercise] = Field(default_factory=list)


class PersonalRecord(BaseModel):
    """Best weight ever logged for an exercise."""

    model_config = ConfigDict(frozen=True)

    exercise_id: str
    weight: float = Field(..., gt=0)
    date: datetime


class WorkoutSummary(BaseModel):
    """Result of finishing a session."""
    session: WorkoutSession
    new_record_exercise_ids: List[str] = Field(default_factory=list)
    total_volume: float = 0.0
