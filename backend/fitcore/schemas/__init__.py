"""Pydantic entity schemas."""
from fitcore.schemas.user import User, HealthSnapshot
from fitcore.schemas.nutrition import (
    Meal,
    FoodCandidate,
    ScaledServing,
    DailyTotals,
    MacroProgress,
    ProgressBand,
)
from fitcore.schemas.workout import (
    Exercise,
    WorkoutPlan,
    SetLog,
    WorkoutExercise,
    WorkoutSession,
    PersonalRecord,
    WorkoutSummary,
)

__all__ = [
    # User
    "User",
    "HealthSnapshot",
    # Nutrition
    "Meal",
    "FoodCandidate",
    "ScaledServing",
    "DailyTotals",
    "MacroProgress",
    "ProgressBand",
    # Workout
    "Exercise",
    "WorkoutPlan",
    "SetLog",
    "WorkoutExercise",
    "WorkoutSession",
    "PersonalRecord",
    "WorkoutSummary",
]
