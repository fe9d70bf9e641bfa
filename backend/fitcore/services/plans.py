"""Workout plan builder."""
import logging
import uuid
from typing import Iterable, Optional

from fitcore.errors import ValidationError
from fitcore.schemas.workout import WorkoutPlan
from fitcore.services.store import EntityStore

logger = logging.getLogger(__name__)


class PlanBuilder:
    """Creates and deletes workout plans."""

    def __init__(self, store: EntityStore):
        self.store = store

    def create(self, name: str, exercise_ids: Iterable[str]) -> WorkoutPlan:
        """
        Create a plan and append it to the plan list.

        Args:
            name: Plan name
            exercise_ids: Exercise slots in order; repeats become separate slots

        Returns:
            The new plan

        Raises:
            ValidationError: Blank name or no exercises
        """
        name = (name or "").strip()
        ids = tuple(exercise_ids)
        if not name:
            raise ValidationError("Plan name is required")
        if not ids:
            raise ValidationError("Plan needs at least one exercise")

        plan = WorkoutPlan(id=uuid.uuid4().hex, name=name, exercise_ids=ids)
        self.store.replace_plans((*self.store.plans, plan))
        logger.info(f"Created plan {plan.id} '{plan.name}' with {len(ids)} exercises")
        return plan

    def delete(self, plan_id: str) -> None:
        """Remove a plan; sessions started from it stay in history."""
        remaining = tuple(p for p in self.store.plans if p.id != plan_id)
        if len(remaining) != len(self.store.plans):
            self.store.replace_plans(remaining)
            logger.info(f"Deleted plan {plan_id}")

    def get(self, plan_id: str) -> Optional[WorkoutPlan]:
        return next((p for p in self.store.plans if p.id == plan_id), None)
