"""Daily nutrition aggregation, target adjustment and serving scaling."""
import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, date
from typing import Callable, Optional, Union

from fitcore.errors import ValidationError
from fitcore.schemas.nutrition import (
    Meal,
    FoodCandidate,
    ScaledServing,
    DailyTotals,
    MacroProgress,
    ProgressBand,
)
from fitcore.services.store import EntityStore
from fitcore.utils.numbers import round_half_up, round_int, parse_number

logger = logging.getLogger(__name__)

# Progress band thresholds (fraction of adjusted calorie target)
NEAR_LIMIT_THRESHOLD = 0.90
OVER_LIMIT_THRESHOLD = 1.05

DEFAULT_SERVING_G = 100.0

NumberInput = Union[str, int, float, None]


def local_day(moment: datetime) -> date:
    """Calendar day of a moment in local time. Naive values are local already."""
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def scale_serving(basis: FoodCandidate, grams: float) -> ScaledServing:
    """
    Calculate macros for a serving from per-100g values.

    Args:
        basis: Food record with per-100g values
        grams: Serving size in grams

    Returns:
        Calories rounded to an integer, macros rounded to 0.1g
    """
    if grams < 0:
        raise ValidationError("Serving weight must not be negative")

    multiplier = grams / DEFAULT_SERVING_G

    return ScaledServing(
        grams=grams,
        calories=round_int(basis.calories_per_100g * multiplier),
        protein=round_half_up(basis.protein_per_100g * multiplier, 1),
        carbs=round_half_up(basis.carbs_per_100g * multiplier, 1),
        fat=round_half_up(basis.fat_per_100g * multiplier, 1),
    )


def _format_amount(value: float) -> str:
    return f"{value:g}"


@dataclass
class MealDraft:
    """
    Meal being composed before it is logged.

    Field values are kept as typed. When a lookup candidate is selected it
    becomes the scaling basis and every weight change recomputes the macros
    from it, never from the previously displayed values.
    """
    name: str = ""
    calories: str = ""
    protein: str = ""
    carbs: str = ""
    fat: str = ""
    weight: str = "100"
    basis: Optional[FoodCandidate] = field(default=None)

    def select_candidate(self, candidate: FoodCandidate) -> None:
        """Use a lookup result as basis and reset the serving to 100g."""
        self.basis = candidate
        self.name = candidate.name
        self.calories = _format_amount(candidate.calories_per_100g)
        self.protein = _format_amount(candidate.protein_per_100g)
        self.carbs = _format_amount(candidate.carbs_per_100g)
        self.fat = _format_amount(candidate.fat_per_100g)
        self.weight = "100"

    def set_weight(self, text: str) -> None:
        """Store the typed weight; rescale from the basis if it parses."""
        self.weight = text
        if self.basis is None:
            return

        grams = parse_number(text)
        if grams is None or grams < 0:
            return

        serving = scale_serving(self.basis, grams)
        self.calories = str(serving.calories)
        self.protein = f"{serving.protein:.1f}"
        self.carbs = f"{serving.carbs:.1f}"
        self.fat = f"{serving.fat:.1f}"

    def set_field(self, name: str, text: str) -> None:
        """Manual edit of the name or a macro field."""
        if name not in ("name", "calories", "protein", "carbs", "fat"):
            raise ValidationError(f"Unknown meal field: {name}")
        setattr(self, name, text)

    def label(self) -> str:
        """Meal name including the serving weight."""
        return f"{self.name} ({self.weight}g)"

    def clear(self) -> None:
        self.name = ""
        self.calories = ""
        self.protein = ""
        self.carbs = ""
        self.fat = ""
        self.weight = "100"
        self.basis = None


class NutritionEngine:
    """Computes daily totals against targets and logs/deletes meals."""

    def __init__(
        self,
        store: EntityStore,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the engine.

        Args:
            store: Entity store holding meals, user and health snapshot
            clock: Source of the current moment
        """
        self.store = store
        self.clock = clock

    # Aggregation

    def today_meals(self, now: Optional[datetime] = None) -> list[Meal]:
        """Meals logged on the local day of ``now``, newest first."""
        day = local_day(now or self.clock())
        meals = [m for m in self.store.meals if local_day(m.timestamp) == day]
        return sorted(meals, key=lambda m: m.timestamp, reverse=True)

    def daily_totals(self, now: Optional[datetime] = None) -> DailyTotals:
        """Sum calories and macros over today's meals."""
        meals = self.today_meals(now)
        return DailyTotals(
            calories=sum(m.calories for m in meals),
            protein=sum(m.protein for m in meals),
            carbs=sum(m.carbs for m in meals),
            fat=sum(m.fat for m in meals),
            meals_count=len(meals),
        )

    def adjusted_calorie_target(self) -> int:
        """Calorie target plus calories burned according to the device feed."""
        return self.store.user.target_calories + round_int(self.store.health.active_calories)

    def remaining_calories(self, now: Optional[datetime] = None) -> int:
        """Calories left today; never negative."""
        totals = self.daily_totals(now)
        # Totals are rounded before subtracting
        return max(0, self.adjusted_calorie_target() - round_int(totals.calories))

    def progress_fraction(self, now: Optional[datetime] = None) -> float:
        """
        Today's calories as a fraction of the adjusted target.

        A zero target yields 0.0 with nothing eaten and infinity otherwise.
        """
        totals = self.daily_totals(now)
        target = self.adjusted_calorie_target()
        if target == 0:
            return 0.0 if totals.calories == 0 else math.inf
        return totals.calories / target

    def progress_band(self, now: Optional[datetime] = None) -> ProgressBand:
        fraction = self.progress_fraction(now)
        if fraction >= OVER_LIMIT_THRESHOLD:
            return ProgressBand.OVER_LIMIT
        if fraction >= NEAR_LIMIT_THRESHOLD:
            return ProgressBand.NEAR_LIMIT
        return ProgressBand.NOMINAL

    def macro_progress(self, now: Optional[datetime] = None) -> dict[str, MacroProgress]:
        """Protein, carbs and fat consumed today against the user's targets."""
        totals = self.daily_totals(now)
        user = self.store.user
        pairs = {
            "protein": (totals.protein, user.target_protein),
            "carbs": (totals.carbs, user.target_carbs),
            "fat": (totals.fat, user.target_fat),
        }
        return {
            name: MacroProgress(
                current=current,
                target=target,
                fraction=current / target if target > 0 else 0.0,
            )
            for name, (current, target) in pairs.items()
        }

    # Meal log

    def meals_newest_first(self) -> list[Meal]:
        return sorted(self.store.meals, key=lambda m: m.timestamp, reverse=True)

    def log_meal(
        self,
        name: str,
        calories: NumberInput,
        protein: NumberInput = 0,
        carbs: NumberInput = 0,
        fat: NumberInput = 0,
    ) -> Meal:
        """
        Create a meal and append it to the meal log.

        Args:
            name: Meal name
            calories: Calories, as typed or numeric; rounded to an integer
            protein: Protein grams; blank means 0
            carbs: Carbohydrate grams; blank means 0
            fat: Fat grams; blank means 0

        Returns:
            The logged meal

        Raises:
            ValidationError: Blank name, or calories/macros not a non-negative number
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Meal name is required")

        kcal = parse_number(calories)
        if kcal is None or kcal < 0:
            raise ValidationError(f"Calories must be a non-negative number, got {calories!r}")

        macros = {}
        for label, raw in (("protein", protein), ("carbs", carbs), ("fat", fat)):
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                macros[label] = 0.0
                continue
            value = parse_number(raw)
            if value is None or value < 0:
                raise ValidationError(f"{label} must be a non-negative number, got {raw!r}")
            macros[label] = value

        meal = Meal(
            id=uuid.uuid4().hex,
            name=name,
            calories=round_int(kcal),
            timestamp=self.clock(),
            **macros,
        )
        self.store.replace_meals((*self.store.meals, meal))
        logger.info(f"Logged meal {meal.id}: {meal.name} ({meal.calories} kcal)")
        return meal

    def log_draft(self, draft: MealDraft) -> Meal:
        """Log the composed meal and reset the draft."""
        if not draft.name.strip():
            raise ValidationError("Meal name is required")
        meal = self.log_meal(
            draft.label(),
            draft.calories,
            protein=draft.protein,
            carbs=draft.carbs,
            fat=draft.fat,
        )
        draft.clear()
        return meal

    def delete_meal(self, meal_id: str) -> None:
        """Remove a meal; unknown ids are ignored."""
        remaining = tuple(m for m in self.store.meals if m.id != meal_id)
        if len(remaining) == len(self.store.meals):
            logger.debug(f"Meal {meal_id} not found, nothing to delete")
            return
        self.store.replace_meals(remaining)
        logger.info(f"Deleted meal {meal_id}")
