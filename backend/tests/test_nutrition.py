"""Tests for the nutrition engine."""
import math
from datetime import datetime, timedelta

import pytest

from fitcore.errors import ValidationError
from fitcore.schemas.nutrition import Meal, FoodCandidate, ProgressBand
from fitcore.schemas.user import User, HealthSnapshot
from fitcore.services.nutrition import NutritionEngine, MealDraft, scale_serving, local_day


CHICKEN = FoodCandidate(
    name="Pierś z kurczaka",
    calories_per_100g=165,
    protein_per_100g=31,
    carbs_per_100g=0,
    fat_per_100g=3.6,
)


def make_user(calories=2000, protein=160, carbs=250, fat=70) -> User:
    return User(
        id="user_1",
        name="Tester",
        target_calories=calories,
        target_protein=protein,
        target_carbs=carbs,
        target_fat=fat,
    )


def make_meal(meal_id, calories, timestamp, protein=0.0, carbs=0.0, fat=0.0) -> Meal:
    return Meal(
        id=meal_id,
        name=f"Meal {meal_id}",
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        timestamp=timestamp,
    )


@pytest.fixture
def engine(store, clock):
    store.replace_user(make_user())
    store.replace_health(HealthSnapshot(active_calories=0))
    return NutritionEngine(store, clock=clock)


class TestDailyAggregation:
    """Tests for daily totals."""

    def test_only_same_day_meals_counted(self, engine, store, clock):
        """Meals outside the local day are excluded regardless of order."""
        now = clock.now
        store.replace_meals([
            make_meal("late", 300, now.replace(hour=23, minute=59), protein=20),
            make_meal("yesterday", 900, now - timedelta(days=1)),
            make_meal("early", 400, now.replace(hour=0, minute=0), protein=10.5, fat=3),
            make_meal("tomorrow", 500, now.replace(hour=0) + timedelta(days=1)),
        ])

        totals = engine.daily_totals()

        assert totals.calories == 700
        assert totals.protein == pytest.approx(30.5)
        assert totals.fat == pytest.approx(3)
        assert totals.meals_count == 2

    def test_empty_history(self, engine):
        """No meals gives zero totals."""
        totals = engine.daily_totals()
        assert totals.calories == 0
        assert totals.meals_count == 0

    def test_today_meals_newest_first(self, engine, store, clock):
        """Today's meals are returned newest first."""
        now = clock.now
        store.replace_meals([
            make_meal("a", 100, now.replace(hour=8)),
            make_meal("b", 100, now.replace(hour=18)),
            make_meal("c", 100, now.replace(hour=13)),
        ])

        assert [m.id for m in engine.today_meals()] == ["b", "c", "a"]

    def test_explicit_day(self, engine, store, clock):
        """Totals can be computed for another day."""
        yesterday = clock.now - timedelta(days=1)
        store.replace_meals([make_meal("y", 650, yesterday), make_meal("t", 100, clock.now)])

        assert engine.daily_totals(now=yesterday).calories == 650

    def test_local_day_of_aware_timestamp(self):
        """Aware timestamps are compared in local time."""
        moment = datetime(2026, 3, 14, 12, 0).astimezone()
        assert local_day(moment) == moment.date()


class TestTargetAdjustment:
    """Tests for calorie target, remaining calories and progress."""

    def test_active_calories_raise_target(self, engine, store):
        """Active calories are rounded and added to the target."""
        store.replace_health(HealthSnapshot(active_calories=150.5))
        assert engine.adjusted_calorie_target() == 2151

    def test_remaining_calories(self, engine, store, clock):
        """Remaining is adjusted target minus today's calories."""
        store.replace_health(HealthSnapshot(active_calories=120.4))
        store.replace_meals([make_meal("a", 700, clock.now)])

        # 2000 + 120 - 700
        assert engine.remaining_calories() == 1420

    def test_remaining_never_negative(self, engine, store, clock):
        """Eating over the target leaves zero remaining."""
        store.replace_meals([make_meal("a", 3500, clock.now)])
        assert engine.remaining_calories() == 0

    @pytest.mark.parametrize(
        "eaten, band",
        [
            (0, ProgressBand.NOMINAL),
            (1790, ProgressBand.NOMINAL),
            (1800, ProgressBand.NEAR_LIMIT),
            (2099, ProgressBand.NEAR_LIMIT),
            (2100, ProgressBand.OVER_LIMIT),
            (2600, ProgressBand.OVER_LIMIT),
        ],
    )
    def test_progress_bands(self, engine, store, clock, eaten, band):
        """Bands switch at 90% and 105% of the adjusted target."""
        store.replace_meals([make_meal("a", eaten, clock.now)])
        assert engine.progress_band() == band

    def test_progress_fraction(self, engine, store, clock):
        """Fraction is calories over adjusted target."""
        store.replace_meals([make_meal("a", 500, clock.now)])
        assert engine.progress_fraction() == pytest.approx(0.25)

    def test_zero_target_nothing_eaten(self, engine, store):
        """Zero target with zero calories is zero progress."""
        store.replace_user(make_user(calories=0))
        assert engine.progress_fraction() == 0.0
        assert engine.progress_band() == ProgressBand.NOMINAL

    def test_zero_target_saturates(self, engine, store, clock):
        """Zero target with calories eaten is over target."""
        store.replace_user(make_user(calories=0))
        store.replace_meals([make_meal("a", 10, clock.now)])

        assert math.isinf(engine.progress_fraction())
        assert engine.progress_band() == ProgressBand.OVER_LIMIT
        assert engine.remaining_calories() == 0

    def test_macro_progress(self, engine, store, clock):
        """Each macro is compared with its own target."""
        store.replace_user(make_user(protein=160, carbs=0, fat=70))
        store.replace_meals([make_meal("a", 500, clock.now, protein=80, carbs=40, fat=35)])

        progress = engine.macro_progress()

        assert progress["protein"].fraction == pytest.approx(0.5)
        assert progress["fat"].fraction == pytest.approx(0.5)
        assert progress["carbs"].current == 40
        assert progress["carbs"].fraction == 0.0


class TestServingScaling:
    """Tests for per-100g scaling."""

    def test_chicken_150g(self):
        """165 kcal / 31 P / 3.6 F per 100g scaled to 150g."""
        serving = scale_serving(CHICKEN, 150)

        assert serving.calories == 248
        assert serving.protein == 46.5
        assert serving.carbs == 0.0
        assert serving.fat == 5.4

    def test_linear_calories(self):
        """100 kcal per 100g scaled to 250g is 250 kcal."""
        basis = FoodCandidate(name="x", calories_per_100g=100)
        assert scale_serving(basis, 250).calories == 250

    def test_zero_grams(self):
        """Zero grams gives zero for every value."""
        serving = scale_serving(CHICKEN, 0)
        assert (serving.calories, serving.protein, serving.carbs, serving.fat) == (0, 0, 0, 0)

    def test_halves_round_up(self):
        """0.25g is shown as 0.3g, not 0.2g."""
        basis = FoodCandidate(name="x", calories_per_100g=1, protein_per_100g=0.5)
        serving = scale_serving(basis, 50)
        assert serving.protein == 0.3
        assert serving.calories == 1

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            scale_serving(CHICKEN, -10)


class TestMealDraft:
    """Tests for composing a meal from a lookup result."""

    def test_select_candidate_fills_per_100g(self):
        """Selecting a candidate shows its per-100g values at 100g."""
        draft = MealDraft()
        draft.select_candidate(CHICKEN)

        assert draft.name == "Pierś z kurczaka"
        assert draft.calories == "165"
        assert draft.fat == "3.6"
        assert draft.weight == "100"

    def test_weight_change_rescales(self):
        """Typing a weight recomputes macros from the basis."""
        draft = MealDraft()
        draft.select_candidate(CHICKEN)
        draft.set_weight("150")

        assert draft.calories == "248"
        assert draft.protein == "46.5"
        assert draft.carbs == "0.0"
        assert draft.fat == "5.4"

    def test_rescale_uses_basis_not_previous_values(self):
        """Repeated weight changes do not compound rounding."""
        basis = FoodCandidate(name="x", calories_per_100g=333, protein_per_100g=3.33)
        draft = MealDraft()
        draft.select_candidate(basis)
        draft.set_weight("33")
        draft.set_weight("333")

        assert draft.calories == str(scale_serving(basis, 333).calories)
        assert draft.protein == "11.1"

    def test_unparseable_weight_keeps_values(self):
        """A weight that is not a number is stored but does not rescale."""
        draft = MealDraft()
        draft.select_candidate(CHICKEN)
        draft.set_weight("150")
        draft.set_weight("15o")

        assert draft.weight == "15o"
        assert draft.calories == "248"

    def test_manual_entry_never_rescales(self):
        """Without a basis the weight does not touch the macros."""
        draft = MealDraft()
        draft.set_field("name", "Owsianka")
        draft.set_field("calories", "350")
        draft.set_weight("200")

        assert draft.calories == "350"
        assert draft.label() == "Owsianka (200g)"

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            MealDraft().set_field("sugar", "3")


class TestMealLog:
    """Tests for logging and deleting meals."""

    def test_log_meal(self, engine, store, clock):
        """A logged meal gets an id and the current time and is persisted."""
        meal = engine.log_meal("Omlet", "249.6", protein="20", carbs="", fat=15)

        assert meal.calories == 250
        assert meal.protein == 20
        assert meal.carbs == 0
        assert meal.timestamp == clock.now
        assert store.meals == (meal,)
        assert meal.id in store.storage.load("gx_meals")

    def test_ids_unique(self, engine):
        first = engine.log_meal("A", 100)
        second = engine.log_meal("A", 100)
        assert first.id != second.id

    def test_appended_in_insertion_order(self, engine, store, clock):
        """The log keeps insertion order; display order is by timestamp."""
        first = engine.log_meal("A", 100)
        clock.now = clock.now + timedelta(minutes=5)
        second = engine.log_meal("B", 100)

        assert store.meals == (first, second)
        assert engine.meals_newest_first() == [second, first]

    @pytest.mark.parametrize(
        "name, calories",
        [("", "100"), ("   ", "100"), ("Ryż", ""), ("Ryż", "abc"), ("Ryż", "-5"), ("Ryż", None)],
    )
    def test_invalid_meal_rejected(self, engine, store, name, calories):
        """Blank name or bad calories leaves the log unchanged."""
        with pytest.raises(ValidationError):
            engine.log_meal(name, calories)
        assert store.meals == ()

    def test_invalid_macro_rejected(self, engine, store):
        with pytest.raises(ValidationError):
            engine.log_meal("Ryż", "300", protein="-1")
        assert store.meals == ()

    def test_log_draft(self, engine, store):
        """Logging a draft uses the labelled name and clears the draft."""
        draft = MealDraft()
        draft.select_candidate(CHICKEN)
        draft.set_weight("150")

        meal = engine.log_draft(draft)

        assert meal.name == "Pierś z kurczaka (150g)"
        assert meal.calories == 248
        assert meal.protein == 46.5
        assert draft.basis is None
        assert draft.name == ""

    def test_delete_meal(self, engine, store):
        meal = engine.log_meal("A", 100)
        other = engine.log_meal("B", 200)

        engine.delete_meal(meal.id)

        assert store.meals == (other,)

    def test_delete_unknown_is_noop(self, engine, store):
        """Deleting an absent id succeeds and changes nothing."""
        meal = engine.log_meal("A", 100)
        saved = store.storage.load("gx_meals")

        assert engine.delete_meal("missing") is None
        assert store.meals == (meal,)
        assert store.storage.load("gx_meals") == saved
