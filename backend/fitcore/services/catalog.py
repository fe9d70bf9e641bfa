"""Exercise catalog (read-only reference data)."""
from typing import Iterable, Optional

from fitcore.schemas.workout import Exercise

DEFAULT_EXERCISES = (
    Exercise(id="1", name="Wyciskanie sztangi", category="Klatka"),
    Exercise(id="2", name="Przysiady", category="Nogi"),
    Exercise(id="3", name="Martwy ciąg", category="Plecy"),
)


class ExerciseCatalog:
    """Lookup and filtering over a fixed list of exercises."""

    def __init__(self, exercises: Iterable[Exercise] = DEFAULT_EXERCISES):
        self.exercises = tuple(exercises)
        self._by_id = {e.id: e for e in self.exercises}

    def get(self, exercise_id: str) -> Optional[Exercise]:
        """Exercise by id, or None if it is not (or no longer) in the catalog."""
        return self._by_id.get(exercise_id)

    def search(self, query: str) -> list[Exercise]:
        """Case-insensitive match on name or category; blank returns everything."""
        needle = (query or "").strip().lower()
        if not needle:
            return list(self.exercises)
        return [
            e for e in self.exercises
            if needle in e.name.lower() or needle in e.category.lower()
        ]
