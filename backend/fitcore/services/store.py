"""Entity store holding the six persisted collections."""
import logging
from typing import Any, Iterable, Optional, Tuple

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from fitcore.config import get_settings
from fitcore.errors import StorageError
from fitcore.schemas.user import User, HealthSnapshot
from fitcore.schemas.nutrition import Meal
from fitcore.schemas.workout import WorkoutSession, WorkoutPlan, PersonalRecord
from fitcore.services.storage import SnapshotStorage

logger = logging.getLogger(__name__)

USER_KEY = "user"
HEALTH_KEY = "health"
MEALS_KEY = "meals"
SESSIONS_KEY = "sessions"
PLANS_KEY = "plans"
RECORDS_KEY = "records"

CODECS: dict[str, TypeAdapter] = {
    USER_KEY: TypeAdapter(User),
    HEALTH_KEY: TypeAdapter(HealthSnapshot),
    MEALS_KEY: TypeAdapter(Tuple[Meal, ...]),
    SESSIONS_KEY: TypeAdapter(Tuple[WorkoutSession, ...]),
    PLANS_KEY: TypeAdapter(Tuple[WorkoutPlan, ...]),
    RECORDS_KEY: TypeAdapter(Tuple[PersonalRecord, ...]),
}


def default_user() -> User:
    """User created on first start."""
    settings = get_settings()
    return User(
        id=settings.default_user_id,
        name=settings.default_user_name,
        target_calories=settings.default_target_calories,
        target_protein=settings.default_target_protein,
        target_carbs=settings.default_target_carbs,
        target_fat=settings.default_target_fat,
    )


class EntityStore:
    """
    Holds User, HealthSnapshot, meals, session history, plans and records.

    Every replace is written through to the storage collaborator under its
    own key. Collections are exposed as tuples; changing one means replacing
    it wholesale. No business logic lives here.
    """

    def __init__(self, storage: SnapshotStorage, key_prefix: Optional[str] = None):
        self.storage = storage
        self.key_prefix = get_settings().storage_key_prefix if key_prefix is None else key_prefix
        self._values: dict[str, Any] = {
            USER_KEY: default_user(),
            HEALTH_KEY: HealthSnapshot(),
            MEALS_KEY: (),
            SESSIONS_KEY: (),
            PLANS_KEY: (),
            RECORDS_KEY: (),
        }

    @classmethod
    def load(cls, storage: SnapshotStorage, key_prefix: Optional[str] = None) -> "EntityStore":
        """Create a store and read every key once from storage."""
        store = cls(storage, key_prefix=key_prefix)
        for key, codec in CODECS.items():
            payload = storage.load(store.storage_key(key))
            if payload is None:
                continue
            try:
                store._values[key] = codec.validate_json(payload)
            except PydanticValidationError as e:
                raise StorageError(f"Corrupt snapshot for {key}: {e}") from e
        logger.info(
            f"Loaded store: {len(store.meals)} meals, {len(store.sessions)} sessions, "
            f"{len(store.plans)} plans, {len(store.records)} records"
        )
        return store

    def storage_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _replace(self, key: str, value: Any) -> None:
        # Held value changes only once the save went through
        payload = CODECS[key].dump_json(value).decode("utf-8")
        self.storage.save(self.storage_key(key), payload)
        self._values[key] = value

    @property
    def user(self) -> User:
        return self._values[USER_KEY]

    def replace_user(self, user: User) -> None:
        self._replace(USER_KEY, user)

    @property
    def health(self) -> HealthSnapshot:
        return self._values[HEALTH_KEY]

    def replace_health(self, snapshot: HealthSnapshot) -> None:
        self._replace(HEALTH_KEY, snapshot)

    @property
    def meals(self) -> Tuple[Meal, ...]:
        return self._values[MEALS_KEY]

    def replace_meals(self, meals: Iterable[Meal]) -> None:
        self._replace(MEALS_KEY, tuple(meals))

    @property
    def sessions(self) -> Tuple[WorkoutSession, ...]:
        return self._values[SESSIONS_KEY]

    def replace_sessions(self, sessions: Iterable[WorkoutSession]) -> None:
        self._replace(SESSIONS_KEY, tuple(sessions))

    @property
    def plans(self) -> Tuple[WorkoutPlan, ...]:
        return self._values[PLANS_KEY]

    def replace_plans(self, plans: Iterable[WorkoutPlan]) -> None:
        self._replace(PLANS_KEY, tuple(plans))

    @property
    def records(self) -> Tuple[PersonalRecord, ...]:
        return self._values[RECORDS_KEY]

    def replace_records(self, records: Iterable[PersonalRecord]) -> None:
        self._replace(RECORDS_KEY, tuple(records))
