"""Tracker core - composition root."""
import logging
from typing import Optional

from fitcore.config import get_settings, Settings
from fitcore.models.base import build_engine
from fitcore.services.catalog import ExerciseCatalog
from fitcore.services.health_sync import HealthSync, DeviceFeed
from fitcore.services.lookup import LookupCoordinator, CombinedLookup, FoodLookupProvider
from fitcore.services.nutrition import NutritionEngine
from fitcore.services.open_food_facts import OpenFoodFactsClient
from fitcore.services.plans import PlanBuilder
from fitcore.services.profile import ProfileService
from fitcore.services.storage import SnapshotStorage, SqlSnapshotStorage
from fitcore.services.store import EntityStore
from fitcore.services.vision import ClaudeFoodRecognizer
from fitcore.services.workout import WorkoutSessionMachine

logger = logging.getLogger(__name__)


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class Tracker:
    """All engines sharing one entity store."""

    def __init__(
        self,
        store: EntityStore,
        lookup_provider: FoodLookupProvider,
        device_feed: Optional[DeviceFeed] = None,
        catalog: Optional[ExerciseCatalog] = None,
    ):
        self.store = store
        self.catalog = catalog or ExerciseCatalog()
        self.nutrition = NutritionEngine(store)
        self.workouts = WorkoutSessionMachine(store)
        self.plans = PlanBuilder(store)
        self.profile = ProfileService(store)
        self.lookup = LookupCoordinator(lookup_provider)
        self.health_sync = HealthSync(store, device_feed) if device_feed else None


def create_tracker(
    storage: Optional[SnapshotStorage] = None,
    lookup_provider: Optional[FoodLookupProvider] = None,
    device_feed: Optional[DeviceFeed] = None,
) -> Tracker:
    """
    Build a tracker from settings.

    Args:
        storage: Snapshot storage; defaults to SQL storage at ``storage_url``
        lookup_provider: Food lookup; defaults to Open Food Facts search plus
            Claude image recognition
        device_feed: Optional health device feed

    Returns:
        Tracker with the store loaded from storage
    """
    settings = get_settings()
    configure_logging(settings)
    logger.info(f"Starting {settings.app_name} {settings.app_version}...")

    if storage is None:
        storage = SqlSnapshotStorage(build_engine(settings.storage_url, echo=settings.storage_echo))
    if lookup_provider is None:
        lookup_provider = CombinedLookup(OpenFoodFactsClient(), ClaudeFoodRecognizer())

    store = EntityStore.load(storage)
    return Tracker(store, lookup_provider, device_feed=device_feed)
