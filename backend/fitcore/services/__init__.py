"""Domain services."""
from fitcore.services.store import EntityStore
from fitcore.services.nutrition import NutritionEngine, MealDraft
from fitcore.services.workout import WorkoutSessionMachine
from fitcore.services.plans import PlanBuilder
from fitcore.services.profile import ProfileService
from fitcore.services.lookup import LookupCoordinator
from fitcore.services.open_food_facts import OpenFoodFactsClient
from fitcore.services.vision import ClaudeFoodRecognizer
from fitcore.services.health_sync import HealthSync

__all__ = [
    "EntityStore",
    "NutritionEngine",
    "MealDraft",
    "WorkoutSessionMachine",
    "PlanBuilder",
    "ProfileService",
    "LookupCoordinator",
    "OpenFoodFactsClient",
    "ClaudeFoodRecognizer",
    "HealthSync",
]
