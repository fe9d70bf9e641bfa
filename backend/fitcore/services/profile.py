"""User profile, goal and connected-device edits."""
import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from fitcore.errors import ValidationError
from fitcore.schemas.user import User
from fitcore.services.store import EntityStore

logger = logging.getLogger(__name__)


class ProfileService:
    """Edits the single local user."""

    def __init__(self, store: EntityStore):
        self.store = store

    def _apply(self, **changes) -> User:
        data = self.store.user.model_dump()
        data.update(changes)
        try:
            user = User.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e
        self.store.replace_user(user)
        return user

    def update_profile(self, name: str, avatar: Optional[str] = None) -> User:
        """Change display name and avatar reference."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")
        return self._apply(name=name, avatar=avatar)

    def update_goals(
        self,
        calories: int,
        protein: float,
        carbs: float,
        fat: float,
    ) -> User:
        """
        Replace the daily targets.

        Raises:
            ValidationError: Any target is negative or not a number
        """
        user = self._apply(
            target_calories=calories,
            target_protein=protein,
            target_carbs=carbs,
            target_fat=fat,
        )
        logger.info(
            f"Updated goals: {user.target_calories} kcal, P {user.target_protein}g, "
            f"C {user.target_carbs}g, F {user.target_fat}g"
        )
        return user

    def toggle_device(self, device_id: str) -> bool:
        """
        Connect a device if absent, disconnect it if present.

        Returns:
            True if the device is connected afterwards
        """
        if not device_id:
            raise ValidationError("Device id is required")

        current = list(self.store.user.connected_devices)
        if device_id in current:
            current.remove(device_id)
            connected = False
        else:
            current.append(device_id)
            connected = True

        self._apply(connected_devices=current)
        logger.info(f"Device {device_id} {'connected' if connected else 'disconnected'}")
        return connected

    @property
    def has_connected_devices(self) -> bool:
        return bool(self.store.user.connected_devices)
