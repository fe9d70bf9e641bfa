"""Applies device-feed health snapshots to the store."""
import asyncio
import logging
from typing import Optional, Protocol

from fitcore.config import get_settings
from fitcore.errors import DeviceSyncError
from fitcore.schemas.user import HealthSnapshot
from fitcore.services.store import EntityStore

logger = logging.getLogger(__name__)


class DeviceFeed(Protocol):
    """Produces a full health snapshot (not a delta)."""

    async def fetch(self) -> HealthSnapshot:
        ...


class HealthSync:
    """On-demand and periodic refresh of the health snapshot."""

    def __init__(self, store: EntityStore, feed: DeviceFeed):
        self.store = store
        self.feed = feed
        self.generation = 0

    async def refresh(self) -> Optional[HealthSnapshot]:
        """
        Fetch and apply the latest snapshot.

        Returns:
            The applied snapshot, or None if the fetch failed or a newer
            refresh finished first
        """
        self.generation += 1
        token = self.generation

        try:
            snapshot = await self.feed.fetch()
        except DeviceSyncError as e:
            logger.warning(f"Device sync failed: {e}")
            return None

        if token != self.generation:
            logger.debug(f"Dropping superseded health snapshot (token {token})")
            return None

        self.store.replace_health(snapshot)
        logger.debug(f"Health snapshot applied: {snapshot.steps} steps, {snapshot.active_calories:.1f} kcal")
        return snapshot

    async def run(
        self,
        stop: asyncio.Event,
        interval: Optional[float] = None,
    ) -> None:
        """
        Refresh periodically until ``stop`` is set.

        Ticks are skipped while the user has no connected devices.
        """
        interval = get_settings().health_sync_interval_sec if interval is None else interval
        logger.info(f"Health sync loop started (every {interval}s)")
        while not stop.is_set():
            if self.store.user.connected_devices:
                await self.refresh()
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Health sync loop stopped")
