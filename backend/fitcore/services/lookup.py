"""Coordination of asynchronous food lookups."""
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Protocol

from fitcore.config import get_settings
from fitcore.schemas.nutrition import FoodCandidate

logger = logging.getLogger(__name__)


class FoodSearchProvider(Protocol):
    async def search(self, query: str) -> list[FoodCandidate]:
        ...


class FoodRecognizer(Protocol):
    async def recognize(self, image: bytes) -> list[FoodCandidate]:
        ...


class BarcodeProvider(Protocol):
    async def lookup_barcode(self, barcode: str) -> list[FoodCandidate]:
        ...


class ProductSource(FoodSearchProvider, BarcodeProvider, Protocol):
    """Product database queried by text or barcode."""


class FoodLookupProvider(FoodSearchProvider, FoodRecognizer, BarcodeProvider, Protocol):
    """Text search, barcode lookup and image recognition."""


class CombinedLookup:
    """Text and barcode lookup from one collaborator, image recognition from another."""

    def __init__(self, searcher: ProductSource, recognizer: FoodRecognizer):
        self.searcher = searcher
        self.recognizer = recognizer

    async def search(self, query: str) -> list[FoodCandidate]:
        return await self.searcher.search(query)

    async def lookup_barcode(self, barcode: str) -> list[FoodCandidate]:
        return await self.searcher.lookup_barcode(barcode)

    async def recognize(self, image: bytes) -> list[FoodCandidate]:
        return await self.recognizer.recognize(image)


@dataclass
class LookupOutcome:
    """Result of one lookup request."""
    token: int
    candidates: list[FoodCandidate] = field(default_factory=list)
    stale: bool = False
    failed: bool = False


class LookupCoordinator:
    """
    Issues lookups and applies only the newest result.

    Every request takes a generation token when it starts. A result is
    applied to ``results`` only if no newer request or ``cancel()`` happened
    while it was in flight; otherwise it is reported stale and dropped.
    Provider failures (any ``LookupError``) surface as an empty result and
    never raise.
    """

    def __init__(self, provider: FoodLookupProvider, limit: Optional[int] = None):
        self.provider = provider
        self.limit = get_settings().lookup_result_limit if limit is None else limit
        self.generation = 0
        self.results: list[FoodCandidate] = []

    def cancel(self) -> None:
        """Discard whatever request is in flight."""
        self.generation += 1

    def clear(self) -> None:
        self.cancel()
        self.results = []

    async def search(self, query: str) -> LookupOutcome:
        """Search products by free text."""
        query = (query or "").strip()
        if not query:
            return LookupOutcome(token=self.generation)
        return await self._run(f"search '{query}'", lambda: self.provider.search(query))

    async def lookup_barcode(self, barcode: str) -> LookupOutcome:
        """Look up a scanned barcode."""
        barcode = (barcode or "").strip()
        if not barcode:
            return LookupOutcome(token=self.generation)
        return await self._run(f"barcode {barcode}", lambda: self.provider.lookup_barcode(barcode))

    async def recognize(self, image: bytes) -> LookupOutcome:
        """Identify a product from a captured image."""
        if not image:
            return LookupOutcome(token=self.generation)
        return await self._run("image recognition", lambda: self.provider.recognize(image))

    async def _run(
        self,
        description: str,
        call: Callable[[], Awaitable[list[FoodCandidate]]],
    ) -> LookupOutcome:
        self.generation += 1
        token = self.generation
        failed = False

        try:
            candidates = list(await call())[: self.limit]
        except LookupError as e:
            logger.warning(f"Lookup {description} failed: {e}")
            candidates = []
            failed = True

        if token != self.generation:
            logger.debug(f"Dropping stale {description} result (token {token}, current {self.generation})")
            return LookupOutcome(token=token, candidates=candidates, stale=True, failed=failed)

        self.results = candidates
        return LookupOutcome(token=token, candidates=candidates, failed=failed)
