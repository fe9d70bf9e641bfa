"""Open Food Facts API client for product search and barcode lookup."""
import logging
from typing import Optional

import httpx

from fitcore.config import get_settings
from fitcore.errors import ProductLookupError
from fitcore.schemas.nutrition import FoodCandidate

logger = logging.getLogger(__name__)

KJ_PER_KCAL = 4.184


class OpenFoodFactsClient:
    """Client for Open Food Facts API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, defaults to settings
            timeout: Request timeout in seconds
            transport: Optional httpx transport (mocked in tests)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.off_api_url).rstrip("/")
        self.timeout = settings.off_timeout if timeout is None else timeout
        self.transport = transport
        self.headers = {
            "User-Agent": settings.off_user_agent,
            "Accept": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def get_product_by_barcode(self, barcode: str) -> Optional[FoodCandidate]:
        """
        Look up a product by barcode.

        Args:
            barcode: Product barcode (EAN/UPC)

        Returns:
            Product data or None if not found

        Raises:
            ProductLookupError: Request failed
        """
        url = f"{self.base_url}/product/{barcode}.json"

        async with self._client() as client:
            try:
                response = await client.get(url, headers=self.headers)
                if response.status_code == 404:
                    logger.info(f"Product not found for barcode: {barcode}")
                    return None
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPError as e:
                logger.error(f"HTTP error fetching barcode {barcode}: {e}")
                raise ProductLookupError(f"Barcode lookup failed: {e}") from e
            except ValueError as e:
                raise ProductLookupError(f"Invalid response for barcode {barcode}") from e

        if data.get("status") != 1:
            logger.info(f"Product not found for barcode: {barcode}")
            return None

        return self._parse_product(data.get("product", {}))

    async def search_products(
        self,
        query: str,
        page: int = 1,
        page_size: int = 20,
    ) -> list[FoodCandidate]:
        """
        Search for products by name.

        Args:
            query: Search query
            page: Page number (1-indexed)
            page_size: Results per page

        Returns:
            Matching products that carry a name and an energy value

        Raises:
            ProductLookupError: Request failed
        """
        url = f"{self.base_url}/search"
        params = {
            "search_terms": query,
            "page": page,
            "page_size": page_size,
            "json": 1,
            "fields": "code,product_name,product_name_en,nutriments",
        }

        async with self._client() as client:
            try:
                response = await client.get(url, params=params, headers=self.headers)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPError as e:
                logger.error(f"HTTP error searching products: {e}")
                raise ProductLookupError(f"Product search failed: {e}") from e
            except ValueError as e:
                raise ProductLookupError("Invalid search response") from e

        products = []
        for item in data.get("products", []):
            product = self._parse_product(item)
            if product:
                products.append(product)
        return products

    async def search(self, query: str) -> list[FoodCandidate]:
        """Search with the configured result limit."""
        return await self.search_products(query, page_size=get_settings().lookup_result_limit)

    async def lookup_barcode(self, barcode: str) -> list[FoodCandidate]:
        """Barcode lookup as a candidate list (empty when not found)."""
        product = await self.get_product_by_barcode(barcode)
        return [product] if product else []

    def _parse_product(self, data: dict) -> Optional[FoodCandidate]:
        """
        Parse product data from API response.

        Args:
            data: Raw product data from API

        Returns:
            Parsed product or None if name or energy is missing
        """
        name = data.get("product_name") or data.get("product_name_en", "")
        if not name:
            return None

        nutriments = data.get("nutriments", {})

        # Prefer kcal; fall back to kJ
        calories = self._get_nutriment(nutriments, "energy-kcal_100g")
        if calories is None:
            energy_kj = self._get_nutriment(nutriments, "energy_100g")
            if energy_kj is not None:
                calories = energy_kj / KJ_PER_KCAL
        if calories is None or calories < 0:
            return None

        return FoodCandidate(
            name=name,
            calories_per_100g=calories,
            protein_per_100g=self._non_negative(self._get_nutriment(nutriments, "proteins_100g")),
            carbs_per_100g=self._non_negative(self._get_nutriment(nutriments, "carbohydrates_100g")),
            fat_per_100g=self._non_negative(self._get_nutriment(nutriments, "fat_100g")),
        )

    @staticmethod
    def _non_negative(value: Optional[float]) -> float:
        return max(value or 0.0, 0.0)

    @staticmethod
    def _get_nutriment(
        nutriments: dict, *keys: str
    ) -> Optional[float]:
        """
        Get nutriment value from multiple possible keys.

        Args:
            nutriments: Nutriments dict
            keys: Possible keys to try

        Returns:
            Nutriment value or None
        """
        for key in keys:
            value = nutriments.get(key)
            if value is not None:
                try:
                    return float(value)
                except (ValueError, TypeError):
                    continue
        return None
