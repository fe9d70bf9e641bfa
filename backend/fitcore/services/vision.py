"""Food recognition from captured images using Claude vision."""
import base64
import json
import logging
from typing import Optional

from anthropic import AsyncAnthropic

from fitcore.config import get_settings
from fitcore.errors import ProductLookupError
from fitcore.schemas.nutrition import FoodCandidate

logger = logging.getLogger(__name__)

RECOGNITION_PROMPT = """Identify the food product or barcode in this image.
If a nutrition facts table is visible, read it.

Respond with JSON only, no markdown:
{
    "name": "product name",
    "calories": 0,
    "protein": 0,
    "carbs": 0,
    "fat": 0
}

All values are per 100g. If no food product is visible, respond with {}."""


class ClaudeFoodRecognizer:
    """Recognizes a product from an image and returns its per-100g values."""

    def __init__(self, client: Optional[AsyncAnthropic] = None):
        settings = get_settings()
        self.model = settings.claude_vision_model
        self.max_tokens = settings.claude_max_tokens
        if client is None and settings.anthropic_api_key:
            client = AsyncAnthropic(api_key=settings.anthropic_api_key)
        self.client = client

    async def recognize(self, image: bytes, media_type: str = "image/jpeg") -> list[FoodCandidate]:
        """
        Recognize a food product.

        Args:
            image: Raw image bytes
            media_type: MIME type of the image

        Returns:
            One candidate, or an empty list if nothing was recognized

        Raises:
            ProductLookupError: Service not configured or request failed
        """
        if self.client is None:
            raise ProductLookupError("Image recognition is not configured")

        try:
            response = await self.client.messages.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": RECOGNITION_PROMPT},
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": media_type,
                                    "data": base64.b64encode(image).decode("ascii"),
                                },
                            },
                        ],
                    }
                ],
                max_tokens=self.max_tokens,
                temperature=0.2,
            )
        except Exception as e:
            logger.error(f"Vision recognition error: {e}")
            raise ProductLookupError(f"Image recognition failed: {e}") from e

        content = "\n".join(
            block.text for block in (response.content or [])
            if block.type == "text" and block.text
        )
        candidate = self.parse_response(content)
        return [candidate] if candidate else []

    @staticmethod
    def parse_response(content: str) -> Optional[FoodCandidate]:
        """
        Extract a candidate from the model's reply.

        Returns:
            Candidate, or None if the reply is an empty object

        Raises:
            ProductLookupError: Reply has no parseable JSON object
        """
        json_start = content.find("{")
        json_end = content.rfind("}") + 1
        if json_start < 0 or json_end <= json_start:
            raise ProductLookupError("No JSON found in recognition response")

        try:
            data = json.loads(content[json_start:json_end])
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse vision response: {e}")
            raise ProductLookupError("Unparseable recognition response") from e

        if not data.get("name") or data.get("calories") is None:
            return None

        try:
            return FoodCandidate(
                name=data["name"],
                calories_per_100g=data["calories"],
                protein_per_100g=data.get("protein") or 0,
                carbs_per_100g=data.get("carbs") or 0,
                fat_per_100g=data.get("fat") or 0,
            )
        except ValueError as e:
            raise ProductLookupError(f"Invalid recognition values: {e}") from e
