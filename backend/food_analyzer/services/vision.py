"""Vision service - OpenAI multimodal chat completions for food photo analysis."""

import json
import logging
import math
import re

import httpx
import openai
from openai import AsyncOpenAI

from food_analyzer.config import Settings
from food_analyzer.errors import ExternalServiceError

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = (
    "Analyze this food image and return ONLY a valid JSON object with these exact fields: "
    "name (string), description (string), calories (number), protein (number in grams), "
    "fat (number in grams), carbs (number in grams), fiber (number in grams or null), "
    "sugar (number in grams or null), sodium (number in mg or null), "
    "servingSize (string or null), ingredients (array of strings or null). "
    "Return only raw JSON, no markdown."
)

_FENCE_RE = re.compile(r"```json\n?|```\n?")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers the model sometimes wraps JSON in."""
    return _FENCE_RE.sub("", text).strip()


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def _parse_number(text: str) -> float | int:
    # 95.0 and 95 are the same JSON number; keep it integral so it re-serializes as 95
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"JSON number out of range: {text}")
    return int(value) if value.is_integer() else value


def parse_model_json(text: str):
    """Parse a model reply as strict JSON after stripping code fences."""
    return json.loads(
        strip_code_fences(text),
        parse_constant=_reject_constant,
        parse_float=_parse_number,
    )


class VisionService:
    """Sends a food image to a vision-capable chat model and parses its JSON reply."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        max_tokens: int = 800,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            http_client=http_client,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "VisionService":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.vision_model,
            max_tokens=settings.vision_max_tokens,
            base_url=settings.openai_base_url,
        )

    def build_messages(self, image_url: str) -> list[dict]:
        """Single user message: instruction text plus the image reference."""
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": ANALYSIS_PROMPT},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            }
        ]

    async def analyze(self, image_url: str) -> dict:
        """Analyze a food image (http(s) URL or base64 data URL).

        Returns the nutrition record exactly as the model produced it.

        Raises:
            ExternalServiceError: on HTTP/transport failure, an empty reply,
                or a reply that is not valid JSON.
        """
        logger.info("Requesting food analysis from model=%s", self.model)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(image_url),
                max_tokens=self.max_tokens,
            )
        except openai.APIStatusError as e:
            raise ExternalServiceError(f"OpenAI API error: {e.status_code}") from e
        except openai.APIConnectionError as e:
            raise ExternalServiceError(f"OpenAI API connection error: {e}") from e

        choices = getattr(response, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if not content:
            raise ExternalServiceError("No content in OpenAI response")

        try:
            record = parse_model_json(content)
        except ValueError as e:
            logger.warning("Model reply is not valid JSON: %r", content[:200])
            raise ExternalServiceError(str(e)) from e

        logger.info("Food analysis complete: %s", json.dumps(record)[:200])
        return record

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.close()
