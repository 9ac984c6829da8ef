"""LLM client for itinerary drafting with OpenAI integration.

Security: Reads API key from environment only, never hardcoded.
Provides a deterministic template drafter when no key is present.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from openai import AsyncOpenAI

from backend.app.config import Settings, get_settings
from backend.app.errors import DraftError
from backend.app.llm.prompt import SYSTEM_PROMPT, build_prompt
from backend.app.llm.template import template_itinerary
from backend.app.models.trip import ItinerarySource, TripRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Draft:
    """Raw itinerary draft before normalization."""

    payload: dict[str, Any]
    source: ItinerarySource


class AiDrafter(Protocol):
    """Protocol for itinerary drafting implementations."""

    async def draft(self, request: TripRequest) -> Draft:
        """Draft an itinerary for a validated trip request.

        Args:
            request: Trip parameters

        Returns:
            Draft whose payload holds a non-empty "days" list

        Raises:
            DraftError: On timeout, API error, or unusable output
        """
        ...


class TemplateDrafter:
    """Deterministic drafter (no API key required)."""

    async def draft(self, request: TripRequest) -> Draft:
        """Build the template itinerary for the request."""
        return Draft(payload=template_itinerary(request), source="template")


class OpenAIDrafter:
    """OpenAI-backed drafter using JSON-mode chat completions."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        timeout: float = 30.0,
        max_tokens: int = 3000,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize OpenAI drafter.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use
            timeout: Provider-side timeout in seconds; exceeding it is a failure
            max_tokens: Completion token cap
            client: Optional preconfigured client (for testing)
        """
        # Failures fall back to the template immediately, so the SDK must not retry
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model
        self.max_tokens = max_tokens

    async def draft(self, request: TripRequest) -> Draft:
        """Draft an itinerary using the OpenAI API."""
        prompt = build_prompt(request)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
            content = response.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"OpenAI API call failed: {e}")
            raise DraftError(f"AI provider call failed: {type(e).__name__}") from e

        if not content.strip():
            raise DraftError("AI provider returned an empty response")

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise DraftError("AI provider returned malformed JSON") from e

        if not isinstance(payload, dict):
            raise DraftError("AI provider returned a non-object itinerary")

        days = payload.get("days")
        if not isinstance(days, list) or not days:
            raise DraftError("Invalid itinerary structure: missing days")

        return Draft(payload=payload, source="openai")


def get_ai_drafter(settings: Settings | None = None) -> AiDrafter:
    """Factory function to get appropriate drafter based on config.

    Returns:
        OpenAIDrafter if API key is configured, TemplateDrafter otherwise
    """
    settings = settings or get_settings()
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info("Using OpenAI drafter for itineraries")
        return OpenAIDrafter(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            timeout=settings.ai_timeout_seconds,
            max_tokens=settings.ai_max_tokens,
        )

    logger.warning("No OpenAI API key configured, using template drafter")
    return TemplateDrafter()
