"""LLM client for itinerary generation with OpenAI integration.

Security: Reads API key from environment only, never hardcoded.
There is no offline fallback: without a key generation is unavailable and
callers must report it instead of inventing an itinerary.
"""

import logging
import time
from typing import Any, Protocol

from openai import AsyncOpenAI, OpenAIError

from backend.app.config import Settings, get_settings
from backend.app.itinerary.vocabulary import SectionLabel
from backend.app.llm import prompts
from backend.app.models.intent import TripParameters
from backend.app.utils.logging import StructuredGenerationLogger
from backend.app.utils.metrics import metrics

logger = logging.getLogger(__name__)

FULL_MAX_TOKENS = 3000
DAY_MAX_TOKENS = 1400
SECTION_MAX_TOKENS = 1200


class GenerationError(Exception):
    """The generation backend failed or returned nothing usable."""


class GenerationNotConfiguredError(Exception):
    """No API key is configured for the generation backend."""


class ItineraryGenerator(Protocol):
    """Protocol for generation backend implementations."""

    async def generate_itinerary(self, params: TripParameters) -> str:
        """Generate a complete markdown itinerary.

        Args:
            params: Trip parameters

        Returns:
            Raw markdown as returned by the model (trimmed)
        """
        ...

    async def regenerate_day(
        self, params: TripParameters, day_number: int, existing_markdown: str
    ) -> str:
        """Generate a replacement block for one day.

        Args:
            params: Trip parameters
            day_number: Day to rewrite
            existing_markdown: Full current document, used as context

        Returns:
            Raw day block text
        """
        ...

    async def regenerate_section(
        self, params: TripParameters, day_number: int, label: SectionLabel, day_markdown: str
    ) -> str:
        """Generate a replacement for one section of one day.

        Args:
            params: Trip parameters
            day_number: Day the section belongs to
            label: Section to rewrite
            day_markdown: Current text of that day, used as context

        Returns:
            Raw section text
        """
        ...

    async def generate_structured(self, params: TripParameters) -> str:
        """Generate the typed JSON itinerary as a string."""
        ...


class OpenAIClient:
    """OpenAI-backed itinerary generator."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", temperature: float = 0.7):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use (default: gpt-4o-mini for cost efficiency)
            temperature: Sampling temperature
        """
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self._log = StructuredGenerationLogger()

    async def generate_itinerary(self, params: TripParameters) -> str:
        """Generate a complete markdown itinerary."""
        return await self._complete(
            kind="itinerary",
            system=prompts.FULL_SYSTEM_PROMPT,
            prompt=prompts.build_itinerary_prompt(params),
            max_tokens=FULL_MAX_TOKENS,
        )

    async def regenerate_day(
        self, params: TripParameters, day_number: int, existing_markdown: str
    ) -> str:
        """Generate a replacement block for one day."""
        return await self._complete(
            kind="day",
            system=prompts.DAY_SYSTEM_PROMPT,
            prompt=prompts.build_day_prompt(params, day_number, existing_markdown),
            max_tokens=DAY_MAX_TOKENS,
        )

    async def regenerate_section(
        self, params: TripParameters, day_number: int, label: SectionLabel, day_markdown: str
    ) -> str:
        """Generate a replacement for one section of one day."""
        return await self._complete(
            kind="section",
            system=prompts.SECTION_SYSTEM_PROMPT,
            prompt=prompts.build_section_prompt(params, day_number, label, day_markdown),
            max_tokens=SECTION_MAX_TOKENS,
        )

    async def generate_structured(self, params: TripParameters) -> str:
        """Generate the typed JSON itinerary in JSON mode."""
        return await self._complete(
            kind="structured",
            system=prompts.STRUCTURED_SYSTEM_PROMPT,
            prompt=prompts.build_structured_prompt(params),
            max_tokens=FULL_MAX_TOKENS,
            response_format={"type": "json_object"},
        )

    async def _complete(
        self,
        *,
        kind: str,
        system: str,
        prompt: str,
        max_tokens: int,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        """Run one chat completion and return its trimmed text.

        Raises:
            GenerationError: On API failure or empty output
        """
        extra: dict[str, Any] = {}
        if response_format is not None:
            extra["response_format"] = response_format

        start = time.perf_counter()
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=max_tokens,
                **extra,
            )
        except OpenAIError as e:
            latency_ms = (time.perf_counter() - start) * 1000
            logger.error(f"OpenAI API call failed: {e}")
            self._log.log_generation(
                kind, "error", latency_ms, self.model, error_reason=type(e).__name__
            )
            metrics.record_generation(kind, "error", latency_ms)
            raise GenerationError(str(e) or "generation failed") from e

        latency_ms = (time.perf_counter() - start) * 1000
        content = response.choices[0].message.content if response.choices else None
        text = (content or "").strip()

        if not text:
            self._log.log_generation(kind, "empty", latency_ms, self.model)
            metrics.record_generation(kind, "empty", latency_ms)
            raise GenerationError("empty result, try again")

        self._log.log_generation(kind, "success", latency_ms, self.model, output_chars=len(text))
        metrics.record_generation(kind, "success", latency_ms)
        return text


def get_llm_client(settings: Settings | None = None) -> ItineraryGenerator:
    """Factory function to get the generation client based on config.

    Raises:
        GenerationNotConfiguredError: If no OpenAI API key is configured
    """
    settings = settings or get_settings()
    api_key = settings.openai_api_key

    if not api_key or not api_key.get_secret_value():
        logger.warning("No OpenAI API key configured, generation unavailable")
        raise GenerationNotConfiguredError("OpenAI API key is not configured")

    return OpenAIClient(
        api_key=api_key.get_secret_value(),
        model=settings.openai_model,
        temperature=settings.openai_temperature,
    )
