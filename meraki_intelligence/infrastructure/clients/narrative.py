"""Generative-text collaborator used only to enrich narrative fields"""

import json
import logging
import re
from typing import Any, Dict, Optional, Protocol

import httpx

from meraki_intelligence.config import settings
from meraki_intelligence.domain.exceptions import NarrativeProviderError
from meraki_intelligence.infrastructure.observability.metrics import narrative_latency_histogram

logger = logging.getLogger(__name__)

_JSON_BLOCK = re.compile(r"\{.*\}", re.S)


class NarrativeProvider(Protocol):
    """Capability interface the analytics core depends on"""

    def is_available(self) -> bool: ...

    async def generate_text(self, prompt: str) -> str: ...

    async def generate_json(self, prompt: str) -> Optional[Dict[str, Any]]: ...


def safe_parse_json(text: str) -> Optional[Dict[str, Any]]:
    """Parse a JSON object from model output, tolerating prose around it"""
    if not text:
        return None
    text = text.strip()
    try:
        parsed = json.loads(text)
    except ValueError:
        match = _JSON_BLOCK.search(text)
        if not match:
            return None
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            return None
    return parsed if isinstance(parsed, dict) else None


class OfflineNarrativeProvider:
    """Provider used when no generative service is configured"""

    def is_available(self) -> bool:
        return False

    async def generate_text(self, prompt: str) -> str:
        logger.warning("Narrative text requested in offline mode")
        return ""

    async def generate_json(self, prompt: str) -> Optional[Dict[str, Any]]:
        logger.warning("Narrative JSON requested in offline mode")
        return None


class HttpNarrativeClient:
    """Client for an HTTP text-generation endpoint"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.narrative_api_base
        self.api_key = api_key or settings.narrative_api_key
        self.timeout = timeout or settings.narrative_timeout_seconds
        self.transport = transport

    def is_available(self) -> bool:
        return bool(self.base_url)

    async def _generate(self, prompt: str, output_format: str) -> str:
        """
        POST the prompt and return the generated text.

        Raises:
            NarrativeProviderError: On timeout, HTTP errors, or invalid response
        """
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with narrative_latency_histogram.time():
                    response = await client.post(
                        f"{self.base_url}/generate",
                        json={"prompt": prompt, "format": output_format},
                        headers=headers,
                    )
                response.raise_for_status()
                text = response.json()["text"]
                if not isinstance(text, str):
                    raise TypeError("text field is not a string")
                return text

            except httpx.TimeoutException as e:
                raise NarrativeProviderError(f"Narrative service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise NarrativeProviderError(f"Narrative service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise NarrativeProviderError(f"Narrative service unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise NarrativeProviderError(f"Invalid response from narrative service: {e}") from e

    async def generate_text(self, prompt: str) -> str:
        return await self._generate(prompt, "text")

    async def generate_json(self, prompt: str) -> Optional[Dict[str, Any]]:
        return safe_parse_json(await self._generate(prompt, "json"))


def get_narrative_provider() -> NarrativeProvider:
    """Provide the configured collaborator, offline when no endpoint is set"""
    if settings.narrative_api_base:
        return HttpNarrativeClient()
    return OfflineNarrativeProvider()
