"""HTTP client for the generative text API (generateContent endpoint)."""

import logging

import httpx

from ophelia_market.common.exceptions import (
    ContentNotConfiguredError,
    UpstreamBillingError,
    UpstreamRateLimitError,
    UpstreamServiceError,
)
from ophelia_market.content.prompts import GenerationParams

logger = logging.getLogger(__name__)


class GenerativeClient:
    """Sends one prompt, returns the first candidate's text.

    Upstream statuses map onto the exception hierarchy: 429 becomes
    UpstreamRateLimitError, 402 UpstreamBillingError, anything else
    UpstreamServiceError. No retries.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._http_client = http_client

    def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy-init httpx.AsyncClient."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def generate(
        self,
        prompt: str,
        params: GenerationParams,
        failure_message: str = "AI service request failed",
    ) -> str:
        if not self.configured:
            logger.error("Content API key is not configured")
            raise ContentNotConfiguredError()

        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": params.to_payload(),
        }
        try:
            resp = await self._get_http_client().post(
                url,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.error("Content API unreachable: %s", exc)
            raise UpstreamServiceError(failure_message) from exc

        if resp.status_code >= 400:
            logger.error(
                "Content API error",
                extra={"context": {"status": resp.status_code, "body": resp.text[:500]}},
            )
            if resp.status_code == 429:
                raise UpstreamRateLimitError()
            if resp.status_code == 402:
                raise UpstreamBillingError()
            raise UpstreamServiceError(failure_message)

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamServiceError(failure_message) from exc
        return extract_text(data)

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


def extract_text(data: dict) -> str:
    """candidates[0].content.parts[0].text, or '' when any level is missing."""
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"] or ""
    except (KeyError, IndexError, TypeError):
        return ""
