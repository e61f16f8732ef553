"""Shared HTTP plumbing for self-hosted inference servers.

Local backends are reached with one httpx.AsyncClient per provider. This
module converts every transport-level outcome into either parsed JSON or a
ProviderError, so concrete providers only deal with payload shapes.
"""

from __future__ import annotations

from typing import Any

import httpx

from advisor.llm.base import BaseLLMProvider
from advisor.utils.exceptions import ProviderError, ProviderTimeoutError
from advisor.utils.logging import get_provider_logger


class HTTPLLMProvider(BaseLLMProvider):
    """Base class for providers that speak JSON over HTTP."""

    DEFAULT_BASE_URL = "http://localhost"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        models: list[str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the HTTP provider.

        Args:
            api_key: Optional bearer token sent as Authorization header.
            base_url: Server base URL. Defaults to DEFAULT_BASE_URL.
            timeout: Request timeout in seconds.
            models: Models this server exposes, preferred first.
            transport: Optional httpx transport (used by tests).
            **kwargs: Additional configuration.
        """
        resolved_base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        super().__init__(
            api_key=api_key,
            base_url=resolved_base_url,
            timeout=timeout,
            models=models,
            **kwargs,
        )

        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        self._client = httpx.AsyncClient(
            base_url=resolved_base_url,
            timeout=httpx.Timeout(timeout),
            headers=headers,
            transport=transport,
        )
        self._log = get_provider_logger(self.provider_name)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _post_json(
        self,
        path: str,
        payload: dict[str, Any],
        model: str | None = None,
    ) -> Any:
        """POST a JSON payload and return the decoded reply.

        Raises:
            ProviderTimeoutError: When the request exceeds the timeout.
            ProviderError: On network errors, non-2xx statuses or invalid JSON.
        """
        try:
            response = await self._client.post(path, json=payload)
        except httpx.TimeoutException as e:
            self._log.warning("LLM request timed out", path=path, model=model)
            raise ProviderTimeoutError(
                self._timeout, provider=self.provider_name, model=model, cause=e
            ) from e
        except httpx.HTTPError as e:
            self._log.warning(
                "LLM request failed", path=path, model=model, error=str(e)
            )
            raise ProviderError(
                f"{self.display_name} request failed: {e}",
                provider=self.provider_name,
                model=model,
                cause=e,
            ) from e

        if not response.is_success:
            body = response.text[:200]
            self._log.warning(
                "LLM backend returned error status",
                path=path,
                model=model,
                status_code=response.status_code,
            )
            raise ProviderError(
                f"{self.display_name} error: {response.status_code} {body}".strip(),
                provider=self.provider_name,
                status_code=response.status_code,
                model=model,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                f"{self.display_name} returned malformed JSON",
                provider=self.provider_name,
                status_code=response.status_code,
                model=model,
                cause=e,
            ) from e

    async def _probe(self, path: str) -> bool:
        """Issue a lightweight GET and report whether it succeeded."""
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as e:
            self._log.debug("Health probe failed", path=path, error=str(e))
            return False
        return response.is_success

    def _malformed(self, reason: str, model: str | None, raw: Any) -> ProviderError:
        self._log.warning("Malformed LLM reply", reason=reason, model=model)
        return ProviderError(
            f"{self.display_name} returned a malformed reply: {reason}",
            provider=self.provider_name,
            model=model,
            cause=ValueError(repr(raw)[:200]),
        )
