"""LLM gateway: tiered chat-completion client with credential rotation.

The turn pipeline injects a gateway callable matching the protocol:

    async def __call__(self, prompt: str, system_prompt: str, tier: str) -> str | None: ...

`tier` picks one of two OpenAI-compatible endpoints:

    fast: small model, low token budget, JSON output mode. Used once per NPC
          per turn for structured decisions.
    deep: larger model, higher token budget, free prose. Used for the
          end-of-turn narrative summary.

Each tier owns a KeyRotation over its own credential pool. Every call
advances that tier's rotation by one, whether or not the request succeeds.

The gateway never raises. Transport errors, non-2xx responses, timeouts and
malformed envelopes are logged and turned into None; callers treat None as
"no decision" and fall back to defaults.

Production code builds the gateway with LLMGateway.from_config(). Tests patch
httpx.AsyncClient.post or pass an AsyncMock in place of the gateway.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Literal, Protocol

import httpx

logger = logging.getLogger(__name__)

Tier = Literal["fast", "deep"]

KEY_ENV_VARS: dict[str, str] = {"fast": "FAST_KEYS", "deep": "DEEP_KEYS"}


# ---------------------------------------------------------------------------
# Protocol: every gateway implementation must match this signature
# ---------------------------------------------------------------------------

class LLM(Protocol):
    async def __call__(
        self, prompt: str, system_prompt: str, tier: Tier = "fast"
    ) -> str | None: ...


# ---------------------------------------------------------------------------
# KeyRotation: round-robin over a credential pool
# ---------------------------------------------------------------------------

class KeyRotation:
    """Cycles through API keys in order, starting at `offset`.

    An empty pool yields None; the counter still advances so usage stays
    deterministic once keys are configured.
    """

    def __init__(self, keys: list[str], offset: int = 0) -> None:
        self._keys = [k for k in keys if k]
        self._counter = offset

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def counter(self) -> int:
        return self._counter

    def next(self) -> str | None:
        index = self._counter
        self._counter += 1
        if not self._keys:
            return None
        return self._keys[index % len(self._keys)]


def keys_from_env(var: str) -> list[str]:
    """Split a comma-separated key list from the environment."""
    return [k.strip() for k in os.getenv(var, "").split(",") if k.strip()]


# ---------------------------------------------------------------------------
# LLMGateway: two tiers, one HTTP shape
# ---------------------------------------------------------------------------

class LLMGateway:
    """Async client for OpenAI-compatible /chat/completions endpoints.

    Args:
        tiers:     {"fast": {...}, "deep": {...}} tier settings with url, model,
                   temperature, max_tokens, json_mode and timeout.
        rotations: {"fast": KeyRotation, "deep": KeyRotation}.
    """

    def __init__(self, tiers: dict[str, dict[str, Any]], rotations: dict[str, KeyRotation]) -> None:
        self._tiers = tiers
        self._rotations = rotations

    @classmethod
    def from_config(cls, config: dict[str, Any], offset: int = 0) -> LLMGateway:
        rotations = {
            tier: KeyRotation(keys_from_env(var), offset=offset)
            for tier, var in KEY_ENV_VARS.items()
        }
        return cls(config["tiers"], rotations)

    @property
    def tiers(self) -> dict[str, dict[str, Any]]:
        return self._tiers

    def rotation(self, tier: Tier) -> KeyRotation:
        return self._rotations[tier]

    def configure(self, tiers: dict[str, dict[str, Any]]) -> None:
        """Swap tier settings without resetting key rotation."""
        self._tiers = tiers

    def _build_request(
        self, tier: Tier, prompt: str, system_prompt: str
    ) -> tuple[str, dict[str, Any]]:
        """Return (url, body) for the tier."""
        settings = self._tiers[tier]
        body: dict[str, Any] = {
            "model": settings["model"],
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": settings.get("temperature", 0.7),
            "max_tokens": settings.get("max_tokens", 800),
        }
        if settings.get("json_mode"):
            body["response_format"] = {"type": "json_object"}
        return settings["url"], body

    @staticmethod
    def _headers(api_key: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    @staticmethod
    def _parse_response(data: Any) -> str:
        """Extract choices[0].message.content from the response body."""
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMError("Unexpected response format from chat-completion backend") from e
        if not isinstance(content, str):
            raise LLMError("Chat-completion content is not text")
        return content

    async def _post(self, tier: Tier, api_key: str, prompt: str, system_prompt: str) -> str:
        url, body = self._build_request(tier, prompt, system_prompt)
        timeout = self._tiers[tier].get("timeout", 30)
        logger.debug(
            "llm call tier=%s model=%s prompt_len=%d", tier, body["model"], len(prompt)
        )

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                resp = await client.post(url, json=body, headers=self._headers(api_key))
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise LLMError(f"Cannot connect to {tier} backend at {url}") from e
        except httpx.HTTPStatusError as e:
            raise LLMError(
                f"{tier} backend returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise LLMError(f"{tier} backend timed out after {timeout}s") from e
        except httpx.HTTPError as e:
            raise LLMError(f"{tier} backend transport error: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMError(f"{tier} backend returned a non-JSON body") from e

        text = self._parse_response(data)
        logger.debug("llm response tier=%s len=%d", tier, len(text))
        return text

    async def __call__(
        self, prompt: str, system_prompt: str, tier: Tier = "fast"
    ) -> str | None:
        api_key = self._rotations[tier].next()
        if api_key is None:
            logger.warning("No API keys configured for %s tier (set %s)", tier, KEY_ENV_VARS[tier])
            return None
        try:
            return await self._post(tier, api_key, prompt, system_prompt)
        except LLMError as e:
            logger.warning("AI call failed (%s): %s", tier, e)
            return None


# ---------------------------------------------------------------------------
# LLMError: raised inside the gateway, converted to None at its boundary
# ---------------------------------------------------------------------------

class LLMError(RuntimeError):
    """Raised when a backend cannot be reached or returns an unusable reply."""
