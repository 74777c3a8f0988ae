"""Abstract base class for provider adapters."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .cancellation import CancellationToken
from .types import ConnectionProfile, GenerationRequest, GenerationResult, SamplingSettings

logger = logging.getLogger(__name__)

# Placeholder speaker used by the chat-completion style system prompts
CHARACTER_PLACEHOLDER = "Character"


@dataclass
class CallContext:
    """Everything an adapter needs for one call besides the request itself."""
    profile: ConnectionProfile
    sampling: SamplingSettings
    client: httpx.AsyncClient
    token: CancellationToken


def endpoint_origin(endpoint: str) -> str:
    """Reduce an endpoint URL to scheme://host[:port], dropping any path."""
    raw = (endpoint or "").strip()
    if "://" not in raw:
        raw = f"http://{raw}"
    url = httpx.URL(raw)
    host = f"[{url.host}]" if ":" in url.host else url.host
    port = f":{url.port}" if url.port else ""
    return f"{url.scheme}://{host}{port}"


def roleplay_instruction(participant: str, char: str = CHARACTER_PLACEHOLDER) -> str:
    return (
        f"Write {char}'s next reply in a fictional chat between {char} and {participant}. "
        "Write 1 reply only in internet RP style, italicize actions, and avoid quotation marks. "
        "Use markdown. Be proactive, creative, and drive the plot and conversation forward. "
        "Write at least 1 sentence, up to 4. Always stay in character and avoid repetition."
    )


class BaseProviderAdapter(ABC):
    """Abstract interface for generation backends.

    One capability: send one generation request and return text or a
    soft-failure envelope. Transport errors propagate as `httpx` exceptions.
    """

    #: Human-readable name used in log lines and status messages
    label: str = "Provider"

    @abstractmethod
    async def send(self, request: GenerationRequest, ctx: CallContext) -> GenerationResult:
        """Generate a completion for `request`.

        Args:
            request: Canonical request with `stops` already composed.
            ctx: Active profile, sampling settings, HTTP client and cancellation token.

        Returns:
            A `GenerationResult`; `results` is None for recognized soft failures.
        """
        ...

    @abstractmethod
    async def status(self, endpoint: str, ctx: CallContext) -> str:
        """Probe the provider and describe its state in one short sentence.

        May raise; the gateway converts any failure into an apology string.
        """
        ...

    async def _post(
        self,
        ctx: CallContext,
        url: str,
        payload: dict,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        response = await ctx.token.run(
            ctx.client.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json", **(headers or {})},
                params=params,
            )
        )
        response.raise_for_status()
        return response

    async def _get(
        self,
        ctx: CallContext,
        url: str,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        response = await ctx.token.run(ctx.client.get(url, headers=headers, params=params))
        response.raise_for_status()
        return response

    @staticmethod
    def _unexpected(body: Any, prompt: str) -> GenerationResult:
        logger.warning("Unexpected provider response shape: %.200r", body)
        return GenerationResult(results=None, error=body, prompt=prompt)
