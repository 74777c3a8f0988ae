"""Generation gateway: the single entry point for text generation.

Model invocation flow:
    `generate(prompt, ...)` -> prompt cleanup -> stop composition -> profile
    resolution -> pre-flight -> `cancel_and_replace` -> registry adapter
    `send(...)` -> `GenerationResult`.

Failure handling:
    - Configuration problems (endpoint too short) return a soft envelope.
    - Transport failures (`httpx.HTTPError`) propagate; there is no retry.
    - `ProviderResponseError` becomes a soft envelope carrying its message.
    - Status probes never raise.
"""

import logging
from typing import Optional, Union

import httpx

from ..prompting.prompt import assemble_instruct_prompt
from ..prompting.stops import compose_stop_list
from ..store import SettingsStore
from .base import BaseProviderAdapter, CallContext
from .cancellation import CancellationScope
from .errors import ProviderResponseError
from .registry import build_registry
from .types import GenerationRequest, GenerationResult, Persona, ProviderKind

logger = logging.getLogger(__name__)

INVALID_ENDPOINT = "Invalid endpoint."
NO_VALID_RESPONSE = "No valid response from LLM."
STATUS_APOLOGY = "There was an issue checking the endpoint status. Please try again."


def clean_prompt(prompt: str) -> str:
    """Drop HTML line breaks and backslashes, and collapse blank lines once."""
    prompt = str(prompt).replace("<br>", "").replace("\\", "")
    return prompt.replace("\n\n", "\n")


class GenerationGateway:
    """Selects the active adapter and enforces one in-flight generation.

    Args:
        store: Settings snapshot source, read at call time.
        adapters: Provider registry; defaults to `build_registry()`.
        client: Shared HTTP client; created lazily when not given.
        timeout: Per-request timeout for the lazily created client.
    """

    def __init__(
        self,
        store: SettingsStore,
        adapters: Optional[dict[ProviderKind, BaseProviderAdapter]] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 120.0,
    ):
        self.store = store
        self.adapters = adapters if adapters is not None else build_registry()
        self.timeout = timeout
        self._client = client
        self.generation_scope = CancellationScope("generation")
        self.status_scope = CancellationScope("status")

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    def adapter_for(self, kind: ProviderKind) -> BaseProviderAdapter:
        return self.adapters.get(kind) or self.adapters[ProviderKind.KOBOLD]

    async def generate(
        self,
        prompt: str,
        participant: str = "You",
        stop_list: Optional[list[str]] = None,
        persona: Optional[Persona] = None,
    ) -> GenerationResult:
        """Generate one completion with the current connection profile.

        Starting a call cancels the previous one outright.

        Raises:
            httpx.HTTPError: transport failure or non-2xx response.
            GenerationCancelled: this call was superseded or cancelled.
            GenerationTimeout: a polled job exceeded its budget.
        """
        prompt = clean_prompt(prompt)
        profile = self.store.current_profile()
        kind = profile.endpoint_type

        if len(profile.endpoint) < 3 and kind is not ProviderKind.HORDE:
            logger.warning("Refusing generation: endpoint is not configured")
            return GenerationResult(results=None, error=INVALID_ENDPOINT, prompt=prompt)

        request = GenerationRequest(
            prompt=prompt,
            participant=participant,
            stop_list=stop_list,
            persona=persona,
        )
        request.stops = compose_stop_list(participant, stop_list, persona, self.store.stop_brackets)

        adapter = self.adapter_for(kind)
        token = self.generation_scope.cancel_and_replace()
        ctx = CallContext(
            profile=profile,
            sampling=self.store.sampling,
            client=await self._get_client(),
            token=token,
        )
        logger.info("Generating with %s (profile %s)", adapter.label, profile.name)
        try:
            result = await adapter.send(request, ctx)
        except ProviderResponseError as e:
            logger.warning("%s soft failure: %s", adapter.label, e)
            return GenerationResult(results=None, error=str(e), prompt=prompt)
        if not result.ok:
            logger.info("%s returned no results", adapter.label)
        return result

    def cancel_generation(self) -> bool:
        return self.generation_scope.cancel()

    async def get_status(self, endpoint: Optional[str] = None, endpoint_type: Optional[str] = None) -> str:
        """Probe the given (or current) endpoint; always returns a short message."""
        profile = self.store.current_profile()
        endpoint = endpoint or self.store.endpoint
        kind = ProviderKind.parse(endpoint_type) if endpoint_type else self.store.endpoint_type
        adapter = self.adapter_for(kind)
        ctx = CallContext(
            profile=profile,
            sampling=self.store.sampling,
            client=await self._get_client(),
            token=self.status_scope.cancel_and_replace(),
        )
        try:
            return await adapter.status(endpoint, ctx)
        except Exception as e:
            logger.info("%s status check failed: %s", adapter.label, e)
            return STATUS_APOLOGY

    async def do_instruct(
        self,
        instruction: str,
        guidance: Optional[str] = None,
        context: Optional[str] = None,
        examples: Union[list[str], str, None] = None,
    ) -> str:
        prompt = assemble_instruct_prompt(instruction, guidance, context, examples)
        result = await self.generate(prompt)
        if result.text is None:
            return NO_VALID_RESPONSE
        return result.text
