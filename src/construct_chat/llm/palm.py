"""Google PaLM text-bison adapter with safety-filter settings."""

import logging

from .base import BaseProviderAdapter, CallContext
from .errors import EmptyOutputError, EmptyResponseError, ProviderReportedError, SafetyFilterError
from .types import GenerationRequest, GenerationResult, SamplingSettings

logger = logging.getLogger(__name__)

PALM_API_URL = "https://generativelanguage.googleapis.com/v1beta2"


def palm_sampling(sampling: SamplingSettings) -> dict:
    """Map sampling settings into PaLM's permitted ranges.

    Out-of-range values fall back to the provider default rather than being
    clamped to the boundary.
    """
    temperature = sampling.temperature
    top_p = sampling.top_p
    top_k = sampling.top_k
    return {
        "temperature": temperature if temperature is not None and temperature <= 1 else 1,
        "candidateCount": 1,
        "maxOutputTokens": sampling.or_default("max_length", 350),
        "topP": top_p if top_p is not None and 0 < top_p <= 1 else 0.9,
        "topK": top_k if top_k is not None and top_k >= 1 else 1,
    }


class PaLMAdapter(BaseProviderAdapter):
    """The profile endpoint string holds the Google API key."""

    label = "PaLM"

    async def send(self, request: GenerationRequest, ctx: CallContext) -> GenerationResult:
        payload = {
            "prompt": {"text": request.prompt},
            "safetySettings": ctx.profile.palm_filters.safety_settings(),
            **palm_sampling(ctx.sampling),
        }
        response = await self._post(
            ctx,
            f"{PALM_API_URL}/models/text-bison-001:generateText",
            payload,
            params={"key": ctx.profile.endpoint.strip()},
        )
        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None
        if not isinstance(body, dict) or not body:
            raise EmptyResponseError()
        error = body.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else None
            raise ProviderReportedError(message or str(error))
        if body.get("filters"):
            raise SafetyFilterError()

        candidates = body.get("candidates") or []
        output = candidates[0].get("output") if candidates else None
        if not output:
            raise EmptyOutputError()
        if len(candidates) > 1:
            logger.info("PaLM returned %d candidates; using the first", len(candidates))
        return GenerationResult(results=[output], prompt=request.prompt)

    async def status(self, endpoint: str, ctx: CallContext) -> str:
        try:
            response = await ctx.token.run(
                ctx.client.get(f"{PALM_API_URL}/models", params={"key": endpoint.strip()})
            )
        except Exception as e:
            logger.info("PaLM status probe failed: %s", e)
            return "PaLM endpoint is not responding."
        try:
            models = response.json().get("models") or []
            valid = bool(models and models[0].get("name"))
        except ValueError:
            valid = False
        return "PaLM endpoint is steady. Key is valid." if valid else "PaLM key is invalid."
