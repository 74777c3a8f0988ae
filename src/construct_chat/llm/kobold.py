"""KoboldAI United / KoboldCpp adapter."""

import logging

from .base import BaseProviderAdapter, CallContext, endpoint_origin
from .types import DEFAULT_SAMPLER_ORDER, GenerationRequest, GenerationResult, SamplingSettings

logger = logging.getLogger(__name__)


def kobold_params(sampling: SamplingSettings, stops: list[str], rep_pen_range: int = 0) -> dict:
    """Kobold-style sampler block, shared with the Horde job payload."""
    s = sampling
    return {
        "stop_sequence": stops,
        "frmtrmblln": False,
        "rep_pen": s.or_default("rep_pen", 1.0),
        "rep_pen_range": s.or_default("rep_pen_range", rep_pen_range),
        "temperature": s.or_default("temperature", 0.9),
        "sampler_order": s.or_default("sampler_order", list(DEFAULT_SAMPLER_ORDER)),
        "top_k": s.or_default("top_k", 0),
        "top_p": s.or_default("top_p", 0.9),
        "top_a": s.or_default("top_a", 0),
        "tfs": s.or_default("tfs", 0),
        "typical": s.or_default("typical", 0.9),
        "singleline": s.or_default("singleline", False),
        "sampler_full_determinism": s.or_default("sampler_full_determinism", False),
        "max_length": s.or_default("max_length", 350),
    }


class KoboldAdapter(BaseProviderAdapter):
    label = "Kobold"

    async def send(self, request: GenerationRequest, ctx: CallContext) -> GenerationResult:
        url = f"{endpoint_origin(ctx.profile.endpoint)}/api/v1/generate"
        payload = {"prompt": request.prompt, **kobold_params(ctx.sampling, request.stops)}
        response = await self._post(ctx, url, payload)
        body = response.json()
        try:
            text = body["results"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return self._unexpected(body, request.prompt)
        return GenerationResult(results=[text], prompt=request.prompt)

    async def status(self, endpoint: str, ctx: CallContext) -> str:
        try:
            response = await self._get(ctx, f"{endpoint_origin(endpoint)}/api/v1/model")
            return response.json()["result"]
        except Exception as e:
            logger.info("Kobold status probe failed: %s", e)
            return "Kobold endpoint is not responding."
