"""Adapters for OpenAI-style text-completion servers (text-generation-webui, Aphrodite)."""

import logging

from .base import BaseProviderAdapter, CallContext, endpoint_origin
from .types import GenerationRequest, GenerationResult, SamplingSettings

logger = logging.getLogger(__name__)


def textgen_params(sampling: SamplingSettings, stops: list[str]) -> dict:
    """Sampler fields common to both text-completion servers."""
    s = sampling
    return {
        "max_tokens": s.or_default("max_length", 350),
        "temperature": s.or_default("temperature", 0.9),
        "top_p": s.or_default("top_p", 0.9),
        "typical_p": s.or_default("typical", 0.9),
        "tfs": s.or_default("tfs", 0),
        "top_a": s.or_default("top_a", 0),
        "repetition_penalty": s.or_default("rep_pen", 1.0),
        "repetition_penalty_range": s.or_default("rep_pen_range", 0),
        "top_k": s.or_default("top_k", 0),
        "ban_eos_token": False,
        "stopping_strings": stops,
        "frequency_penalty": s.or_default("frequency_penalty", 0),
        "presence_penalty": s.or_default("presence_penalty", 0),
        "mirostat_mode": s.or_default("mirostat_mode", False),
        "mirostat_tau": s.or_default("mirostat_tau", 0.0),
        "mirostat_eta": s.or_default("mirostat_eta", 0.0),
    }


def _first_choice_text(body) -> str:
    return body["choices"][0]["text"]


def _list_model_ids(body) -> str:
    return ", ".join(model["id"] for model in body["data"])


class OobaAdapter(BaseProviderAdapter):
    """text-generation-webui through its OpenAI-compatible completions route."""

    label = "Ooba"

    async def send(self, request: GenerationRequest, ctx: CallContext) -> GenerationResult:
        s = ctx.sampling
        payload = {
            "prompt": request.prompt,
            **textgen_params(s, request.stops),
            "min_length": s.or_default("min_length", 0),
            "truncation_length": s.or_default("max_context_length", 2048),
            "add_bos_token": True,
            "skip_special_tokens": True,
        }
        url = f"{endpoint_origin(ctx.profile.endpoint)}/v1/completions"
        response = await self._post(ctx, url, payload)
        body = response.json()
        try:
            text = _first_choice_text(body)
        except (KeyError, IndexError, TypeError):
            return self._unexpected(body, request.prompt)
        return GenerationResult(results=[text], prompt=request.prompt)

    async def status(self, endpoint: str, ctx: CallContext) -> str:
        try:
            response = await self._get(ctx, f"{endpoint_origin(endpoint)}/v1/models")
            return _list_model_ids(response.json())
        except Exception as e:
            logger.info("Ooba status probe failed: %s", e)
            return "Ooba endpoint is not responding."


class AphroditeAdapter(BaseProviderAdapter):
    label = "Aphrodite"

    async def send(self, request: GenerationRequest, ctx: CallContext) -> GenerationResult:
        payload = {
            "prompt": request.prompt,
            "stream": False,
            **textgen_params(ctx.sampling, request.stops),
        }
        url = f"{endpoint_origin(ctx.profile.endpoint)}/v1/generate"
        response = await self._post(ctx, url, payload, headers={"x-api-key": ctx.profile.password})
        body = response.json()
        try:
            text = _first_choice_text(body)
        except (KeyError, IndexError, TypeError):
            return self._unexpected(body, request.prompt)
        return GenerationResult(results=[text], prompt=request.prompt)

    async def status(self, endpoint: str, ctx: CallContext) -> str:
        try:
            response = await self._get(ctx, f"{endpoint_origin(endpoint)}/v1/model")
            return _list_model_ids(response.json())
        except Exception as e:
            logger.info("Aphrodite status probe failed: %s", e)
            return "Aphrodite endpoint is not responding."
