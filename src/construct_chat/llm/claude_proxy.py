"""Anthropic text-completion adapters reached through a reverse proxy."""

import logging

from .base import BaseProviderAdapter, CallContext, endpoint_origin, roleplay_instruction, CHARACTER_PLACEHOLDER
from .types import GenerationRequest, GenerationResult

logger = logging.getLogger(__name__)


def claude_prompt(prompt: str, participant: str, char: str = CHARACTER_PLACEHOLDER) -> str:
    return (
        f"\n\nHuman:\n{roleplay_instruction(participant, char)}\n{prompt}"
        f"\n\nAssistant: Okay, here is my response as {char}:"
    )


class ProxyClaudeAdapter(BaseProviderAdapter):
    """Claude via the proxy's Anthropic route, authenticated with `x-api-key`."""

    label = "P-Claude"
    path_prefix = "/proxy/anthropic/v1"

    async def send(self, request: GenerationRequest, ctx: CallContext) -> GenerationResult:
        s = ctx.sampling
        payload = {
            "model": ctx.profile.claude_model or "claude-instant-v1",
            "prompt": claude_prompt(request.prompt, request.participant),
            "temperature": s.or_default("temperature", 0.9),
            "top_p": s.or_default("top_p", 0.9),
            "top_k": s.or_default("top_k", 0),
            "max_tokens_to_sample": s.or_default("max_length", 350),
            "stop_sequences": request.stop_list or [f"{request.participant}:"],
        }
        url = f"{endpoint_origin(ctx.profile.endpoint)}{self.path_prefix}/complete"
        response = await self._post(ctx, url, payload, headers={"x-api-key": ctx.profile.password.strip()})
        body = response.json()
        text = self._completion_text(body)
        if not text:
            return self._unexpected(body, request.prompt)
        return GenerationResult(results=[text], prompt=request.prompt)

    @staticmethod
    def _completion_text(body) -> str | None:
        if not isinstance(body, dict):
            return None
        if body.get("completion"):
            return body["completion"]
        # Some proxies wrap completions in an OpenAI-style envelope
        try:
            return body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None

    async def status(self, endpoint: str, ctx: CallContext) -> str:
        try:
            response = await self._get(
                ctx,
                f"{endpoint_origin(endpoint)}{self.path_prefix}/models",
                headers={"x-api-key": ctx.profile.password.strip()},
            )
            models = response.json().get("data") or []
        except Exception as e:
            logger.info("%s status probe failed: %s", self.label, e)
            return "Proxy status failed."
        return "Proxy status is steady." if models else "Proxy status failed."


class ProxyAWSClaudeAdapter(ProxyClaudeAdapter):
    """Claude hosted on AWS Bedrock, via the proxy's AWS route."""

    label = "P-AWS-Claude"
    path_prefix = "/proxy/aws/claude/v1"
