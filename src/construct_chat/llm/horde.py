"""AI Horde adapter: enqueue a text job, then poll until it finishes.

Processing flow:
    1. POST the prompt and Kobold-style params to `/v2/generate/text/async`.
    2. Poll `/v2/generate/text/status/{id}` on a fixed interval.
    3. On `done` with `finished > 0`, fetch the status once more and return
       the first generation's text.
    4. If the Horde reports the job is not possible, return a fixed message.

The poll loop is bounded by a maximum number of attempts and a wall-clock
deadline; exceeding either raises `GenerationTimeout`. The cancellation token
is checked at every poll boundary.
"""

import logging
import time

from .base import BaseProviderAdapter, CallContext
from .errors import GenerationTimeout
from .kobold import kobold_params
from .types import ANONYMOUS_HORDE_KEY, GenerationRequest, GenerationResult

logger = logging.getLogger(__name__)

HORDE_NOT_POSSIBLE = "**Horde:** Request is not possible, try another model or worker."


class HordeAdapter(BaseProviderAdapter):
    """Distributed volunteer-worker text generation.

    The profile endpoint string holds the Horde API key. An empty key falls
    back to the anonymous key, and anonymous requests opt into slow workers.
    """

    label = "Horde"

    def __init__(
        self,
        api_url: str = "https://aihorde.net/api",
        poll_interval: float = 5.0,
        max_polls: int = 120,
        deadline_seconds: float = 900.0,
    ):
        self.api_url = api_url.rstrip("/")
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self.deadline_seconds = deadline_seconds

    @staticmethod
    def api_key(ctx: CallContext) -> str:
        return ctx.profile.endpoint.strip() or ANONYMOUS_HORDE_KEY

    def build_payload(self, request: GenerationRequest, ctx: CallContext) -> dict:
        key = self.api_key(ctx)
        return {
            "prompt": request.prompt,
            "params": kobold_params(ctx.sampling, request.stops, rep_pen_range=512),
            "models": [ctx.profile.horde_model],
            "slow_workers": key == ANONYMOUS_HORDE_KEY,
        }

    async def send(self, request: GenerationRequest, ctx: CallContext) -> GenerationResult:
        headers = {"apikey": self.api_key(ctx)}
        response = await self._post(
            ctx, f"{self.api_url}/v2/generate/text/async", self.build_payload(request, ctx), headers=headers
        )
        task_id = response.json().get("id")
        if not task_id:
            return self._unexpected(response.json(), request.prompt)
        logger.info("Horde job %s queued", task_id)

        status_url = f"{self.api_url}/v2/generate/text/status/{task_id}"
        started = time.monotonic()
        for attempt in range(1, self.max_polls + 1):
            await ctx.token.sleep(self.poll_interval)
            status = (await self._get(ctx, status_url, headers=headers)).json()
            logger.debug("Horde job %s poll %d: %s", task_id, attempt, status)

            if status.get("done") is True and (status.get("finished") or 0) > 0:
                final = (await self._get(ctx, status_url, headers=headers)).json()
                try:
                    text = final["generations"][0]["text"]
                except (KeyError, IndexError, TypeError):
                    return self._unexpected(final, request.prompt)
                return GenerationResult(results=[text], prompt=request.prompt)
            if status.get("is_possible") is False:
                logger.info("Horde job %s is not possible", task_id)
                return GenerationResult(results=[HORDE_NOT_POSSIBLE], prompt=request.prompt)
            if time.monotonic() - started > self.deadline_seconds:
                break

        raise GenerationTimeout(f"Horde job {task_id} did not finish in time.")

    async def status(self, endpoint: str, ctx: CallContext) -> str:
        response = await ctx.token.run(ctx.client.get(f"{self.api_url}/v2/status/heartbeat"))
        if response.status_code == 200:
            return "Horde heartbeat is steady."
        return "Horde heartbeat failed."
