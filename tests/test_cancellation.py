import asyncio

import pytest

from construct_chat.llm.cancellation import CANCEL_REASON, CancellationScope, CancellationToken
from construct_chat.llm.errors import GenerationCancelled


def test_scope_replaces_and_cancels_previous():
    scope = CancellationScope("generation")
    first = scope.cancel_and_replace()
    second = scope.cancel_and_replace()

    assert first.cancelled
    assert first.reason == CANCEL_REASON
    assert not second.cancelled
    assert scope.current is second


def test_scope_cancel_reports_whether_anything_was_cancelled():
    scope = CancellationScope()
    assert scope.cancel() is False
    scope.cancel_and_replace()
    assert scope.cancel() is True
    assert scope.cancel() is False


def test_cancelled_token_refuses_new_work():
    token = CancellationToken()
    token.cancel()

    async def work():
        return "never"

    with pytest.raises(GenerationCancelled):
        asyncio.run(token.run(work()))


def test_cancel_interrupts_running_work():
    async def scenario():
        token = CancellationToken()
        task = asyncio.create_task(token.sleep(30))
        await asyncio.sleep(0)
        token.cancel("stopped")
        with pytest.raises(GenerationCancelled, match="stopped"):
            await task

    asyncio.run(scenario())


def test_run_returns_result():
    async def work():
        return 42

    assert asyncio.run(CancellationToken().run(work())) == 42
