import httpx
import pytest

from construct_chat.llm.gateway import GenerationGateway
from construct_chat.llm.horde import HordeAdapter
from construct_chat.llm.registry import build_registry
from construct_chat.llm.types import ProviderKind
from construct_chat.store import SettingsStore

HORDE_TEST_URL = "https://horde.test/api"


@pytest.fixture
def store():
    return SettingsStore(None)


@pytest.fixture
def make_gateway(store):
    """Build a gateway whose HTTP traffic goes to `handler`."""

    def factory(handler, horde_max_polls=3, horde_poll_interval=0, horde_deadline_seconds=900.0, **values):
        for key, value in values.items():
            store.set(key, value)
        adapters = build_registry()
        adapters[ProviderKind.HORDE] = HordeAdapter(
            api_url=HORDE_TEST_URL,
            poll_interval=horde_poll_interval,
            max_polls=horde_max_polls,
            deadline_seconds=horde_deadline_seconds,
        )
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return GenerationGateway(store, adapters=adapters, client=client)

    return factory
