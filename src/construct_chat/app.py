"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s", datefmt="%H:%M:%S")
from fastapi import FastAPI

from . import __version__
from .config import settings
from .llm.gateway import GenerationGateway
from .llm.registry import build_registry
from .routes import constructs, llm as llm_routes
from .store import SettingsStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - loads settings and owns the HTTP client."""
    store = SettingsStore(settings.settings_path).load()
    gateway = GenerationGateway(
        store,
        adapters=build_registry(settings),
        timeout=settings.request_timeout,
    )
    profile = store.current_profile()
    logger.info("Active connection: %s (%s)", profile.name, profile.endpoint_type.value)

    # Wire the gateway into the routes modules
    llm_routes.set_gateway(gateway)

    yield

    # Shutdown
    await gateway.close()
    logger.info("Generation gateway closed")


app = FastAPI(lifespan=lifespan)

# Include route modules
app.include_router(llm_routes.router)
app.include_router(constructs.router)


@app.get("/")
async def home():
    return {"name": "construct-chat", "version": __version__}
