"""Generation, status and LLM settings endpoints."""

import logging
from typing import Any, Literal, Optional, Union

import httpx
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..llm.errors import GenerationCancelled, GenerationTimeout
from ..llm.gateway import GenerationGateway
from ..llm.types import Persona
from ..prompting.prompt import assemble_instruct_prompt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["llm"])


def get_gateway() -> GenerationGateway:
    """Get the gateway from module state. Set at app startup."""
    return _gateway


_gateway: GenerationGateway = None  # type: ignore


def set_gateway(gateway: GenerationGateway):
    global _gateway
    _gateway = gateway


class GenerateTextBody(BaseModel):
    prompt: str
    configuredName: str = "You"
    stopList: Optional[list[str]] = None
    construct: Optional[dict[str, Any]] = None


class InstructBody(BaseModel):
    instruction: str
    guidance: Optional[str] = None
    context: Optional[str] = None
    examples: Union[list[str], str, None] = None


class StatusBody(BaseModel):
    endpoint: Optional[str] = None
    endpointType: Optional[str] = None


class ConnectionBody(BaseModel):
    endpoint: str
    endpointType: str
    password: Optional[str] = None
    hordeModel: Optional[str] = None


class SamplingBody(BaseModel):
    settings: dict[str, Any]
    stopBrackets: Optional[bool] = None


class ModelBody(BaseModel):
    model: str


class FiltersBody(BaseModel):
    filters: dict[str, str]


class PresetBody(BaseModel):
    preset: dict[str, Any]


class PresetIdBody(BaseModel):
    preset: str


class TokenizerBody(BaseModel):
    tokenizer: Literal["LLaMA", "GPT"]


def generation_error_response(e: Exception) -> JSONResponse:
    """Map raised generation failures to HTTP responses."""
    if isinstance(e, GenerationCancelled):
        return JSONResponse(status_code=409, content={"error": str(e)})
    if isinstance(e, GenerationTimeout):
        return JSONResponse(status_code=504, content={"error": str(e)})
    logger.warning("Generation transport error: %s", e)
    return JSONResponse(status_code=502, content={"error": f"{type(e).__name__}: {e}"})


@router.post("/generate-text")
async def generate_text(body: GenerateTextBody):
    gateway = get_gateway()
    persona = Persona.from_dict(body.construct) if body.construct else None
    try:
        result = await gateway.generate(body.prompt, body.configuredName, body.stopList, persona)
    except (GenerationCancelled, GenerationTimeout, httpx.HTTPError) as e:
        return generation_error_response(e)
    return result.to_dict()


@router.post("/do-instruct")
async def do_instruct(body: InstructBody):
    try:
        return await get_gateway().do_instruct(body.instruction, body.guidance, body.context, body.examples)
    except (GenerationCancelled, GenerationTimeout, httpx.HTTPError) as e:
        return generation_error_response(e)


@router.post("/get-instruct-prompt")
async def get_instruct_prompt(body: InstructBody):
    return assemble_instruct_prompt(body.instruction, body.guidance, body.context, body.examples)


@router.post("/get-status")
async def get_status(body: StatusBody):
    return await get_gateway().get_status(body.endpoint, body.endpointType)


@router.post("/llm/cancel")
async def cancel_generation():
    get_gateway().cancel_generation()
    return {"message": "Request cancelled."}


# --- Connection and sampling settings ---

@router.get("/llm/connection-information")
async def get_connection_information():
    return get_gateway().store.connection_information()


@router.post("/llm/connection-information")
async def set_connection_information(body: ConnectionBody):
    store = get_gateway().store
    store.set_connection_information(body.endpoint, body.endpointType, body.password, body.hordeModel)
    return store.connection_information()


@router.get("/llm/settings")
async def get_llm_settings():
    store = get_gateway().store
    return {"settings": store.sampling.to_dict(), "stopBrackets": store.stop_brackets}


@router.post("/llm/settings")
async def set_llm_settings(body: SamplingBody):
    store = get_gateway().store
    store.set_sampling(body.settings, body.stopBrackets)
    return store.connection_information()


@router.get("/llm/model")
async def get_horde_model():
    return get_gateway().store.horde_model


@router.post("/llm/model")
async def set_horde_model(body: ModelBody):
    store = get_gateway().store
    store.set("hordeModel", body.model)
    return store.connection_information()


@router.get("/llm/openai-model")
async def get_openai_model():
    return get_gateway().store.openai_model


@router.post("/llm/openai-model")
async def set_openai_model(body: ModelBody):
    store = get_gateway().store
    store.set("openaiModel", body.model)
    return store.connection_information()


@router.get("/palm/filters")
async def get_palm_filters():
    return get_gateway().store.palm_filters.to_dict()


@router.post("/palm/filters")
async def set_palm_filters(body: FiltersBody):
    store = get_gateway().store
    store.set_palm_filters(body.filters)
    return store.connection_information()


@router.get("/palm/model")
async def get_palm_model():
    return {"model": get_gateway().store.palm_model}


@router.post("/palm/model")
async def set_palm_model(body: ModelBody):
    get_gateway().store.set("palmModel", body.model)
    return {"message": "Model updated successfully."}


# --- Presets ---

@router.get("/connections/presets")
async def list_connection_presets():
    return [p.to_dict() for p in get_gateway().store.connection_presets]


@router.post("/connections/presets")
async def upsert_connection_preset(body: PresetBody):
    presets = get_gateway().store.upsert_connection_preset(body.preset)
    return [p.to_dict() for p in presets]


@router.delete("/connections/presets")
async def remove_connection_preset(body: PresetIdBody):
    presets = get_gateway().store.remove_connection_preset(body.preset)
    return [p.to_dict() for p in presets]


@router.get("/connections/current-preset")
async def get_current_connection_preset():
    return get_gateway().store.current_connection_preset


@router.post("/connections/current-preset")
async def set_current_connection_preset(body: PresetIdBody):
    store = get_gateway().store
    store.set("currentConnectionPreset", body.preset)
    return store.current_connection_preset


@router.get("/settings/presets")
async def list_settings_presets():
    return get_gateway().store.settings_presets


@router.post("/settings/presets")
async def upsert_settings_preset(body: PresetBody):
    try:
        return get_gateway().store.upsert_settings_preset(body.preset)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})


@router.delete("/settings/presets")
async def remove_settings_preset(body: PresetIdBody):
    return get_gateway().store.remove_settings_preset(body.preset)


@router.get("/settings/current-preset")
async def get_current_settings_preset():
    return get_gateway().store.current_settings_preset


@router.post("/settings/current-preset")
async def set_current_settings_preset(body: PresetIdBody):
    store = get_gateway().store
    store.set("currentSettingsPreset", body.preset)
    return store.current_settings_preset


@router.get("/settings/tokenizer")
async def get_tokenizer():
    return {"tokenizer": get_gateway().store.selected_tokenizer}


@router.post("/settings/tokenizer")
async def set_tokenizer(body: TokenizerBody):
    store = get_gateway().store
    store.set("selectedTokenizer", body.tokenizer)
    return {"tokenizer": store.selected_tokenizer}
