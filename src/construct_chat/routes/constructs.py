"""Construct prompt assembly and reply continuation endpoints."""

from typing import Any, Optional

import httpx
from fastapi import APIRouter
from pydantic import BaseModel

from ..chat.continuation import continue_chat
from ..chat.segmenter import break_up_commands
from ..chat.types import ChatLog
from ..llm.errors import GenerationCancelled, GenerationTimeout
from ..llm.types import Persona
from ..prompting.prompt import assemble_prompt, get_character_prompt
from .llm import generation_error_response, get_gateway

router = APIRouter(prefix="/api/constructs", tags=["constructs"])


class MultiLineBody(BaseModel):
    doMultiLine: bool


class ConstructBody(BaseModel):
    construct: dict[str, Any]


class AssembleBody(BaseModel):
    construct: dict[str, Any]
    chatLog: dict[str, Any]
    currentUser: str = "you"
    messagesToInclude: Optional[int] = None


class BreakUpBody(BaseModel):
    charName: str
    commandString: str
    user: str = "You"
    stopList: Optional[list[str]] = None


class ContinueBody(BaseModel):
    construct: dict[str, Any]
    chatLog: dict[str, Any]
    currentUser: str = "You"
    messagesToInclude: Optional[int] = None
    stopList: Optional[list[str]] = None


@router.get("/multi-line")
async def get_multi_line():
    return get_gateway().store.do_multi_line


@router.post("/multi-line")
async def set_multi_line(body: MultiLineBody):
    store = get_gateway().store
    store.set("doMultiLine", body.doMultiLine)
    return store.do_multi_line


@router.post("/character-prompt")
async def character_prompt(body: ConstructBody):
    return get_character_prompt(Persona.from_dict(body.construct))


@router.post("/assemble-prompt")
async def assemble(body: AssembleBody):
    persona = Persona.from_dict(body.construct)
    return assemble_prompt(persona, ChatLog.from_dict(body.chatLog), body.currentUser, body.messagesToInclude)


@router.post("/break-up-commands")
async def break_up(body: BreakUpBody):
    return break_up_commands(
        body.charName,
        body.commandString,
        body.user,
        body.stopList,
        multi_line=get_gateway().store.do_multi_line,
    )


@router.post("/continue-chat")
async def continue_chat_route(body: ContinueBody):
    persona = Persona.from_dict(body.construct)
    chat_log = ChatLog.from_dict(body.chatLog)
    try:
        reply = await continue_chat(
            get_gateway(), persona, chat_log, body.currentUser, body.messagesToInclude, body.stopList
        )
    except (GenerationCancelled, GenerationTimeout, httpx.HTTPError) as e:
        return generation_error_response(e)
    return {"reply": reply}
