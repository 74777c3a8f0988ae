"""Continue, regenerate and prune chat logs for a construct."""

import logging
from typing import Optional, Protocol

from ..llm.gateway import GenerationGateway
from ..llm.types import Persona
from ..prompting.prompt import assemble_prompt
from .segmenter import break_up_commands
from .types import ChatLog, ChatTurn

logger = logging.getLogger(__name__)


class ChatRepository(Protocol):
    """Document store collaborator for constructs and chats."""

    async def get_construct(self, construct_id: str) -> Optional[Persona]:
        ...

    async def update_chat(self, chat_log: ChatLog) -> None:
        ...


async def continue_chat(
    gateway: GenerationGateway,
    persona: Persona,
    chat_log: ChatLog,
    participant: str = "You",
    turn_limit: Optional[int] = None,
    stop_list: Optional[list[str]] = None,
    multi_line: Optional[bool] = None,
) -> Optional[str]:
    """Generate the persona's next reply for `chat_log`.

    `multi_line` defaults to the stored preference. Returns the segmented
    reply, or None when the provider returned a soft failure.
    """
    prompt = assemble_prompt(persona, chat_log, participant, turn_limit)
    result = await gateway.generate(prompt, participant, stop_list, persona)
    if result.text is None:
        logger.info("No valid response from generation: %s", result.error)
        return None
    return break_up_commands(
        persona.name,
        result.text,
        participant,
        stop_list,
        multi_line=gateway.store.do_multi_line if multi_line is None else multi_line,
    )


def remove_message_from_log(chat_log: ChatLog, message_text: str) -> bool:
    for i, message in enumerate(chat_log.messages):
        if message.text == message_text:
            del chat_log.messages[i]
            return True
    return False


async def remove_message(repository: ChatRepository, chat_log: ChatLog, message_text: str) -> ChatLog:
    """Drop the first message whose text matches and persist the log."""
    remove_message_from_log(chat_log, message_text)
    await repository.update_chat(chat_log)
    return chat_log


async def regenerate_message(
    gateway: GenerationGateway,
    repository: ChatRepository,
    chat_log: ChatLog,
    message_text: str,
    message_id: Optional[str] = None,
    multi_line: Optional[bool] = None,
) -> Optional[str]:
    """Replace a construct message with a freshly generated one.

    The message is matched by id when given, otherwise by text. History after
    the message is kept; the new reply takes its position.
    """
    index = -1
    for i, message in enumerate(chat_log.messages):
        if (message_id is not None and message.id == message_id) or message.text == message_text:
            index = i
            break
    if index == -1:
        return None

    found = chat_log.messages[index]
    before = chat_log.messages[:index]
    after = chat_log.messages[index + 1:]
    chat_log.messages = before + after

    persona = await repository.get_construct(found.user_id)
    if persona is None:
        logger.info("Construct %s not found, cannot regenerate", found.user_id)
        return None

    participant = found.participants[0] if found.participants else "You"
    history = ChatLog(id=chat_log.id, messages=before)
    reply = await continue_chat(gateway, persona, history, participant, multi_line=multi_line)
    if reply is None:
        return None

    new_message = ChatTurn(
        user=persona.name,
        text=reply,
        user_id=persona.id,
        origin=found.origin,
        participants=found.participants,
    )
    chat_log.messages = before + [new_message] + after
    await repository.update_chat(chat_log)
    return reply
