"""Prompt assembly for chat continuation and instruction mode."""

from typing import Callable, Optional, Union

from ..chat.types import ChatLog
from ..llm.types import Persona
from . import templates

HistoryRenderer = Callable[[ChatLog, Optional[int]], str]


def get_character_prompt(persona: Persona) -> str:
    """Render the persona preamble, skipping empty fields."""
    prompt = ""
    if persona.background:
        prompt += persona.background + "\n"
    if persona.interests:
        prompt += "Interests:\n"
        for interest in persona.interests:
            prompt += f"- {interest}\n"
    if persona.relationships:
        prompt += "Relationships:\n"
        for relationship in persona.relationships:
            prompt += f"- {relationship}\n"
    if persona.personality:
        prompt += persona.personality + "\n"
    return prompt.replace("{{char}}", persona.name)


def render_chat_log(chat_log: ChatLog, turn_limit: Optional[int] = None) -> str:
    """Render the last `turn_limit` messages (all when None) as `user: text` lines."""
    messages = chat_log.messages
    if turn_limit is not None:
        messages = messages[-turn_limit:] if turn_limit > 0 else []
    return "".join(f"{message.user}: {message.text}\n" for message in messages)


def assemble_prompt(
    persona: Persona,
    chat_log: ChatLog,
    participant: str = "you",
    turn_limit: Optional[int] = None,
    render: HistoryRenderer = render_chat_log,
) -> str:
    """Persona preamble + conversation history + a cue for the persona's next line."""
    prompt = get_character_prompt(persona)
    prompt += "Current Conversation:\n"
    prompt += render(chat_log, turn_limit)
    prompt += f"{persona.name}:"
    return prompt.replace("{{user}}", participant).replace("{{char}}", persona.name)


def select_instruct_template(guidance: Optional[str], context: Optional[str], examples: Optional[str]) -> str:
    has_guidance, has_context, has_examples = bool(guidance), bool(context), bool(examples)
    if has_guidance and has_context and has_examples:
        return templates.INSTRUCT_PROMPT_WITH_GUIDANCE_AND_CONTEXT_AND_EXAMPLES
    if has_guidance and has_context:
        return templates.INSTRUCT_PROMPT_WITH_GUIDANCE_AND_CONTEXT
    if has_guidance and has_examples:
        return templates.INSTRUCT_PROMPT_WITH_GUIDANCE_AND_EXAMPLES
    if has_context and has_examples:
        return templates.INSTRUCT_PROMPT_WITH_EXAMPLES
    if has_context:
        return templates.INSTRUCT_PROMPT_WITH_CONTEXT
    if has_guidance:
        return templates.INSTRUCT_PROMPT_WITH_GUIDANCE
    return templates.INSTRUCT_PROMPT


def assemble_instruct_prompt(
    instruction: str,
    guidance: Optional[str] = None,
    context: Optional[str] = None,
    examples: Union[list[str], str, None] = None,
) -> str:
    """Fill the instruction template that matches the optional fields given.

    A list of examples is joined with newlines. Missing fields become empty
    strings, and leading whitespace is trimmed from the result.
    """
    if isinstance(examples, list):
        examples = "\n".join(examples)
    prompt = select_instruct_template(guidance, context, examples)
    prompt = (
        prompt.replace("{{guidance}}", guidance or "")
        .replace("{{instruction}}", instruction or "")
        .replace("{{context}}", context or "")
        .replace("{{examples}}", examples or "")
    )
    return prompt.lstrip()
