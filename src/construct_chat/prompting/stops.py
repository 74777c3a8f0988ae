"""Stop-sequence composition."""

from typing import Optional

from ..llm.types import InstructDialect, Persona

MAX_STOPS = 5

INSTRUCT_STOPS: dict[InstructDialect, tuple[str, ...]] = {
    InstructDialect.METHARME: ("<|user|>", "<|model|>"),
    InstructDialect.ALPACA: ("### Instruction:",),
    InstructDialect.VICUNA: ("USER:",),
}


def compose_stop_list(
    participant: str = "You",
    stop_list: Optional[list[str]] = None,
    persona: Optional[Persona] = None,
    stop_brackets: bool = False,
) -> list[str]:
    """Build the ordered stop list for one request.

    Entries are appended in precedence order, duplicates keep their first
    position, and the result is cut to the first `MAX_STOPS`, so later entries
    (persona names) are the first to go.
    """
    if stop_list is not None:
        stops = ["You:", *stop_list]
    else:
        stops = [f"{participant}:", "You:"]

    if stop_brackets:
        stops += ["[", "]"]

    if persona is not None:
        if persona.do_instruct:
            stops += INSTRUCT_STOPS.get(persona.instruct_type, ())
        if persona.name:
            stops += [f"{persona.name}:", f"{persona.name}'s Thoughts:"]

    # A participant named "You" would otherwise yield "You:" twice
    unique = list(dict.fromkeys(stops))
    return unique[:MAX_STOPS]
