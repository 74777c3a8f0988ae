"""Split a raw completion into the speaker's dialogue turns."""

import re
from typing import Optional

# Line prefixes (lowercase) that mean the model started writing someone else's turn
TERMINATOR_PREFIXES = ("you:", "<start>", "<end>", "<user>", "user:")


def _strip_speaker(text: str, speaker_prefix: str) -> str:
    return re.sub(re.escape(speaker_prefix), "", text, flags=re.IGNORECASE).strip()


def segment_reply(
    speaker: str,
    raw_text: str,
    participant: str = "You",
    stop_list: Optional[list[str]] = None,
) -> list[str]:
    """Scan `raw_text` line by line and return the speaker's turns in order.

    Scanning stops at the first line that starts (case-insensitively) with the
    participant's name and a colon, one of `TERMINATOR_PREFIXES`, or any entry
    of `stop_list`. A line starting with "{speaker}:" closes the current turn
    and opens a new one; the prefix is removed from every emitted turn. Other
    lines continue the current turn. The first line always opens the first
    turn, even without a speaker prefix.
    """
    speaker_prefix = f"{speaker}:"
    terminators = (f"{participant.lower()}:", *TERMINATOR_PREFIXES)
    stops = tuple(stop.lower() for stop in stop_list or () if stop)

    turns: list[str] = []
    current = ""
    first_line = True
    for line in raw_text.split("\n"):
        lowered = line.lower()
        if lowered.startswith(terminators):
            break
        if stops and lowered.startswith(stops):
            break

        if lowered.startswith(speaker_prefix.lower()):
            if current:
                turns.append(_strip_speaker(current, speaker_prefix))
            current = line
        elif current or first_line:
            current += line if first_line else "\n" + line
        first_line = False

    if current:
        turns.append(_strip_speaker(current, speaker_prefix))
    return turns


def break_up_commands(
    speaker: str,
    raw_text: str,
    participant: str = "You",
    stop_list: Optional[list[str]] = None,
    multi_line: bool = True,
) -> str:
    """Reduce a completion to the speaker's reply text.

    With `multi_line` disabled only the first line is kept, verbatim.
    Otherwise the turns from `segment_reply` are joined with newlines.
    """
    if not multi_line:
        return raw_text.split("\n", 1)[0]
    return "\n".join(segment_reply(speaker, raw_text, participant, stop_list))
