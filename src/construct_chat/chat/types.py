"""Chat log types shared by prompt assembly and chat continuation."""

import time
from dataclasses import dataclass, field
from typing import Optional


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class ChatTurn:
    """One message in a chat log."""
    user: str
    text: str
    id: str = field(default_factory=lambda: str(_now_ms()))
    user_id: str = ""
    timestamp: int = field(default_factory=_now_ms)
    origin: str = ""
    is_human: bool = False
    is_command: bool = False
    is_private: bool = False
    participants: list[str] = field(default_factory=list)
    attachments: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ChatTurn":
        return cls(
            id=str(data.get("_id") or data.get("id") or _now_ms()),
            user=data.get("user", ""),
            text=data.get("text", ""),
            user_id=data.get("userID") or data.get("user_id") or "",
            timestamp=int(data.get("timestamp") or _now_ms()),
            origin=data.get("origin") or "",
            is_human=bool(data.get("isHuman", data.get("is_human", False))),
            is_command=bool(data.get("isCommand", data.get("is_command", False))),
            is_private=bool(data.get("isPrivate", data.get("is_private", False))),
            participants=list(data.get("participants") or []),
            attachments=list(data.get("attachments") or []),
        )

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "user": self.user,
            "text": self.text,
            "userID": self.user_id,
            "timestamp": self.timestamp,
            "origin": self.origin,
            "isHuman": self.is_human,
            "isCommand": self.is_command,
            "isPrivate": self.is_private,
            "participants": self.participants,
            "attachments": self.attachments,
        }


@dataclass
class ChatLog:
    id: str = ""
    messages: list[ChatTurn] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ChatLog":
        data = data or {}
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            messages=[ChatTurn.from_dict(m) for m in data.get("messages") or []],
        )

    def to_dict(self) -> dict:
        return {"_id": self.id, "messages": [m.to_dict() for m in self.messages]}
