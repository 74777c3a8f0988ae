"""Types for the text-generation layer."""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional


class ProviderKind(Enum):
    """Supported backend integration targets."""
    KOBOLD = "Kobold"
    OOBA = "Ooba"
    APHRODITE = "Aphrodite"
    OAI = "OAI"
    PALM = "PaLM"
    HORDE = "Horde"
    PROXY_OAI = "P-OAI"
    PROXY_CLAUDE = "P-Claude"
    PROXY_AWS_CLAUDE = "P-AWS-Claude"

    @classmethod
    def parse(cls, value: "str | ProviderKind | None") -> "ProviderKind":
        """Resolve a stored endpoint type, falling back to Kobold for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.KOBOLD


class InstructDialect(Enum):
    """Prompt-formatting conventions for instruct-tuned models."""
    METHARME = "Metharme"
    ALPACA = "Alpaca"
    VICUNA = "Vicuna"
    NONE = "none"

    @classmethod
    def parse(cls, value: "str | InstructDialect | None") -> "InstructDialect":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


# Anonymous Horde credential
ANONYMOUS_HORDE_KEY = "0000000000"

DEFAULT_SAMPLER_ORDER = [6, 3, 2, 5, 0, 1, 4]

HARM_CATEGORIES = (
    "HARM_CATEGORY_UNSPECIFIED",
    "HARM_CATEGORY_DEROGATORY",
    "HARM_CATEGORY_TOXICITY",
    "HARM_CATEGORY_VIOLENCE",
    "HARM_CATEGORY_SEXUAL",
    "HARM_CATEGORY_MEDICAL",
    "HARM_CATEGORY_DANGEROUS",
)

BLOCK_THRESHOLDS = (
    "BLOCK_NONE",
    "BLOCK_ONLY_HIGH",
    "BLOCK_MEDIUM_AND_ABOVE",
    "BLOCK_LOW_AND_ABOVE",
    "HARM_BLOCK_THRESHOLD_UNSPECIFIED",
)


@dataclass
class SamplingSettings:
    """Numeric and boolean generation knobs.

    Falsy stored values are never sent as-is: adapters read them through
    `or_default`, so an explicit 0 is indistinguishable from "unset".
    """
    rep_pen: float = 1.0
    rep_pen_range: int = 512
    temperature: float = 0.9
    sampler_order: list[int] = field(default_factory=lambda: list(DEFAULT_SAMPLER_ORDER))
    top_k: int = 0
    top_p: float = 0.9
    top_a: float = 0
    tfs: float = 0
    typical: float = 0.9
    singleline: bool = True
    sampler_full_determinism: bool = False
    max_length: int = 350
    min_length: int = 0
    max_context_length: int = 2048
    max_tokens: int = 350
    presence_penalty: float = 0
    frequency_penalty: float = 0
    mirostat_mode: int = 0
    mirostat_tau: float = 0
    mirostat_eta: float = 0

    def or_default(self, name: str, default: Any) -> Any:
        value = getattr(self, name, None)
        return value if value else default

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "SamplingSettings":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class ContentFilters:
    """Per-category safety thresholds for the filtered-generation provider."""
    thresholds: dict[str, str] = field(
        default_factory=lambda: {category: "BLOCK_NONE" for category in HARM_CATEGORIES}
    )

    def threshold(self, category: str) -> str:
        value = self.thresholds.get(category)
        return value if value in BLOCK_THRESHOLDS else "BLOCK_NONE"

    def safety_settings(self) -> list[dict[str, str]]:
        return [
            {"category": category, "threshold": self.threshold(category)}
            for category in HARM_CATEGORIES
        ]

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ContentFilters":
        filters = cls()
        for category, value in (data or {}).items():
            if category in HARM_CATEGORIES:
                filters.thresholds[category] = value
        return filters

    def to_dict(self) -> dict[str, str]:
        return {category: self.threshold(category) for category in HARM_CATEGORIES}


@dataclass
class ConnectionProfile:
    """A named connection to one backend."""
    id: str
    name: str
    endpoint: str = ""
    endpoint_type: ProviderKind = ProviderKind.KOBOLD
    password: str = ""
    openai_model: str = "gpt-3.5-turbo-16k"
    palm_model: str = "models/text-bison-001"
    horde_model: str = ""
    claude_model: str = "claude-v1.3-100k"
    palm_filters: ContentFilters = field(default_factory=ContentFilters)

    @classmethod
    def from_dict(cls, data: dict) -> "ConnectionProfile":
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            name=data.get("name", ""),
            endpoint=data.get("endpoint") or "",
            endpoint_type=ProviderKind.parse(data.get("endpointType") or data.get("endpoint_type")),
            password=data.get("password") or "",
            openai_model=data.get("openaiModel") or data.get("openai_model") or cls.openai_model,
            palm_model=data.get("palmModel") or data.get("palm_model") or cls.palm_model,
            horde_model=data.get("hordeModel") or data.get("horde_model") or "",
            claude_model=data.get("claudeModel") or data.get("claude_model") or cls.claude_model,
            palm_filters=ContentFilters.from_dict(data.get("palmFilters") or data.get("palm_filters")),
        )

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "name": self.name,
            "endpoint": self.endpoint,
            "endpointType": self.endpoint_type.value,
            "password": self.password,
            "openaiModel": self.openai_model,
            "palmModel": self.palm_model,
            "hordeModel": self.horde_model,
            "claudeModel": self.claude_model,
            "palmFilters": self.palm_filters.to_dict(),
        }


@dataclass
class Persona:
    """A user-authored construct, read-only to the generation layer."""
    name: str = ""
    id: str = ""
    background: str = ""
    personality: str = ""
    interests: list[str] = field(default_factory=list)
    relationships: list[str] = field(default_factory=list)
    do_instruct: bool = False
    instruct_type: InstructDialect = InstructDialect.NONE

    @classmethod
    def from_dict(cls, data: dict) -> "Persona":
        config = data.get("defaultConfig") or {}
        return cls(
            name=data.get("name") or "",
            id=str(data.get("_id") or data.get("id") or ""),
            background=data.get("background") or "",
            personality=data.get("personality") or "",
            interests=list(data.get("interests") or []),
            relationships=list(data.get("relationships") or []),
            do_instruct=bool(config.get("doInstruct", data.get("do_instruct", False))),
            instruct_type=InstructDialect.parse(config.get("instructType", data.get("instruct_type"))),
        )


@dataclass
class GenerationRequest:
    """Canonical in-memory request handed to a provider adapter."""
    prompt: str
    participant: str = "You"
    stop_list: Optional[list[str]] = None
    persona: Optional[Persona] = None
    # Composed by the gateway before dispatch
    stops: list[str] = field(default_factory=list)


@dataclass
class GenerationResult:
    """Canonical result: results on success, or results=None plus an error."""
    results: Optional[list[str]]
    prompt: Optional[str] = None
    error: Any = None

    @property
    def ok(self) -> bool:
        return self.results is not None

    @property
    def text(self) -> Optional[str]:
        return self.results[0] if self.results else None

    def to_dict(self) -> dict:
        if self.results is None:
            return {"results": None, "error": self.error, "prompt": self.prompt}
        return {"results": self.results, "prompt": self.prompt}
