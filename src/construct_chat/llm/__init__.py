"""Text-generation layer: provider adapters, cancellation and shared types.

The gateway lives in `construct_chat.llm.gateway` and is imported from there.
"""

from .base import BaseProviderAdapter, CallContext
from .cancellation import CancellationScope, CancellationToken
from .errors import (
    GenerationCancelled,
    GenerationError,
    GenerationTimeout,
    ProviderResponseError,
)
from .types import (
    ConnectionProfile,
    ContentFilters,
    GenerationRequest,
    GenerationResult,
    InstructDialect,
    Persona,
    ProviderKind,
    SamplingSettings,
)

__all__ = [
    "BaseProviderAdapter",
    "CallContext",
    "CancellationScope",
    "CancellationToken",
    "GenerationCancelled",
    "GenerationError",
    "GenerationTimeout",
    "ProviderResponseError",
    "ConnectionProfile",
    "ContentFilters",
    "GenerationRequest",
    "GenerationResult",
    "InstructDialect",
    "Persona",
    "ProviderKind",
    "SamplingSettings",
]
