"""Exceptions raised by the generation layer.

Transport failures are not wrapped: `httpx.HTTPError` subclasses propagate to
the caller unchanged. `ProviderResponseError` covers recognized provider-side
failures, which the gateway converts into a soft `GenerationResult` envelope.
"""


class GenerationError(Exception):
    """Base class for generation failures."""


class GenerationCancelled(GenerationError):
    """The request was superseded or cancelled by the user."""


class GenerationTimeout(GenerationError):
    """A polled job did not finish within its attempt or time budget."""


class ProviderResponseError(GenerationError):
    """The provider answered, but not with usable text."""


class EmptyResponseError(ProviderResponseError):
    def __init__(self, message: str = "No valid response from LLM."):
        super().__init__(message)


class ProviderReportedError(ProviderResponseError):
    """The provider returned an explicit error message."""


class SafetyFilterError(ProviderResponseError):
    def __init__(self, message: str = "No valid response from LLM. Filters are blocking the response."):
        super().__init__(message)


class EmptyOutputError(ProviderResponseError):
    def __init__(self, message: str = "No valid response from LLM."):
        super().__init__(message)
