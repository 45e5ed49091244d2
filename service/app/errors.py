"""Exception types for the chat pipeline.

A knowledge-base miss is not an error: lookups return None. Provider
errors are absorbed by the component that made the external call and
turned into a safe fallback, so none of these should reach an HTTP
response except KnowledgeBaseError, which is raised at startup.
"""


class ChatServiceError(Exception):
    """Base class for chat service errors."""


class ProviderFailure(ChatServiceError):
    """The completion provider could not be reached, timed out, or errored."""


class MalformedProviderOutput(ChatServiceError):
    """The provider answered, but not in the structured shape we asked for."""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class KnowledgeBaseError(ChatServiceError):
    """The knowledge base could not be loaded or failed validation."""
