"""Exceptions for agent and handler operations."""


class BotError(Exception):
    """Base exception for all docs-edit-bot operations."""


class ClientInputError(BotError):
    """Raised when a request field is missing, empty, or malformed."""


class ServerConfigError(BotError):
    """Raised when a required credential or repository identity is not configured."""


class UpstreamError(BotError):
    """Raised when the model or source-hosting service returns a non-success status."""

    def __init__(self, message: str, *, service: str, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.service = service
        self.status = status
        self.body = body


class GenerationParseError(BotError):
    """Raised when model output cannot be interpreted as an edit plan."""

    def __init__(self, message: str, *, raw: str = ""):
        super().__init__(message)
        self.raw = raw
