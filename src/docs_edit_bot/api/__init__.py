"""HTTP surface for the docs edit bot."""

from docs_edit_bot.api.handlers import (
    HandlerResponse,
    Services,
    handle_assistant,
    handle_change_proposal,
)

__all__ = [
    "HandlerResponse",
    "Services",
    "handle_assistant",
    "handle_change_proposal",
]
