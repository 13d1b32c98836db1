"""Model-backed agents for the docs edit bot."""

from docs_edit_bot.agents.exceptions import (
    BotError,
    ClientInputError,
    GenerationParseError,
    ServerConfigError,
    UpstreamError,
)
from docs_edit_bot.agents.assistant import DevAssistant
from docs_edit_bot.agents.edit_planner import EditPlanner
from docs_edit_bot.agents.llm import CompletionClient

__all__ = [
    "BotError",
    "ClientInputError",
    "CompletionClient",
    "DevAssistant",
    "EditPlanner",
    "GenerationParseError",
    "ServerConfigError",
    "UpstreamError",
]
