"""LangGraph orchestrator package for the change-request pipeline."""

from docs_edit_bot.orchestrator.exceptions import (
    GraphBuildError,
    OrchestrationStepError,
    OrchestratorError,
)
from docs_edit_bot.orchestrator.graph import build_graph, timestamp_branch_name
from docs_edit_bot.orchestrator.runner import ChangeOrchestrator
from docs_edit_bot.orchestrator.state import ChangeState, make_initial_state

__all__ = [
    "ChangeOrchestrator",
    "ChangeState",
    "GraphBuildError",
    "OrchestrationStepError",
    "OrchestratorError",
    "build_graph",
    "make_initial_state",
    "timestamp_branch_name",
]
