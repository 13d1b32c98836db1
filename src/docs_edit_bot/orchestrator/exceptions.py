"""Exceptions for orchestrator operations.

Note: Names chosen to avoid collisions with stdlib and framework exceptions.
"""

from docs_edit_bot.agents.exceptions import BotError


class OrchestratorError(BotError):
    """Base exception for all orchestrator operations."""


class GraphBuildError(OrchestratorError):
    """Raised when graph construction fails."""


class OrchestrationStepError(OrchestratorError):
    """Raised when one step of the change sequence fails.

    Nothing already done is undone: ``branch`` and ``written_paths`` describe
    what was left on the remote for manual inspection.
    """

    def __init__(
        self,
        message: str,
        *,
        step: str,
        path: str | None = None,
        status: int | None = None,
        body: str = "",
        branch: str | None = None,
        completed_steps: list[str] | None = None,
        written_paths: list[str] | None = None,
    ):
        super().__init__(message)
        self.step = step
        self.path = path
        self.status = status
        self.body = body
        self.branch = branch
        self.completed_steps = list(completed_steps or [])
        self.written_paths = list(written_paths or [])
