"""Runs the change-request graph and turns its final state into a result or an error."""

import logging
from typing import Callable

from docs_edit_bot.agents.exceptions import ClientInputError
from docs_edit_bot.github.client import GitHubClient
from docs_edit_bot.models import ChangeRequestResult, EditPlan
from docs_edit_bot.orchestrator.exceptions import OrchestrationStepError
from docs_edit_bot.orchestrator.graph import build_graph, timestamp_branch_name
from docs_edit_bot.orchestrator.state import ChangeState, make_initial_state

logger = logging.getLogger(__name__)

# Supersteps outside the per-file loop, plus headroom
_FIXED_STEPS = 10


def _raise_for_failure(final: ChangeState) -> None:
    failure = final["failure"]
    if failure is None:
        return
    where = f" ({failure['path']})" if failure["path"] else ""
    logger.warning(
        "Change sequence stopped at %s%s; completed: %s",
        failure["step"],
        where,
        ", ".join(final["completed_steps"]) or "nothing",
    )
    raise OrchestrationStepError(
        f"Step {failure['step']}{where} failed: {failure['message']}",
        step=failure["step"],
        path=failure["path"],
        status=failure["status"],
        body=failure["body"],
        branch=final["branch"],
        completed_steps=final["completed_steps"],
        written_paths=[write.path for write in final["writes"]],
    )


class ChangeOrchestrator:
    """Materializes an approved EditPlan as a pull request on one repository."""

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repo: str,
        target_branch: str | None = None,
        branch_namer: Callable[[], str] = timestamp_branch_name,
    ):
        self.owner = owner
        self.repo = repo
        self.target_branch = target_branch
        self._graph = build_graph(client, branch_namer=branch_namer)

    def run(self, plan: EditPlan) -> ChangeRequestResult:
        """Create a branch, write every file in plan order, and open a pull request.

        Args:
            plan: Approved edit plan with at least one file

        Returns:
            ChangeRequestResult describing the branch, writes and pull request

        Raises:
            ClientInputError: If the plan has no files (nothing is created)
            OrchestrationStepError: If any step fails; earlier steps are not undone
        """
        if not plan.is_actionable:
            raise ClientInputError("No files to commit")

        state = make_initial_state(
            owner=self.owner,
            repo=self.repo,
            files=plan.files,
            pr_title=plan.pr_title,
            pr_body=plan.pr_body,
            target_branch=self.target_branch,
        )
        final = self._graph.invoke(
            state,
            config={"recursion_limit": len(plan.files) + _FIXED_STEPS},
        )
        _raise_for_failure(final)

        pull_request = final["pull_request"] or {}
        return ChangeRequestResult(
            branch=final["branch"],
            base_branch=final["base_branch"],
            writes=final["writes"],
            number=pull_request.get("number"),
            url=pull_request.get("html_url"),
            pull_request=pull_request,
        )
