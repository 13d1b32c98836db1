"""State definition for the LangGraph change-request pipeline."""

import operator
from typing import Annotated, Any, TypedDict

from docs_edit_bot.models import FileEdit, FileWriteResult

DEFAULT_PR_TITLE = "AI suggested edits"
DEFAULT_PR_BODY = "AI-generated changes. Please review."
DEFAULT_COMMIT_MESSAGE = "AI edit"


class StepFailure(TypedDict):
    step: str
    path: str | None
    status: int | None
    body: str
    message: str


class ChangeState(TypedDict):
    """State for the change-request pipeline.

    Fields with Annotated[list, operator.add] reducers accumulate across nodes.
    All other fields use default overwrite semantics.
    """

    # Input
    owner: str
    repo: str
    target_branch: str | None
    files: list[FileEdit]
    pr_title: str | None
    pr_body: str | None

    # Resolution
    base_branch: str | None
    base_sha: str | None
    branch: str | None

    # Writes (accumulating reducer)
    current_file_index: int
    writes: Annotated[list[FileWriteResult], operator.add]

    # Pull request
    pull_request: dict[str, Any] | None

    # Progress and failure
    completed_steps: Annotated[list[str], operator.add]
    failure: StepFailure | None


def make_initial_state(
    owner: str,
    repo: str,
    files: list[FileEdit],
    pr_title: str | None = None,
    pr_body: str | None = None,
    target_branch: str | None = None,
) -> ChangeState:
    """Create the initial state for the change-request pipeline."""
    return {
        "owner": owner,
        "repo": repo,
        "target_branch": target_branch,
        "files": list(files),
        "pr_title": pr_title,
        "pr_body": pr_body,
        "base_branch": None,
        "base_sha": None,
        "branch": None,
        "current_file_index": 0,
        "writes": [],
        "pull_request": None,
        "completed_steps": [],
        "failure": None,
    }


def commit_message_for(edit: FileEdit, pr_title: str | None) -> str:
    """Per-file message, else the plan title, else a fixed default."""
    return edit.commit_message or pr_title or DEFAULT_COMMIT_MESSAGE
