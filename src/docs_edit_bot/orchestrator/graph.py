"""LangGraph pipeline that commits an edit plan and opens a pull request.

Each node performs one dependent GitHub call. A node that fails records a
StepFailure instead of raising, and every conditional edge routes a recorded
failure straight to END, so no later step runs. Nothing is rolled back.
"""

import logging
import time
from typing import Callable

from langgraph.graph import END, START, StateGraph

from docs_edit_bot.agents.exceptions import UpstreamError
from docs_edit_bot.github.client import GitHubClient
from docs_edit_bot.models import FileWriteResult
from docs_edit_bot.orchestrator.exceptions import GraphBuildError
from docs_edit_bot.orchestrator.state import (
    DEFAULT_PR_BODY,
    DEFAULT_PR_TITLE,
    ChangeState,
    StepFailure,
    commit_message_for,
)

logger = logging.getLogger(__name__)

BRANCH_PREFIX = "ai-edit-"
FALLBACK_BASE_BRANCH = "main"

STEP_RESOLVE_BASE = "resolve_base_branch"
STEP_RESOLVE_COMMIT = "resolve_base_commit"
STEP_CREATE_BRANCH = "create_branch"
STEP_WRITE_FILE = "write_file"
STEP_OPEN_PR = "open_pull_request"


def timestamp_branch_name(clock: Callable[[], float] = time.time) -> str:
    """Branch name from the creation time in epoch milliseconds."""
    return f"{BRANCH_PREFIX}{int(clock() * 1000)}"


def _failure(step: str, exc: Exception, path: str | None = None) -> StepFailure:
    if isinstance(exc, UpstreamError):
        return {
            "step": step,
            "path": path,
            "status": exc.status,
            "body": exc.body,
            "message": str(exc),
        }
    return {"step": step, "path": path, "status": None, "body": "", "message": f"{type(exc).__name__}: {exc}"}


def make_resolve_base_node(client: GitHubClient) -> Callable[[ChangeState], dict]:
    """Factory: node resolving the base branch (explicit target wins over the repo default)."""

    def resolve_base_node(state: ChangeState) -> dict:
        try:
            repo_info = client.get_repository(state["owner"], state["repo"])
        except Exception as exc:
            return {"failure": _failure(STEP_RESOLVE_BASE, exc)}
        base = state["target_branch"] or repo_info.get("default_branch") or FALLBACK_BASE_BRANCH
        logger.info("Base branch for %s/%s: %s", state["owner"], state["repo"], base)
        return {"base_branch": base, "completed_steps": [STEP_RESOLVE_BASE]}

    return resolve_base_node


def make_resolve_commit_node(client: GitHubClient) -> Callable[[ChangeState], dict]:
    """Factory: node resolving the commit sha at the head of the base branch."""

    def resolve_commit_node(state: ChangeState) -> dict:
        try:
            ref = client.get_branch_ref(state["owner"], state["repo"], state["base_branch"])
            sha = ref["object"]["sha"]
        except Exception as exc:
            return {"failure": _failure(STEP_RESOLVE_COMMIT, exc)}
        return {"base_sha": sha, "completed_steps": [STEP_RESOLVE_COMMIT]}

    return resolve_commit_node


def make_create_branch_node(
    client: GitHubClient,
    branch_namer: Callable[[], str] = timestamp_branch_name,
) -> Callable[[ChangeState], dict]:
    """Factory: node creating the working branch at the base commit."""

    def create_branch_node(state: ChangeState) -> dict:
        branch = branch_namer()
        try:
            client.create_branch(state["owner"], state["repo"], branch, state["base_sha"])
        except Exception as exc:
            return {"failure": _failure(STEP_CREATE_BRANCH, exc)}
        logger.info("Created branch %s at %s", branch, state["base_sha"])
        return {"branch": branch, "completed_steps": [STEP_CREATE_BRANCH]}

    return create_branch_node


def make_write_file_node(client: GitHubClient) -> Callable[[ChangeState], dict]:
    """Factory: node writing the file at current_file_index to the working branch.

    The existing blob sha, when the path already exists on the branch, is sent
    along so the contents API updates rather than creates.
    """

    def write_file_node(state: ChangeState) -> dict:
        idx = state["current_file_index"]
        edit = state["files"][idx]
        owner, repo, branch = state["owner"], state["repo"], state["branch"]
        try:
            existing_sha = client.get_file_sha(owner, repo, edit.path, ref=branch)
            response = client.put_file(
                owner,
                repo,
                edit.path,
                content=edit.content,
                message=commit_message_for(edit, state["pr_title"]),
                branch=branch,
                sha=existing_sha,
            )
        except Exception as exc:
            return {"failure": _failure(STEP_WRITE_FILE, exc, path=edit.path)}

        write = FileWriteResult(
            path=edit.path,
            content_sha=(response.get("content") or {}).get("sha"),
            commit_sha=(response.get("commit") or {}).get("sha"),
            created=existing_sha is None,
        )
        logger.info("Wrote %s (%d/%d)", edit.path, idx + 1, len(state["files"]))
        return {
            "writes": [write],
            "current_file_index": idx + 1,
            "completed_steps": [f"{STEP_WRITE_FILE}:{edit.path}"],
        }

    return write_file_node


def make_open_pr_node(client: GitHubClient) -> Callable[[ChangeState], dict]:
    """Factory: node opening the pull request from the working branch onto the base."""

    def open_pr_node(state: ChangeState) -> dict:
        try:
            pull_request = client.create_pull_request(
                state["owner"],
                state["repo"],
                title=state["pr_title"] or DEFAULT_PR_TITLE,
                head=state["branch"],
                base=state["base_branch"],
                body=state["pr_body"] or DEFAULT_PR_BODY,
            )
        except Exception as exc:
            return {"failure": _failure(STEP_OPEN_PR, exc)}
        logger.info("Opened pull request %s", pull_request.get("html_url"))
        return {"pull_request": pull_request, "completed_steps": [STEP_OPEN_PR]}

    return open_pr_node


def continue_or_stop(state: ChangeState) -> str:
    """Router for linear steps: stop on a recorded failure."""
    return "stop" if state["failure"] is not None else "continue"


def next_write_or_pr(state: ChangeState) -> str:
    """Router after branch creation and after each write."""
    if state["failure"] is not None:
        return "stop"
    if state["current_file_index"] < len(state["files"]):
        return "write"
    return "open_pr"


def build_graph(
    client: GitHubClient,
    branch_namer: Callable[[], str] = timestamp_branch_name,
):
    """Build and compile the change-request StateGraph.

    Edge topology:
      START -> resolve_base_node -> resolve_commit_node -> create_branch_node
      create_branch_node -> conditional -> {write_file_node, open_pr_node, END}
      write_file_node -> conditional -> {write_file_node, open_pr_node, END}
      open_pr_node -> END

    Raises:
        GraphBuildError: If graph construction fails.
    """
    try:
        graph = StateGraph(ChangeState)

        graph.add_node("resolve_base_node", make_resolve_base_node(client))
        graph.add_node("resolve_commit_node", make_resolve_commit_node(client))
        graph.add_node("create_branch_node", make_create_branch_node(client, branch_namer))
        graph.add_node("write_file_node", make_write_file_node(client))
        graph.add_node("open_pr_node", make_open_pr_node(client))

        graph.add_edge(START, "resolve_base_node")
        graph.add_conditional_edges(
            "resolve_base_node",
            continue_or_stop,
            {"continue": "resolve_commit_node", "stop": END},
        )
        graph.add_conditional_edges(
            "resolve_commit_node",
            continue_or_stop,
            {"continue": "create_branch_node", "stop": END},
        )

        write_routes = {"write": "write_file_node", "open_pr": "open_pr_node", "stop": END}
        graph.add_conditional_edges("create_branch_node", next_write_or_pr, write_routes)
        graph.add_conditional_edges("write_file_node", next_write_or_pr, write_routes)

        graph.add_edge("open_pr_node", END)

        return graph.compile()

    except Exception as exc:
        raise GraphBuildError(f"Failed to build change-request graph: {exc}") from exc
