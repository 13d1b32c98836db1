"""Request handlers for the assistant and change-proposal endpoints.

Handlers take the HTTP method and the decoded JSON body and return a
HandlerResponse; they never raise. Every dependency (settings and client
factories) arrives through Services so tests can inject fakes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ValidationError

from docs_edit_bot.agents.assistant import DevAssistant
from docs_edit_bot.agents.edit_planner import EditPlanner
from docs_edit_bot.agents.exceptions import (
    ClientInputError,
    GenerationParseError,
    ServerConfigError,
    UpstreamError,
)
from docs_edit_bot.agents.llm import CompletionClient
from docs_edit_bot.config import Settings
from docs_edit_bot.github.client import GitHubClient
from docs_edit_bot.models import EditPlan, FileEdit
from docs_edit_bot.orchestrator.exceptions import OrchestrationStepError
from docs_edit_bot.orchestrator.graph import timestamp_branch_name
from docs_edit_bot.orchestrator.runner import ChangeOrchestrator

logger = logging.getLogger(__name__)

CLIENT_PR_TITLE = "AI suggested edits"
CLIENT_PR_BODY = "AI suggested changes"


@dataclass
class HandlerResponse:
    status: int
    body: dict[str, Any]


@dataclass
class Services:
    """Configuration and client factories shared by both handlers."""

    settings: Settings
    completion_factory: Callable[[Settings], CompletionClient] = CompletionClient.from_settings
    github_factory: Callable[[Settings], GitHubClient] = GitHubClient.from_settings
    branch_namer: Callable[[], str] = timestamp_branch_name


def _error(status: int, message: str, /, **extra: Any) -> HandlerResponse:
    return HandlerResponse(status, {"error": message, **extra})


def _method_not_allowed(method: str) -> HandlerResponse | None:
    if method.upper() != "POST":
        return _error(405, "Only POST allowed")
    return None


def _as_dict(body: Any) -> dict[str, Any]:
    return body if isinstance(body, dict) else {}


def _text_field(body: dict[str, Any], key: str) -> str:
    value = body.get(key)
    return value if isinstance(value, str) else ""


def handle_assistant(method: str, body: Any, services: Services) -> HandlerResponse:
    """Forward ``{prompt}`` to the developer assistant and return ``{reply}``."""
    rejected = _method_not_allowed(method)
    if rejected is not None:
        return rejected

    prompt = _text_field(_as_dict(body), "prompt")
    if not prompt.strip():
        return _error(400, "Empty prompt")

    settings = services.settings
    if not settings.model_api_key:
        return _error(500, f"Server missing {settings.model_api_key_name} env var")

    try:
        assistant = DevAssistant(services.completion_factory(settings))
        reply = assistant.reply(prompt)
    except UpstreamError as exc:
        logger.warning("Assistant upstream error from %s: %s", exc.service, exc.status)
        return _error(502, "Upstream error", details=exc.body, status=exc.status)
    except Exception:
        logger.exception("Assistant request failed")
        return _error(500, "Internal server error")

    return HandlerResponse(200, {"reply": reply})


def plan_from_request(body: dict[str, Any], services: Services) -> EditPlan:
    """Use client-supplied files when present, otherwise generate a plan from the prompt.

    Raises:
        ClientInputError: If neither files nor a prompt is usable
        UpstreamError: If generation hits an upstream error status
        GenerationParseError: If the model reply is not a usable plan
    """
    files = body.get("files")
    if isinstance(files, list) and files:
        try:
            return EditPlan(
                files=[FileEdit.model_validate(item) for item in files],
                pr_title=body.get("prTitle") or CLIENT_PR_TITLE,
                pr_body=body.get("prBody") or CLIENT_PR_BODY,
            )
        except ValidationError as exc:
            raise ClientInputError(f"Invalid files payload: {exc.error_count()} error(s)") from exc

    prompt = _text_field(body, "prompt")
    if not prompt.strip():
        raise ClientInputError("No prompt provided")
    planner = EditPlanner(services.completion_factory(services.settings))
    return planner.generate(prompt)


def _apply(plan: EditPlan, services: Services) -> HandlerResponse:
    settings = services.settings
    with services.github_factory(settings) as client:
        orchestrator = ChangeOrchestrator(
            client,
            owner=settings.repo_owner,
            repo=settings.repo_name,
            target_branch=settings.target_branch,
            branch_namer=services.branch_namer,
        )
        result = orchestrator.run(plan)
    return HandlerResponse(
        200,
        {
            "success": True,
            "pr": result.pull_request,
            "branch": result.branch,
            "baseBranch": result.base_branch,
            "files": [write.model_dump() for write in result.writes],
        },
    )


def handle_change_proposal(method: str, body: Any, services: Services) -> HandlerResponse:
    """Preview an edit plan, or commit it and open a pull request when approved.

    Validation order: method, body, environment, input shape, generation,
    then the approval branch.
    """
    rejected = _method_not_allowed(method)
    if rejected is not None:
        return rejected

    body = _as_dict(body)
    settings = services.settings
    if not settings.has_repository:
        return _error(500, "Server misconfigured: REPO_OWNER or REPO_NAME missing")
    if not settings.model_api_key:
        return _error(500, f"Server misconfigured: {settings.model_api_key_name} missing")

    try:
        plan = plan_from_request(body, services)

        if not body.get("approve"):
            return HandlerResponse(200, {"preview": True, "aiResult": plan.to_wire()})

        if not settings.github_token:
            return _error(500, "Server missing GITHUB_TOKEN env var")
        if not plan.is_actionable:
            return _error(400, "No files to commit")

        return _apply(plan, services)

    except ClientInputError as exc:
        return _error(400, str(exc))
    except ServerConfigError as exc:
        return _error(500, str(exc))
    except GenerationParseError as exc:
        logger.warning("Edit plan generation returned unusable content: %s", exc)
        return _error(502, str(exc), raw=exc.raw)
    except UpstreamError as exc:
        logger.warning("Edit plan generation upstream error from %s: %s", exc.service, exc.status)
        return _error(502, str(exc), details=exc.body, status=exc.status)
    except OrchestrationStepError as exc:
        return _error(
            502,
            str(exc),
            step=exc.step,
            path=exc.path,
            status=exc.status,
            details=exc.body,
            branch=exc.branch,
            completed=exc.completed_steps,
        )
    except Exception as exc:
        logger.exception("Change proposal request failed")
        return _error(500, str(exc) or "Internal server error")
