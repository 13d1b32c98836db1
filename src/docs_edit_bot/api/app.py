"""FastAPI application exposing the assistant and change-proposal handlers."""

import json
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from docs_edit_bot.api.handlers import (
    HandlerResponse,
    Services,
    handle_assistant,
    handle_change_proposal,
)
from docs_edit_bot.config import Settings

logger = logging.getLogger(__name__)

ASSISTANT_PATH = "/api/dev"
UPDATE_PATH = "/api/update"

# Registered for every method so the handlers answer 405 themselves
_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def _read_json(request: Request) -> dict:
    """Decode the request body; an unreadable or non-JSON body counts as empty."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug("Ignoring unparseable request body on %s", request.url.path)
        return {}
    return payload if isinstance(payload, dict) else {}


def _to_response(result: HandlerResponse) -> JSONResponse:
    return JSONResponse(status_code=result.status, content=result.body)


def create_app(services: Services | None = None) -> FastAPI:
    """Build the app; settings are read from the environment unless services are given."""
    if services is None:
        load_dotenv()
        services = Services(settings=Settings.from_env())

    app = FastAPI(title="docs-edit-bot")
    app.state.services = services

    @app.get("/healthz")
    def healthz() -> dict:
        return {"status": "ok"}

    @app.api_route(ASSISTANT_PATH, methods=_ALL_METHODS)
    async def assistant_route(request: Request) -> JSONResponse:
        body = await _read_json(request) if request.method == "POST" else {}
        result = await run_in_threadpool(handle_assistant, request.method, body, app.state.services)
        return _to_response(result)

    @app.api_route(UPDATE_PATH, methods=_ALL_METHODS)
    async def update_route(request: Request) -> JSONResponse:
        body = await _read_json(request) if request.method == "POST" else {}
        result = await run_in_threadpool(
            handle_change_proposal, request.method, body, app.state.services
        )
        return _to_response(result)

    return app
