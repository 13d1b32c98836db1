"""Result models for parsing and change-request orchestration."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class JsonParseResult(BaseModel):
    """Tagged outcome of extracting a JSON object from model text."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    value: dict[str, Any] | None = None
    strategy: Literal["direct", "embedded"] | None = None  # which stage succeeded
    diagnostic: str | None = None  # set only when ok is False


class FileWriteResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    path: str
    content_sha: str | None = None  # blob sha after the write
    commit_sha: str | None = None
    created: bool = True            # False when an existing file was replaced


class ChangeRequestResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    branch: str
    base_branch: str
    writes: list[FileWriteResult] = Field(default_factory=list)
    number: int | None = None
    url: str | None = None
    pull_request: dict[str, Any] = Field(default_factory=dict)  # raw GitHub payload
