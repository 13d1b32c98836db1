"""Data models for the docs edit bot."""

from docs_edit_bot.models.edit_models import EditPlan, FileEdit
from docs_edit_bot.models.result_models import (
    ChangeRequestResult,
    FileWriteResult,
    JsonParseResult,
)

__all__ = [
    "ChangeRequestResult",
    "EditPlan",
    "FileEdit",
    "FileWriteResult",
    "JsonParseResult",
]
