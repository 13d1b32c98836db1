"""Edit planner: turns a natural-language request into an EditPlan."""

import logging
from typing import Any

from pydantic import ValidationError

from docs_edit_bot.agents.exceptions import ClientInputError, GenerationParseError
from docs_edit_bot.agents.llm import CompletionClient
from docs_edit_bot.models import EditPlan, FileEdit
from docs_edit_bot.utils.json_extract import extract_json_object, raw_preview

logger = logging.getLogger(__name__)

PLANNER_MAX_TOKENS = 1800
PLANNER_TEMPERATURE = 0.15

SYSTEM_PROMPT = """\
You are an assistant that outputs EXACT JSON only. The user will ask for file changes to a \
Docsify documentation repo.
Return a JSON object with:
{
  "files": [
    {
      "path": "<relative/path/to/file.md>",
      "content": "<file contents as text, no extra wrapping>",
      "commitMessage": "<short commit message for this file>"
    },
    ...
  ],
  "prTitle": "<one-line PR title>",
  "prBody": "<short PR description>"
}
Important: Return valid JSON and nothing else. Use multiple files when appropriate."""


class EditPlanner:
    """Generates an EditPlan with a single completion call."""

    def __init__(self, completion: CompletionClient):
        self.completion = completion

    def generate(self, prompt: str | None) -> EditPlan:
        """Ask the model for file edits satisfying ``prompt``.

        Args:
            prompt: The user's change request

        Returns:
            EditPlan with files in the order the model listed them

        Raises:
            ClientInputError: If the prompt is empty or whitespace-only
            UpstreamError: If the completion endpoint answers with an error status
            GenerationParseError: If the reply is not a usable edit plan
        """
        if not prompt or not prompt.strip():
            raise ClientInputError("No prompt provided")

        text = self.completion.complete(
            system=SYSTEM_PROMPT,
            prompt=prompt,
            max_tokens=PLANNER_MAX_TOKENS,
            temperature=PLANNER_TEMPERATURE,
        )
        if not text:
            raise GenerationParseError("Model returned no content")

        parsed = extract_json_object(text)
        if not parsed.ok:
            raise GenerationParseError(parsed.diagnostic, raw=raw_preview(text))
        if parsed.strategy == "embedded":
            logger.info("Recovered edit plan JSON embedded in surrounding text")

        return self._to_edit_plan(parsed.value, text)

    def _to_edit_plan(self, payload: dict[str, Any], text: str) -> EditPlan:
        files = payload.get("files")
        if not isinstance(files, list):
            raise GenerationParseError(
                "Model returned no files. Raw: " + raw_preview(text),
                raw=raw_preview(text),
            )

        try:
            edits = [FileEdit.model_validate(item) for item in files]
            return EditPlan(
                files=edits,
                pr_title=payload.get("prTitle"),
                pr_body=payload.get("prBody"),
            )
        except ValidationError as exc:
            raise GenerationParseError(
                f"Model returned malformed file entries: {exc.error_count()} error(s)",
                raw=raw_preview(text),
            ) from exc
