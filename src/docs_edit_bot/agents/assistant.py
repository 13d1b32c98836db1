"""Developer assistant that answers with copy-pasteable file content."""

from docs_edit_bot.agents.exceptions import ClientInputError
from docs_edit_bot.agents.llm import CompletionClient

ASSISTANT_MAX_TOKENS = 1200
ASSISTANT_TEMPERATURE = 0.2
EMPTY_REPLY = "No reply"

SYSTEM_INSTRUCTIONS = """\
You are an AI developer assistant for a Docsify documentation site. The user will ask you to \
produce or update files (Markdown, HTML, or JSON).
- Output must be plain text with code blocks where appropriate.
- When giving file contents, wrap them in markdown triple-backticks with a filename header when possible.
- Do NOT attempt to directly modify the GitHub repo; instead return the exact file contents and a \
suggested commit message.
- Keep answers concise and give exact copy-pasteable text.
"""


class DevAssistant:
    """Forwards a prompt to the completion endpoint under a fixed system instruction."""

    def __init__(self, completion: CompletionClient):
        self.completion = completion

    def reply(self, prompt: str | None) -> str:
        """Return the model's reply to ``prompt``.

        Raises:
            ClientInputError: If the prompt is missing, empty or whitespace-only
            UpstreamError: If the completion endpoint answers with an error status
        """
        if not prompt or not prompt.strip():
            raise ClientInputError("Empty prompt")

        text = self.completion.complete(
            system=SYSTEM_INSTRUCTIONS,
            prompt=prompt,
            max_tokens=ASSISTANT_MAX_TOKENS,
            temperature=ASSISTANT_TEMPERATURE,
        )
        return text or EMPTY_REPLY
