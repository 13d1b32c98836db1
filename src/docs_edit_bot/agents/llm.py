"""Single-shot chat completion against OpenAI or Anthropic."""

import logging
from typing import Any, Literal

import anthropic
import openai

from docs_edit_bot.agents.exceptions import ServerConfigError, UpstreamError

logger = logging.getLogger(__name__)


def _status_error_body(error: Exception) -> str:
    response = getattr(error, "response", None)
    if response is not None:
        return response.text
    return str(error)


class CompletionClient:
    """Issues exactly one completion request per call; no retries, no fallback."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        provider: Literal["openai", "anthropic"] = "openai",
        client: Any = None,
    ):
        """Initialize the completion client.

        Args:
            api_key: Credential for the selected provider
            model: Model ID sent with every request
            provider: "openai" or "anthropic"
            client: Pre-built SDK client (tests inject fakes here)

        Raises:
            ServerConfigError: If no API key is given and no client is injected
        """
        if provider not in {"openai", "anthropic"}:
            raise ServerConfigError(f"Unsupported provider: {provider}")
        if client is None and not api_key:
            raise ServerConfigError(f"No API key configured for provider '{provider}'")
        self.provider = provider
        self.model = model
        if client is not None:
            self._client = client
        elif provider == "anthropic":
            self._client = anthropic.Anthropic(api_key=api_key, max_retries=0)
        else:
            self._client = openai.OpenAI(api_key=api_key, max_retries=0)

    @classmethod
    def from_settings(cls, settings) -> "CompletionClient":
        return cls(
            api_key=settings.model_api_key,
            model=settings.model_name,
            provider=settings.llm_provider,
        )

    def complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Send one system+user exchange and return the first completion's text.

        Returns:
            The completion text, or "" when the provider returned no content.

        Raises:
            UpstreamError: If the provider answers with a non-success status
        """
        logger.debug("Requesting %s completion with model %s", self.provider, self.model)
        if self.provider == "anthropic":
            return self._complete_anthropic(system, prompt, max_tokens, temperature)
        return self._complete_openai(system, prompt, max_tokens, temperature)

    def _complete_openai(self, system: str, prompt: str, max_tokens: int, temperature: float) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.APIStatusError as error:
            raise UpstreamError(
                f"OpenAI error: {error.status_code}",
                service="openai",
                status=error.status_code,
                body=_status_error_body(error),
            ) from error

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""

    def _complete_anthropic(self, system: str, prompt: str, max_tokens: int, temperature: float) -> str:
        try:
            response = self._client.messages.create(
                model=self.model,
                system=system,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except anthropic.APIStatusError as error:
            raise UpstreamError(
                f"Anthropic error: {error.status_code}",
                service="anthropic",
                status=error.status_code,
                body=_status_error_body(error),
            ) from error

        for block in getattr(response, "content", None) or []:
            if getattr(block, "type", None) == "text":
                return block.text or ""
        return ""
