"""Environment-sourced configuration.

Settings are read once at startup and passed explicitly to handlers, clients
and the orchestrator; nothing below this module reads the environment.
"""

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict

from docs_edit_bot.agents.exceptions import ServerConfigError

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_GITHUB_API_URL = "https://api.github.com"

# Safe keys allowed in config output (no secrets)
_SAFE_CONFIG_KEYS = frozenset({
    "llm_provider",
    "openai_model",
    "anthropic_model",
    "repo_owner",
    "repo_name",
    "target_branch",
    "github_api_url",
})


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class Settings(BaseModel):
    """Credentials, model choice, and target repository identity."""

    model_config = ConfigDict(frozen=True)

    llm_provider: Literal["openai", "anthropic"] = "openai"
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    anthropic_api_key: str | None = None
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL
    github_token: str | None = None
    repo_owner: str | None = None
    repo_name: str | None = None
    target_branch: str | None = None
    github_api_url: str = DEFAULT_GITHUB_API_URL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``).

        Raises:
            ServerConfigError: If LLM_PROVIDER names an unsupported provider.
        """
        env = os.environ if environ is None else environ
        provider = (_clean(env.get("LLM_PROVIDER")) or "openai").lower()
        if provider not in {"openai", "anthropic"}:
            raise ServerConfigError(f"Unsupported LLM_PROVIDER: {provider}")
        return cls(
            llm_provider=provider,
            openai_api_key=_clean(env.get("OPENAI_API_KEY")),
            openai_model=_clean(env.get("OPENAI_MODEL")) or DEFAULT_OPENAI_MODEL,
            anthropic_api_key=_clean(env.get("ANTHROPIC_API_KEY")),
            anthropic_model=_clean(env.get("ANTHROPIC_MODEL")) or DEFAULT_ANTHROPIC_MODEL,
            github_token=_clean(env.get("GITHUB_TOKEN")),
            repo_owner=_clean(env.get("REPO_OWNER")),
            repo_name=_clean(env.get("REPO_NAME")),
            target_branch=_clean(env.get("TARGET_BRANCH")),
            github_api_url=_clean(env.get("GITHUB_API_URL")) or DEFAULT_GITHUB_API_URL,
        )

    @property
    def model_api_key(self) -> str | None:
        """Credential for the selected model provider."""
        if self.llm_provider == "anthropic":
            return self.anthropic_api_key
        return self.openai_api_key

    @property
    def model_api_key_name(self) -> str:
        if self.llm_provider == "anthropic":
            return "ANTHROPIC_API_KEY"
        return "OPENAI_API_KEY"

    @property
    def model_name(self) -> str:
        if self.llm_provider == "anthropic":
            return self.anthropic_model
        return self.openai_model

    @property
    def has_repository(self) -> bool:
        return bool(self.repo_owner and self.repo_name)

    def safe_dict(self) -> dict:
        """Return settings without credentials, for display."""
        data = self.model_dump()
        safe = {key: value for key, value in data.items() if key in _SAFE_CONFIG_KEYS}
        safe["model_api_key_set"] = self.model_api_key is not None
        safe["github_token_set"] = self.github_token is not None
        return safe
