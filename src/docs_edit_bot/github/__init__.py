"""GitHub integration for committing edit plans."""

from docs_edit_bot.github.client import GitHubClient, encode_content

__all__ = ["GitHubClient", "encode_content"]
