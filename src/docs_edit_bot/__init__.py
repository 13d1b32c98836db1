"""LLM-assisted documentation edits committed as GitHub pull requests."""

__version__ = "0.1.0"
