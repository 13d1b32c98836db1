"""Best-effort JSON object extraction from model output.

Models are told to answer with bare JSON but sometimes wrap it in markdown
fences or commentary. Extraction runs two strict stages and never raises:

1. parse the whole text;
2. parse the span from the first ``{`` to the last ``}``.
"""

import json

from docs_edit_bot.models import JsonParseResult

RAW_PREVIEW_CHARS = 1000


def raw_preview(text: str, limit: int = RAW_PREVIEW_CHARS) -> str:
    """Return the leading slice of raw model text used in diagnostics."""
    return text[:limit]


def _load_object(candidate: str) -> dict | None:
    try:
        value = json.loads(candidate)
    except (json.JSONDecodeError, TypeError):
        return None
    return value if isinstance(value, dict) else None


def find_object_span(text: str) -> str | None:
    """Return the greedy ``{...}`` span of ``text``, or None if there is none."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def extract_json_object(text: str) -> JsonParseResult:
    """Extract a JSON object from model text.

    Args:
        text: Raw completion text.

    Returns:
        JsonParseResult with ``ok=True`` and the parsed object, or ``ok=False``
        and a diagnostic embedding the first characters of the raw text.
    """
    value = _load_object(text)
    if value is not None:
        return JsonParseResult(ok=True, value=value, strategy="direct")

    span = find_object_span(text)
    if span is not None:
        value = _load_object(span)
        if value is not None:
            return JsonParseResult(ok=True, value=value, strategy="embedded")

    return JsonParseResult(
        ok=False,
        diagnostic="Failed to parse JSON from model output. Raw output: " + raw_preview(text),
    )
