from docs_edit_bot.utils.json_extract import extract_json_object, find_object_span, raw_preview

__all__ = ["extract_json_object", "find_object_span", "raw_preview"]
