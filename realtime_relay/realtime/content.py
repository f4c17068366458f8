"""Text extraction from the provider's nested content shapes.

Unknown shapes, and shapes nested deeper than ``MAX_CONTENT_DEPTH``, yield an
empty string rather than raising.
"""

from __future__ import annotations

from typing import Any

MAX_CONTENT_DEPTH = 32


def text_from_content(content: Any, _depth: int = 0) -> str:
    if not content or _depth > MAX_CONTENT_DEPTH:
        return ""
    if isinstance(content, str):
        return content
    depth = _depth + 1
    if isinstance(content, list):
        return "".join(text_from_content(item, depth) for item in content)
    if isinstance(content, dict):
        if isinstance(content.get("text"), str):
            return content["text"]
        if isinstance(content.get("transcript"), str):
            return content["transcript"]
        if isinstance(content.get("output_text"), list):
            return text_from_content(content["output_text"], depth)
        if isinstance(content.get("content"), list | dict):
            return text_from_content(content["content"], depth)
        if content.get("delta"):
            return text_from_content(content["delta"], depth)
    return ""


def extract_delta_text(payload: dict[str, Any]) -> str:
    delta = payload.get("delta")
    if delta:
        text = text_from_content(delta)
        if text:
            return text
    item = payload.get("item")
    if isinstance(item, dict) and item.get("content"):
        return text_from_content(item["content"])
    return ""


def extract_completed_text(payload: dict[str, Any], fallback: str = "") -> str:
    response = payload.get("response")
    if isinstance(response, dict):
        for key in ("output_text", "output", "content"):
            if isinstance(response.get(key), list):
                return text_from_content(response[key])
    return fallback


__all__ = ["MAX_CONTENT_DEPTH", "extract_completed_text", "extract_delta_text", "text_from_content"]
