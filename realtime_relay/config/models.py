"""Realtime model configuration (env names and defaults only)."""

from __future__ import annotations

ENV_OPENAI_REALTIME_MODEL = "OPENAI_REALTIME_MODEL"
DEFAULT_OPENAI_REALTIME_MODEL = "gpt-4o-realtime-preview-2024-12-17"

ENV_OPENAI_REALTIME_VOICE = "OPENAI_REALTIME_VOICE"
DEFAULT_OPENAI_REALTIME_VOICE = "verse"

__all__ = [
    "DEFAULT_OPENAI_REALTIME_MODEL",
    "DEFAULT_OPENAI_REALTIME_VOICE",
    "ENV_OPENAI_REALTIME_MODEL",
    "ENV_OPENAI_REALTIME_VOICE",
]
